"""Unit tests for extension-based content types."""

from __future__ import annotations

import pytest

from archive_pages.server.mime import (
    DEFAULT_CONTENT_TYPE,
    content_type_for_extension,
    content_type_for_path,
)


@pytest.mark.parametrize(
    ("extension", "expected"),
    [
        ("html", "text/html; charset=utf-8"),
        ("CSS", "text/css; charset=utf-8"),
        (".js", "text/javascript; charset=utf-8"),
        ("json", "application/json; charset=utf-8"),
        ("svg", "image/svg+xml"),
        ("woff2", "font/woff2"),
    ],
)
def test_known_extensions(extension: str, expected: str) -> None:
    """Known extensions map to their content type regardless of case."""
    assert content_type_for_extension(extension) == expected


@pytest.mark.parametrize("extension", ["", "exe", "tar.gz"])
def test_unknown_extensions_fall_back_to_octet_stream(extension: str) -> None:
    """Anything unrecognized is served as an opaque byte stream."""
    assert content_type_for_extension(extension) == DEFAULT_CONTENT_TYPE


def test_path_lookup_uses_final_suffix() -> None:
    """Only the last suffix of a file name is considered."""
    assert content_type_for_path("search-index.json") == (
        "application/json; charset=utf-8"
    )
    assert content_type_for_path("README") == DEFAULT_CONTENT_TYPE
