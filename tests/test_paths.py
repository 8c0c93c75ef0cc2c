"""Unit tests for canonical output paths and relative links."""

from __future__ import annotations

import pytest

from archive_pages.paths import (
    module_name,
    output_path,
    page_depth,
    relative_asset_url,
    relative_page_url,
)


@pytest.mark.parametrize(
    ("identifier_path", "expected"),
    [
        ("/documentation/MyKit", "documentation/mykit/index.html"),
        (
            "/documentation/MyKit/Widget/init()",
            "documentation/mykit/widget/init()/index.html",
        ),
        ("/tutorials/MyKit/Basics", "tutorials/mykit/basics/index.html"),
        ("documentation//MyKit/", "documentation/mykit/index.html"),
        ("/", "index.html"),
    ],
)
def test_output_path_lowercases_and_appends_index(
    identifier_path: str, expected: str
) -> None:
    """Output paths are lowercase, slash-joined, and end in index.html."""
    assert output_path(identifier_path) == expected


def test_depth_matches_path_components() -> None:
    """Depth counts non-empty identifier path segments."""
    assert page_depth("/documentation/MyKit/Widget") == 3
    assert page_depth("/") == 0


def test_relative_page_url_climbs_to_root() -> None:
    """Links from a nested page climb back to the site root first."""
    url = relative_page_url("/documentation/mykit/widget", depth=2)
    assert url == "../../documentation/mykit/widget/index.html"


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        (
            "/documentation/MyKit/Widget",
            "../../documentation/mykit/widget/index.html",
        ),
        (
            "/documentation/MyKit/Widget#Declaring-A-Widget",
            "../../documentation/mykit/widget/index.html#Declaring-A-Widget",
        ),
    ],
)
def test_relative_page_url_targets_lowercase_output(
    url: str, expected: str
) -> None:
    """Links use the lowercase path pages are written to; fragments keep case."""
    assert relative_page_url(url, depth=2) == expected
    assert expected.startswith("../../" + output_path(url.partition("#")[0]))


@pytest.mark.parametrize("url", ["#overview", "https://example.com", "http://x.y/z"])
def test_relative_page_url_passes_through_absolute_links(url: str) -> None:
    """Anchors and absolute URLs are not rewritten."""
    assert relative_page_url(url, depth=4) == url


def test_relative_asset_url_only_rewrites_site_absolute_paths() -> None:
    """Media paths rooted at the site become relative to the page."""
    assert relative_asset_url("/images/a.png", depth=2) == "../../images/a.png"
    assert relative_asset_url("images/a.png", depth=2) == "images/a.png"


@pytest.mark.parametrize(
    ("identifier_path", "expected"),
    [
        ("/documentation/MyKit/Widget", "MyKit"),
        ("/tutorials/MyKit/Basics", "MyKit"),
        ("/documentation", ""),
        ("/other/MyKit", ""),
    ],
)
def test_module_name(identifier_path: str, expected: str) -> None:
    """The module is the segment after documentation or tutorials."""
    assert module_name(identifier_path) == expected
