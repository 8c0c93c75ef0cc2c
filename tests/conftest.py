"""Shared pytest fixtures for archive rendering tests."""

from __future__ import annotations

import typing as typ

import pytest

from archive_builders import sample_index, sample_nodes, write_archive

if typ.TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def sample_archive(tmp_path: Path) -> Path:
    """Return an archive with a module page, a struct, and an article."""
    archive = write_archive(
        tmp_path / "MyKit.doccarchive", sample_nodes(), index=sample_index()
    )
    images = archive / "images" / "com.example.MyKit"
    images.mkdir(parents=True)
    (images / "hero.png").write_bytes(b"\x89PNG\r\n\x1a\n")
    return archive


@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
    """Return the output directory used for generated sites."""
    return tmp_path / "site"
