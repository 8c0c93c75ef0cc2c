"""Static assets shared by every generated page."""

from __future__ import annotations

import logging
import shutil
import typing as typ
from pathlib import Path

from archive_pages._constants import (
    ARCHIVE_MEDIA_DIRS,
    LUNR_SCRIPT_PATH,
    SEARCH_SCRIPT_PATH,
    STYLESHEET_PATH,
)

if typ.TYPE_CHECKING:
    from archive_pages.generator.page_builder import PageBuilder

STATIC_DIR = Path(__file__).resolve().parents[1] / "static"


def prepare_output_dir(output_dir: Path) -> None:
    """Remove ``output_dir`` if present and recreate it with ``css`` and ``js``."""
    if output_dir.exists():
        shutil.rmtree(output_dir)
    (output_dir / "css").mkdir(parents=True)
    (output_dir / "js").mkdir()


def write_assets(
    output_dir: Path,
    builder: PageBuilder,
    *,
    logger: logging.Logger | None = None,
) -> list[Path]:
    """Write the stylesheet and, when search is enabled, the search scripts."""
    log = logger or logging.getLogger(__name__)
    stylesheet = output_dir / STYLESHEET_PATH
    stylesheet.parent.mkdir(parents=True, exist_ok=True)
    stylesheet.write_text(builder.render_stylesheet(), encoding="utf-8")
    written = [stylesheet]
    if builder.config.include_search:
        for relative in (SEARCH_SCRIPT_PATH, LUNR_SCRIPT_PATH):
            destination = output_dir / relative
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(STATIC_DIR / Path(relative).name, destination)
            written.append(destination)
    log.debug("wrote %d asset files", len(written))
    return written


def copy_media(archive_dir: Path, output_dir: Path) -> list[Path]:
    """Copy the archive's media directories into the site.

    Returns the copied files. Directories missing from the archive are
    skipped; files already present in the output are overwritten.
    """
    copied: list[Path] = []
    for name in ARCHIVE_MEDIA_DIRS:
        source = archive_dir / name
        if not source.is_dir():
            continue
        for path in sorted(source.rglob("*")):
            if not path.is_file():
                continue
            destination = output_dir / name / path.relative_to(source)
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(path, destination)
            copied.append(destination)
    return copied


__all__ = ["STATIC_DIR", "copy_media", "prepare_output_dir", "write_assets"]
