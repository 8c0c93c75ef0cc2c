"""Landing and tutorial overview pages assembled from the rendered site.

Both pages are built after the sweep by reading the HTML that was just
written, so they reflect exactly which modules and tutorials made it into the
output tree.
"""

from __future__ import annotations

import dataclasses as dc
import html
import logging
import re
import typing as typ

from archive_pages._constants import (
    ARCHIVE_DOCUMENTATION_DIR,
    ARCHIVE_TUTORIALS_DIR,
    PAGE_FILENAME,
)

if typ.TYPE_CHECKING:
    from pathlib import Path

    from archive_pages.config import SiteConfig
    from archive_pages.generator.page_builder import PageBuilder

OVERVIEW_DIR = "tutorials"
LANDING_SUBTITLE = "API Reference Documentation"

_TITLE = re.compile(r"<title>(.*?)</title>", re.DOTALL)
_ABSTRACT = re.compile(r'<p class="abstract">(.*?)</p>', re.DOTALL)
_OVERVIEW_TITLE = re.compile(r'<h1 class="overview-title">(.*?)</h1>', re.DOTALL)
_NAV_TITLE = re.compile(r'class="tutorial-nav-title">(.*?)</a>', re.DOTALL)
_TUTORIAL_ABSTRACT = re.compile(
    r'<div class="tutorial-abstract">\s*<p>(.*?)</p>', re.DOTALL
)
_TAG = re.compile(r"<[^>]+>")


def _text(fragment: str) -> str:
    return html.unescape(_TAG.sub("", fragment)).strip()


def _read(path: Path) -> str | None:
    if not path.is_file():
        return None
    return path.read_text(encoding="utf-8")


def _subdirectories(path: Path) -> list[Path]:
    if not path.is_dir():
        return []
    return sorted(child for child in path.iterdir() if child.is_dir())


@dc.dataclass(frozen=True, slots=True)
class ModuleCard:
    """A module or tutorial collection listed on the landing page."""

    name: str
    abstract: str
    href: str
    count: int
    label: str = "symbols"


@dc.dataclass(frozen=True, slots=True)
class TutorialCard:
    """A tutorial listed on a generated tutorial overview."""

    title: str
    abstract: str
    href: str


def module_info(module_dir: Path) -> tuple[str, str]:
    """Return the display name and abstract of a rendered module directory."""
    page = _read(module_dir / PAGE_FILENAME)
    if page is None:
        return module_dir.name.capitalize(), f"Documentation for {module_dir.name}"
    title = module_dir.name.capitalize()
    if match := _TITLE.search(page):
        title = _text(match.group(1))
    abstract = f"Documentation for {title}"
    if match := _ABSTRACT.search(page):
        abstract = _text(match.group(1)) or abstract
    return title, abstract


def count_pages(module_dir: Path) -> int:
    """Return how many pages sit below a module's own landing page."""
    return max(sum(1 for _ in module_dir.rglob(PAGE_FILENAME)) - 1, 0)


def collect_modules(output_dir: Path, config: SiteConfig) -> list[ModuleCard]:
    """Return one card per rendered module, or per configured target if none."""
    modules: list[ModuleCard] = []
    for module_dir in _subdirectories(output_dir / ARCHIVE_DOCUMENTATION_DIR):
        name, abstract = module_info(module_dir)
        modules.append(
            ModuleCard(
                name=name,
                abstract=abstract,
                href=f"{ARCHIVE_DOCUMENTATION_DIR}/{module_dir.name}/{PAGE_FILENAME}",
                count=count_pages(module_dir),
            )
        )
    if not modules:
        modules = [
            ModuleCard(
                name=target,
                abstract=f"Documentation for {target}",
                href=f"{ARCHIVE_DOCUMENTATION_DIR}/{target.lower()}/{PAGE_FILENAME}",
                count=0,
            )
            for target in config.targets
        ]
    return sorted(modules, key=lambda card: card.name.lower())


def collect_tutorials(output_dir: Path) -> list[ModuleCard]:
    """Return one card per tutorial collection under ``tutorials/``."""
    root = output_dir / ARCHIVE_TUTORIALS_DIR
    overview_page = _read(root / OVERVIEW_DIR / PAGE_FILENAME)
    cards: list[ModuleCard] = []
    for module_dir in _subdirectories(root):
        if module_dir.name == OVERVIEW_DIR:
            continue
        count = len(_subdirectories(module_dir))
        if count == 0:
            continue
        title = f"{module_dir.name.capitalize()} Tutorials"
        if overview_page is not None:
            href = f"{ARCHIVE_TUTORIALS_DIR}/{OVERVIEW_DIR}/{PAGE_FILENAME}"
            page = overview_page
        else:
            href = f"{ARCHIVE_TUTORIALS_DIR}/{module_dir.name}/{PAGE_FILENAME}"
            page = _read(module_dir / PAGE_FILENAME) or ""
        if match := _OVERVIEW_TITLE.search(page):
            title = _text(match.group(1))
        cards.append(
            ModuleCard(
                name=title,
                abstract="Hands-on tutorials.",
                href=href,
                count=count,
                label="tutorials",
            )
        )
    return cards


def write_landing_page(
    output_dir: Path,
    builder: PageBuilder,
    *,
    package_name: str | None = None,
    logger: logging.Logger | None = None,
) -> Path:
    """Write ``<output>/index.html`` listing every module and tutorial set.

    Parameters
    ----------
    output_dir : Path
        Root of the generated site, already populated with pages.
    builder : PageBuilder
        Supplies the template environment and shared page chrome.
    package_name : str, optional
        Name used in the page title; defaults to the output directory's
        parent, which is the package root for the default output location.
    logger : logging.Logger, optional
        Destination for progress messages.
    """
    log = logger or logging.getLogger(__name__)
    name = package_name or output_dir.resolve().parent.name or "Package"
    page = builder.render_template(
        "index_page.jinja",
        root="",
        title=f"{name} Documentation",
        subtitle=LANDING_SUBTITLE,
        include_search=builder.config.include_search,
        modules=collect_modules(output_dir, builder.config),
        tutorials=collect_tutorials(output_dir),
    )
    destination = output_dir / PAGE_FILENAME
    destination.write_text(page, encoding="utf-8")
    log.info("wrote %s", destination)
    return destination


def tutorial_order(page: str, module: str) -> list[str]:
    """Return tutorial directory names in the order a tutorial page links them.

    >>> tutorial_order('<a href="kit/b/index.html"><a href="kit/a/index.html">', "kit")
    ['b', 'a']
    """
    pattern = re.compile(
        rf'href="[^"]*{re.escape(module)}/([^/"]+)/index\.html"', re.IGNORECASE
    )
    order: list[str] = []
    for match in pattern.finditer(page):
        if match.group(1) not in order:
            order.append(match.group(1))
    return order


def tutorial_info(page: str, fallback: str) -> tuple[str, str]:
    """Return the title and abstract of a rendered tutorial page."""
    title = fallback.replace("-", " ").title()
    if match := _TITLE.search(page):
        title = _text(match.group(1)) or title
    abstract = ""
    if match := _TUTORIAL_ABSTRACT.search(page):
        abstract = _text(match.group(1))
    return title, abstract


def write_tutorial_overviews(
    output_dir: Path,
    builder: PageBuilder,
    *,
    logger: logging.Logger | None = None,
) -> list[Path]:
    """Write ``tutorials/tutorials/index.html`` for collections without one.

    A tutorial module that already has its own overview page is left alone.
    The tutorial order comes from the navigation menu of the first tutorial
    page that links its siblings.
    """
    log = logger or logging.getLogger(__name__)
    root = output_dir / ARCHIVE_TUTORIALS_DIR
    written: list[Path] = []
    for module_dir in _subdirectories(root):
        module = module_dir.name
        if module == OVERVIEW_DIR or (module_dir / PAGE_FILENAME).exists():
            continue
        overview_title = f"{module.capitalize()} Tutorials"
        order: list[str] = []
        for tutorial_dir in _subdirectories(module_dir):
            page = _read(tutorial_dir / PAGE_FILENAME)
            if page is None:
                continue
            if match := _NAV_TITLE.search(page):
                overview_title = _text(match.group(1)) or overview_title
            order = tutorial_order(page, module)
            if order:
                break

        cards: list[TutorialCard] = []
        for name in order:
            page = _read(module_dir / name / PAGE_FILENAME)
            if page is None:
                continue
            title, abstract = tutorial_info(page, name)
            cards.append(
                TutorialCard(
                    title=title,
                    abstract=abstract,
                    href=f"../{module}/{name}/{PAGE_FILENAME}",
                )
            )
        if not cards:
            continue

        destination = root / OVERVIEW_DIR / PAGE_FILENAME
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(
            builder.render_template(
                "tutorials_landing.jinja",
                root="../../",
                title=overview_title,
                cards=cards,
            ),
            encoding="utf-8",
        )
        log.info("wrote tutorial overview %s", destination)
        written.append(destination)
    return written


__all__ = [
    "ModuleCard",
    "TutorialCard",
    "collect_modules",
    "collect_tutorials",
    "count_pages",
    "module_info",
    "tutorial_info",
    "tutorial_order",
    "write_landing_page",
    "write_tutorial_overviews",
]
