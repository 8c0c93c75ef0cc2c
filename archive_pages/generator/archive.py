"""Render documentation archives into a static site.

:class:`ArchiveSiteGenerator` owns the order of a run: load and merge the
navigation indices, prepare the output tree, sweep every render node through
the site builder and the search index, copy media, and finally assemble the
tutorial overview, the landing page, and the search index file.

Examples
--------
>>> from pathlib import Path
>>> from archive_pages.config import SiteConfig
>>> generator = ArchiveSiteGenerator(SiteConfig(output_dir=Path("site")))
>>> result = generator.render_archive(Path("MyKit.doccarchive"))  # doctest: +SKIP
>>> result.generated_pages  # doctest: +SKIP
42
"""

from __future__ import annotations

import logging
import tempfile
import threading
import typing as typ
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import msgspec
from jinja2 import TemplateError

from archive_pages import toolchain
from archive_pages._constants import (
    ARCHIVE_DATA_DIR,
    ARCHIVE_DOCUMENTATION_DIR,
    ARCHIVE_INDEX_PATH,
    ARCHIVE_TUTORIALS_DIR,
    SEARCH_INDEX_FILENAME,
)
from archive_pages.errors import ArchiveParsingError
from archive_pages.generator.assets import copy_media, prepare_output_dir, write_assets
from archive_pages.generator.consumer import StaticHTMLConsumer
from archive_pages.generator.landing import write_landing_page, write_tutorial_overviews
from archive_pages.generator.link_resolver import DocLinkResolver
from archive_pages.generator.page_builder import PageBuilder
from archive_pages.models import (
    GenerationWarning,
    Severity,
    SourceLocation,
    decode_render_node,
)
from archive_pages.navigation import NavigationIndex
from archive_pages.paths import module_name
from archive_pages.search_index import SearchIndexBuilder, build_document

if typ.TYPE_CHECKING:
    from archive_pages.config import SiteConfig
    from archive_pages.models import GenerationResult

NO_DOCUMENTATION = "No documentation data found in archive"
_RENDER_ERRORS = (
    AttributeError,
    LookupError,
    OSError,
    TemplateError,
    TypeError,
    ValueError,
)


def render_node_files(archive_dir: Path) -> list[Path]:
    """Return every render-node JSON file of an archive.

    Files under ``data/documentation`` and, when present, ``data/tutorials``
    are listed; hidden files and directories are skipped.
    """
    data_dir = archive_dir / ARCHIVE_DATA_DIR
    files: list[Path] = []
    for section in (ARCHIVE_DOCUMENTATION_DIR, ARCHIVE_TUTORIALS_DIR):
        root = data_dir / section
        if not root.is_dir():
            continue
        files.extend(
            path
            for path in root.rglob("*.json")
            if path.is_file()
            and not any(part.startswith(".") for part in path.relative_to(root).parts)
        )
    return sorted(files)


def load_navigation_index(
    archive_dir: Path, logger: logging.Logger | None = None
) -> NavigationIndex | None:
    """Load an archive's navigation index, or ``None`` when unusable."""
    log = logger or logging.getLogger(__name__)
    path = archive_dir.joinpath(*ARCHIVE_INDEX_PATH)
    if not path.is_file():
        log.info("no navigation index at %s", path)
        return None
    try:
        index = NavigationIndex.load(path)
    except (OSError, msgspec.DecodeError) as exc:
        log.warning("failed to load navigation index %s: %s", path, exc)
        return None
    log.info("loaded navigation index from %s", path)
    return index


class ArchiveSiteGenerator:
    """Turn one or more documentation archives into a static site.

    Parameters
    ----------
    config : SiteConfig
        Site settings; ``config.output_dir`` is replaced on every run.
    package_targets : frozenset[str]
        The package's own module names. Empty means every module is
        documented regardless of the dependency policy.
    package_name : str, optional
        Name shown in the landing page title.
    logger : logging.Logger, optional
        Destination for progress messages.
    """

    def __init__(
        self,
        config: SiteConfig,
        *,
        package_targets: frozenset[str] = frozenset(),
        package_name: str | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config
        self.package_targets = package_targets
        self.package_name = package_name
        self.logger = logger or logging.getLogger(__name__)
        self._skipped: set[str] = set()
        self._skipped_lock = threading.Lock()

    @property
    def output_dir(self) -> Path:
        """Return the directory the site is written to."""
        return self.config.output_dir

    def render_archive(self, archive_dir: Path) -> GenerationResult:
        """Render a single archive."""
        return self.render_archives([archive_dir])

    def render_archives(self, archive_dirs: typ.Sequence[Path]) -> GenerationResult:
        """Render several archives into one site with a merged sidebar.

        Raises
        ------
        ArchiveParsingError
            If an archive has no ``data/documentation`` directory.
        """
        for archive_dir in archive_dirs:
            if not (archive_dir / ARCHIVE_DATA_DIR / ARCHIVE_DOCUMENTATION_DIR).is_dir():
                self.logger.error("%s has no documentation data", archive_dir)
                raise ArchiveParsingError(NO_DOCUMENTATION)

        indices = [
            index
            for archive_dir in archive_dirs
            if (index := load_navigation_index(archive_dir, self.logger)) is not None
        ]
        navigation = NavigationIndex.merge(indices) if indices else None

        output_dir = self.output_dir
        prepare_output_dir(output_dir)
        builder = PageBuilder(self.config, navigation)
        write_assets(output_dir, builder, logger=self.logger)

        consumer = StaticHTMLConsumer(
            self.config,
            output_dir,
            page_builder=builder,
            link_resolver=self._link_resolver(navigation),
            logger=self.logger,
        )
        search = SearchIndexBuilder() if self.config.include_search else None
        self._skipped = set()

        for archive_dir in archive_dirs:
            self.logger.info("rendering pages from %s", archive_dir)
            self._sweep(archive_dir, consumer, search)
            consumer.consume_assets(copy_media(archive_dir, output_dir))

        write_tutorial_overviews(output_dir, builder, logger=self.logger)
        write_landing_page(
            output_dir, builder, package_name=self.package_name, logger=self.logger
        )
        search_path = None
        if search is not None:
            search_path = search.write_index(output_dir / SEARCH_INDEX_FILENAME)
            self.logger.info("wrote search index %s", search_path)
        return consumer.result(search_path)

    def generate(
        self,
        package_dir: Path,
        *,
        symbol_graph_dir: Path | None = None,
        scratch_path: Path | None = None,
    ) -> GenerationResult:
        """Build archives for a Swift package with the toolchain, then render.

        Pre-generated symbol graphs skip the build and document every module
        they contain.
        """
        if self.package_name is None:
            self.package_name = package_dir.resolve().name
        with tempfile.TemporaryDirectory(prefix="archive-pages-") as work:
            archives = toolchain.build_archives(
                package_dir,
                Path(work),
                symbol_graph_dir=symbol_graph_dir,
                targets=self.config.targets,
                scratch_path=scratch_path,
            )
            if symbol_graph_dir is None:
                self.package_targets = toolchain.package_targets(package_dir)
            else:
                self.package_targets = frozenset()
            return self.render_archives(archives)

    def _link_resolver(self, navigation: NavigationIndex | None) -> DocLinkResolver:
        documented = list(self.config.targets)
        if navigation is not None:
            documented.extend(module.title for module in navigation.all_modules())
        return DocLinkResolver(documented, self.config.external_documentation_urls)

    def _sweep(
        self,
        archive_dir: Path,
        consumer: StaticHTMLConsumer,
        search: SearchIndexBuilder | None,
    ) -> None:
        files = render_node_files(archive_dir)
        self.logger.debug("found %d render nodes in %s", len(files), archive_dir)

        def process(path: Path) -> None:
            self._process(path, consumer, search)

        with ThreadPoolExecutor(max_workers=self.config.jobs) as pool:
            for _ in pool.map(process, files):
                pass

    def _process(
        self,
        path: Path,
        consumer: StaticHTMLConsumer,
        search: SearchIndexBuilder | None,
    ) -> None:
        try:
            node = decode_render_node(path.read_bytes())
        except (OSError, msgspec.DecodeError) as exc:
            consumer.add_warning(
                GenerationWarning(
                    severity=Severity.WARNING,
                    summary=f"Failed to decode {path.name}",
                    source=SourceLocation(file=str(path), line=1),
                    explanation=str(exc),
                )
            )
            return

        module = module_name(node.path)
        if not self.config.should_include_module(module, self.package_targets):
            with self._skipped_lock:
                first = module not in self._skipped
                self._skipped.add(module)
            if first:
                self.logger.info("skipping dependency %s", module)
            return

        try:
            document = build_document(node) if search is not None else None
            consumer.consume_render_node(node)
        except _RENDER_ERRORS as exc:
            consumer.add_warning(
                GenerationWarning(
                    severity=Severity.WARNING,
                    summary=f"Failed to render {node.path}",
                    source=SourceLocation(file=str(path), line=1),
                    explanation=str(exc),
                )
            )
            return
        if search is not None and document is not None:
            search.add(document)


__all__ = [
    "NO_DOCUMENTATION",
    "ArchiveSiteGenerator",
    "load_navigation_index",
    "render_node_files",
]
