"""Write rendered pages to disk and keep the run's statistics."""

from __future__ import annotations

import logging
import threading
import typing as typ

from archive_pages.generator.page_builder import PageBuilder
from archive_pages.generator.sink import OutputSink
from archive_pages.models import (
    GenerationResult,
    GenerationStats,
    GenerationWarning,
    NodeKind,
)
from archive_pages.paths import output_path, page_depth

if typ.TYPE_CHECKING:
    from pathlib import Path

    from archive_pages.config import SiteConfig
    from archive_pages.generator.link_resolver import DocLinkResolver
    from archive_pages.models import JSONMapping, RenderNode
    from archive_pages.navigation import NavigationIndex

MODULE_ROLE = "collection"


class StaticHTMLConsumer(OutputSink):
    """Output sink that renders each node into ``<output>/<path>/index.html``.

    Parameters
    ----------
    config : SiteConfig
        Site settings passed through to the page builder.
    output_dir : Path
        Root of the generated site. It must already exist.
    navigation_index : NavigationIndex, optional
        Complete navigation index used for every sidebar.
    page_builder : PageBuilder, optional
        Preconfigured builder; one is created from ``config`` when omitted.
    link_resolver : DocLinkResolver, optional
        Rewrites ``doc://`` links left in rendered pages.
    logger : logging.Logger, optional
        Destination for progress messages.

    Notes
    -----
    File output happens outside the lock; distinct nodes never share an
    output path. The lock covers the counters, the warning list, and the
    merged reference table.
    """

    def __init__(
        self,
        config: SiteConfig,
        output_dir: Path,
        *,
        navigation_index: NavigationIndex | None = None,
        page_builder: PageBuilder | None = None,
        link_resolver: DocLinkResolver | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config
        self.output_dir = output_dir
        self.page_builder = page_builder or PageBuilder(config, navigation_index)
        self.link_resolver = link_resolver
        self.logger = logger or logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._stats = GenerationStats()
        self._warnings: list[GenerationWarning] = []
        self._references: dict[str, JSONMapping] = {}

    def consume_render_node(self, node: RenderNode) -> None:
        """Render ``node`` and write it to its canonical output path."""
        destination = self.output_dir / output_path(node.path)
        html = self.page_builder.build(node)
        if self.link_resolver:
            html = self.link_resolver.process(html, depth=page_depth(node.path))
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(html, encoding="utf-8")
        self.logger.debug("wrote %s", destination)

        with self._lock:
            self._stats.pages_generated += 1
            match node.kind:
                case NodeKind.SYMBOL:
                    self._stats.symbols_documented += 1
                case NodeKind.ARTICLE:
                    self._stats.articles_generated += 1
                case NodeKind.TUTORIAL:
                    self._stats.tutorials_generated += 1
            if node.metadata.role == MODULE_ROLE:
                self._stats.modules_documented += 1
            self._references.update(node.references)

    def consume_assets(self, assets: typ.Iterable[Path]) -> None:
        """Ensure the images directory exists for copied media."""
        (self.output_dir / "images").mkdir(parents=True, exist_ok=True)
        count = sum(1 for _ in assets)
        if count:
            self.logger.info("copied %d media files", count)

    def add_warning(self, warning: GenerationWarning) -> None:
        """Record a non-fatal problem."""
        with self._lock:
            self._warnings.append(warning)
        self.logger.warning("%s", warning)

    @property
    def stats(self) -> GenerationStats:
        """Return a copy of the current counters."""
        with self._lock:
            return GenerationStats(
                pages_generated=self._stats.pages_generated,
                modules_documented=self._stats.modules_documented,
                symbols_documented=self._stats.symbols_documented,
                articles_generated=self._stats.articles_generated,
                tutorials_generated=self._stats.tutorials_generated,
            )

    @property
    def references(self) -> dict[str, JSONMapping]:
        """Return a copy of the merged reference table."""
        with self._lock:
            return dict(self._references)

    @property
    def warnings(self) -> tuple[GenerationWarning, ...]:
        """Return the warnings recorded so far."""
        with self._lock:
            return tuple(self._warnings)

    def result(self, search_index_path: Path | None = None) -> GenerationResult:
        """Return an immutable summary of the finished run."""
        stats = self.stats
        return GenerationResult(
            output_dir=self.output_dir,
            generated_pages=stats.pages_generated,
            modules_documented=stats.modules_documented,
            symbols_documented=stats.symbols_documented,
            articles_generated=stats.articles_generated,
            tutorials_generated=stats.tutorials_generated,
            warnings=self.warnings,
            search_index_path=search_index_path,
        )


__all__ = ["MODULE_ROLE", "StaticHTMLConsumer"]
