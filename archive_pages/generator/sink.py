"""Event interface between the archive reader and its output targets."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path

    from archive_pages.models import JSONMapping, RenderNode


class OutputSink:
    """Receive the events of an archive sweep.

    Every hook is a no-op here; subclasses override the events they care
    about. ``consume_render_node`` may be called from several worker threads
    at once and must be safe for distinct nodes.
    """

    def consume_render_node(self, node: RenderNode) -> None:
        """Handle one decoded render node."""

    def consume_assets(self, assets: typ.Iterable[Path]) -> None:
        """Handle media files copied out of the archive."""

    def consume_linkable_summaries(
        self, summaries: typ.Iterable[JSONMapping]
    ) -> None:
        """Handle linkable entity summaries for external cross-referencing."""

    def consume_indexing_records(self, records: typ.Iterable[JSONMapping]) -> None:
        """Handle records for an external search indexer."""

    def consume_coverage(self, coverage: JSONMapping) -> None:
        """Handle documentation coverage data."""

    def consume_benchmarks(self, benchmarks: JSONMapping) -> None:
        """Handle timing and benchmark data."""


__all__ = ["OutputSink"]
