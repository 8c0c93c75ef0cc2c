"""Unit tests for the static HTML consumer and its shared statistics."""

from __future__ import annotations

import typing as typ
from concurrent.futures import ThreadPoolExecutor

from archive_builders import make_node
from archive_pages.config import SiteConfig
from archive_pages.generator.consumer import StaticHTMLConsumer
from archive_pages.generator.sink import OutputSink
from archive_pages.models import GenerationWarning, Severity

if typ.TYPE_CHECKING:
    from pathlib import Path

KINDS = ("symbol", "article", "tutorial", "section", "overview", "mystery")


def _consumer(site_dir: Path) -> StaticHTMLConsumer:
    site_dir.mkdir(parents=True, exist_ok=True)
    return StaticHTMLConsumer(SiteConfig(output_dir=site_dir), site_dir)


def test_consume_writes_page_at_canonical_path(site_dir: Path) -> None:
    """Each node lands at its lowercased identifier path."""
    consumer = _consumer(site_dir)
    consumer.consume_render_node(
        make_node("/documentation/MyKit/Widget", title="Widget", abstract="A widget.")
    )
    page = site_dir / "documentation" / "mykit" / "widget" / "index.html"
    assert page.is_file()
    html = page.read_text(encoding="utf-8")
    assert "<title>Widget</title>" in html
    assert 'href="../../../css/main.css"' in html


def test_concurrent_consumption_loses_no_updates(site_dir: Path) -> None:
    """Per-kind and uncounted nodes add up to the number consumed."""
    consumer = _consumer(site_dir)
    nodes = [
        make_node(
            f"/documentation/MyKit/Item{number}",
            kind=KINDS[number % len(KINDS)],
            title=f"Item {number}",
            role="collection" if number % 10 == 0 else None,
        )
        for number in range(60)
    ]
    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(consumer.consume_render_node, nodes))

    stats = consumer.stats
    counted = (
        stats.symbols_documented
        + stats.articles_generated
        + stats.tutorials_generated
    )
    uncounted = sum(1 for node in nodes if node.kind not in KINDS[:3])
    assert stats.pages_generated == 60
    assert counted + uncounted == 60
    assert stats.symbols_documented == 10
    assert stats.articles_generated == 10
    assert stats.tutorials_generated == 10
    assert stats.modules_documented == 6
    assert len(list(site_dir.rglob("index.html"))) == 60


def test_references_are_merged(site_dir: Path) -> None:
    """Reference tables from every node end up in the shared map."""
    consumer = _consumer(site_dir)
    consumer.consume_render_node(
        make_node("/documentation/A", references={"a": {"type": "topic"}})
    )
    consumer.consume_render_node(
        make_node("/documentation/B", references={"b": {"type": "topic"}})
    )
    assert set(consumer.references) == {"a", "b"}


def test_result_snapshot_includes_warnings(site_dir: Path) -> None:
    """Warnings and counters are captured in the immutable result."""
    consumer = _consumer(site_dir)
    warning = GenerationWarning(Severity.WARNING, "Failed to decode broken.json")
    consumer.add_warning(warning)
    consumer.consume_render_node(make_node("/documentation/A", kind="article"))
    result = consumer.result(site_dir / "search-index.json")
    assert result.warnings == (warning,)
    assert result.generated_pages == 1
    assert result.articles_generated == 1
    assert result.search_index_path == site_dir / "search-index.json"
    assert result.index_path == site_dir / "index.html"


def test_asset_hook_creates_images_directory(site_dir: Path) -> None:
    """Consuming assets guarantees the images directory exists."""
    consumer = _consumer(site_dir)
    consumer.consume_assets([])
    assert (site_dir / "images").is_dir()


def test_base_sink_hooks_are_noops() -> None:
    """The base sink accepts every event without side effects."""
    sink = OutputSink()
    node = make_node("/documentation/A")
    sink.consume_render_node(node)
    sink.consume_assets([])
    sink.consume_linkable_summaries([])
    sink.consume_indexing_records([])
    sink.consume_coverage({})
    sink.consume_benchmarks({})
