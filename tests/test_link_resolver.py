"""Unit tests for rewriting ``doc://`` links between archives."""

from __future__ import annotations

from archive_pages.generator.link_resolver import DocLinkResolver


def test_documented_module_links_locally() -> None:
    """Links into a documented module become relative page links."""
    resolver = DocLinkResolver(["MyKit"])
    html = "<p>See doc://MyKit/documentation/MyKit/Widget for details.</p>"
    assert resolver.process(html, depth=2) == (
        '<p>See <a href="../../documentation/mykit/widget/index.html">Widget</a>'
        " for details.</p>"
    )


def test_external_module_links_to_configured_site() -> None:
    """Bundles with an external URL link to that site."""
    resolver = DocLinkResolver([], {"SwiftLog": "https://example.com/log"})
    url = resolver.resolve_url("SwiftLog", "/documentation/Logging/Logger", depth=3)
    assert url == "https://example.com/log/documentation/logging/logger"


def test_unknown_bundle_is_left_alone() -> None:
    """Links to bundles that are neither local nor external are untouched."""
    resolver = DocLinkResolver(["MyKit"])
    html = "<p>doc://Other/documentation/Other/Thing</p>"
    assert resolver.process(html, depth=1) == html


def test_code_spans_are_not_rewritten() -> None:
    """Links shown as code stay literal."""
    resolver = DocLinkResolver(["MyKit"])
    html = "<pre><code>doc://MyKit/documentation/MyKit/Widget</code></pre>"
    assert resolver.process(html, depth=1) == html


def test_attribute_values_only_swap_the_url() -> None:
    """An href holding a doc link keeps its anchor and gains a real URL."""
    resolver = DocLinkResolver(["mykit"])
    html = '<a href="doc://MyKit/documentation/MyKit/Widget">Widget</a>'
    assert resolver.process(html, depth=0) == (
        '<a href="documentation/mykit/widget/index.html">Widget</a>'
    )


def test_empty_resolver_is_falsy() -> None:
    """A resolver with nothing to resolve is skipped by the consumer."""
    assert not DocLinkResolver()
    assert DocLinkResolver(["MyKit"])
