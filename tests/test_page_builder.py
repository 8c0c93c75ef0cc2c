"""Unit tests for page assembly, sidebars, and generated stylesheets."""

from __future__ import annotations

import json
import typing as typ

import msgspec
import pytest
from bs4 import BeautifulSoup

from archive_builders import make_node, sample_index, sample_nodes
from archive_pages.config import SiteConfig, ThemeConfig
from archive_pages.generator.page_builder import (
    PageBuilder,
    dark_variant,
    light_variant,
    role_label,
)
from archive_pages.models import decode_render_node
from archive_pages.navigation import NavigationIndex

if typ.TYPE_CHECKING:
    from archive_pages.models import RenderNode


def _sample(relative: str) -> RenderNode:
    return decode_render_node(json.dumps(sample_nodes()[relative]).encode())


def _navigation() -> NavigationIndex:
    return msgspec.convert(sample_index(), type=NavigationIndex)


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def _single_module_index(module: dict[str, typ.Any]) -> NavigationIndex:
    return msgspec.convert(
        {"interfaceLanguages": {"swift": [module]}}, type=NavigationIndex
    )


def test_sidebar_from_navigation_groups_children() -> None:
    """Group markers become sidebar headings over the items that follow."""
    builder = PageBuilder(SiteConfig(), _navigation())
    soup = _soup(builder.build(_sample("mykit/gettingstarted.json")))
    module_link = soup.select_one("a.sidebar-module-link")
    assert module_link is not None
    assert module_link["href"] == "../../../documentation/mykit/index.html"
    sections = soup.select(".doc-sidebar .sidebar-section")
    assert [s.select_one(".sidebar-heading").get_text() for s in sections] == [
        "Essentials",
        "Structures",
    ]
    selected = soup.select_one(".doc-sidebar li.selected a")
    assert selected is not None
    assert selected.get_text() == "Getting Started"


def test_sidebar_for_unknown_module_is_bare() -> None:
    """A module missing from the index gets a plain Documentation sidebar."""
    builder = PageBuilder(SiteConfig(), _navigation())
    soup = _soup(builder.build(make_node("/documentation/Other/Thing", title="Thing")))
    heading = soup.select_one(".doc-sidebar .sidebar-module")
    assert heading is not None
    assert heading.get_text() == "Documentation"
    assert soup.select(".doc-sidebar .sidebar-section") == []


def test_expandable_items_use_disclosure_checkboxes() -> None:
    """Nodes with children render a checkbox that opens on the current path."""
    index = _single_module_index(
        {
            "title": "MyKit",
            "path": "/documentation/mykit",
            "type": "module",
            "children": [
                {
                    "title": "Widget",
                    "path": "/documentation/mykit/widget",
                    "type": "struct",
                    "children": [
                        {
                            "title": "init()",
                            "path": "/documentation/mykit/widget/init()",
                            "type": "init",
                        }
                    ],
                }
            ],
        }
    )
    builder = PageBuilder(SiteConfig(), index)
    node = make_node("/documentation/MyKit/Widget/init()", title="init()")
    soup = _soup(builder.build(node))
    checkbox = soup.select_one("li.expandable input.disclosure-checkbox")
    assert checkbox is not None
    assert checkbox.has_attr("checked")
    child = soup.select_one("li.nav-child-item.selected a")
    assert child is not None
    assert child["href"] == "../../../../documentation/mykit/widget/init()/index.html"


def test_footer_html_is_inserted_verbatim() -> None:
    """Configured footer HTML is not escaped."""
    builder = PageBuilder(SiteConfig(footer_html="<em>Built by us</em>"))
    soup = _soup(builder.build(make_node("/documentation/A", title="A")))
    footer = soup.select_one("footer .footer-content em")
    assert footer is not None
    assert footer.get_text() == "Built by us"


def test_scripts_follow_search_setting() -> None:
    """Search scripts are linked only when search is enabled."""
    node = make_node("/documentation/A", title="A")
    with_search = _soup(PageBuilder(SiteConfig()).build(node))
    without = _soup(PageBuilder(SiteConfig(include_search=False)).build(node))
    assert [s["src"] for s in with_search.select("script[src]")] == [
        "../js/lunr.min.js",
        "../js/search.js",
    ]
    assert without.select("script[src]") == []


def test_stylesheet_reflects_theme() -> None:
    """Accent colour, dark mode, and custom CSS reach main.css."""
    theme = ThemeConfig(
        accent_colour="#ff6600", include_dark_mode=False, custom_css=".x > .y {}"
    )
    css = PageBuilder(SiteConfig(theme=theme)).render_stylesheet()
    assert "--accent: #ff6600;" in css
    assert "prefers-color-scheme: dark" not in css
    assert ".x > .y {}" in css
    assert ".codehilite" in css
    dark = PageBuilder(SiteConfig()).render_stylesheet()
    assert "prefers-color-scheme: dark" in dark


@pytest.mark.parametrize(
    ("kwargs", "label"),
    [
        ({"role": "collection"}, "Framework"),
        ({"role": "article", "kind": "article"}, "Article"),
        ({"symbol_kind": "protocol"}, "Protocol"),
        ({"symbol_kind": "actor"}, "Actor"),
        ({}, "Symbol"),
    ],
)
def test_role_label(kwargs: dict[str, str], label: str) -> None:
    """Eyebrow labels come from the role, then the symbol kind."""
    assert role_label(make_node("/documentation/A/B", **kwargs)) == label


def test_image_variants() -> None:
    """Dark variants gain a ``~dark`` suffix before the extension."""
    assert dark_variant("images/a.png") == "images/a~dark.png"
    assert dark_variant("images/a~dark.png") == "images/a~dark.png"
    assert light_variant("images/a~dark.png") == "images/a.png"


def test_article_hero_has_document_decoration() -> None:
    """Articles show the document illustration beside the hero."""
    soup = _soup(PageBuilder(SiteConfig()).build(_sample("mykit/gettingstarted.json")))
    assert soup.select_one(".hero-decoration svg") is not None
    assert soup.select_one("h1").get_text() == "Getting Started"
