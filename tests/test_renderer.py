"""Unit tests for inline, block, and code rendering."""

from __future__ import annotations

from bs4 import BeautifulSoup

from archive_builders import text
from archive_pages.generator.renderer import CodeHighlighter, ContentRenderer

REFERENCES = {
    "doc://kit/documentation/Kit/Widget": {
        "type": "topic",
        "title": "Widget",
        "url": "/documentation/kit/widget",
    },
    "hero.png": {
        "type": "image",
        "alt": "A hero",
        "variants": [{"url": "/images/kit/hero.png", "traits": ["1x", "light"]}],
    },
}


def _renderer(depth: int = 2) -> ContentRenderer:
    return ContentRenderer(REFERENCES, depth=depth)


def test_inline_escapes_text_and_wraps_formatting() -> None:
    """Text is escaped and wrappers become their HTML tags."""
    html = _renderer().inline(
        [
            *text("1 < 2 "),
            {"type": "emphasis", "inlineContent": text("really")},
            {"type": "codeVoice", "code": "a && b"},
        ]
    )
    assert str(html) == "1 &lt; 2 <em>really</em><code>a &amp;&amp; b</code>"


def test_reference_links_relative_to_page() -> None:
    """Topic references link through the ``../`` chain of the page depth."""
    html = _renderer(depth=3).inline(
        [{"type": "reference", "identifier": "doc://kit/documentation/Kit/Widget"}]
    )
    assert str(html) == (
        '<a href="../../../documentation/kit/widget/index.html">Widget</a>'
    )


def test_reference_urls_are_lowercased_to_match_output() -> None:
    """Mixed-case reference URLs still reach the lowercase page on disk."""
    references = {
        "doc://kit/documentation/Kit/Gadget": {
            "type": "topic",
            "title": "Gadget",
            "url": "/documentation/Kit/Gadget",
        }
    }
    html = ContentRenderer(references, depth=1).inline(
        [{"type": "reference", "identifier": "doc://kit/documentation/Kit/Gadget"}]
    )
    assert str(html) == '<a href="../documentation/kit/gadget/index.html">Gadget</a>'


def test_unresolved_reference_is_inactive() -> None:
    """References missing from the table render as plain spans."""
    html = _renderer().inline(
        [{"type": "reference", "identifier": "doc://kit/missing", "isActive": True}]
    )
    assert 'class="inactive-reference"' in str(html)


def test_external_links_pass_through() -> None:
    """Absolute link destinations are left untouched."""
    html = _renderer().inline(
        [{"type": "link", "destination": "https://swift.org", "title": "Swift"}]
    )
    assert str(html) == '<a href="https://swift.org">Swift</a>'


def test_images_use_relative_asset_urls() -> None:
    """Image variants resolve relative to the page."""
    html = _renderer(depth=2).inline([{"type": "image", "identifier": "hero.png"}])
    assert str(html) == '<img src="../../images/kit/hero.png" alt="A hero">'


def test_blocks_render_lists_tables_and_asides() -> None:
    """Common block types produce the matching HTML structure."""
    html = _renderer().blocks(
        [
            {
                "type": "unorderedList",
                "items": [
                    {"content": [{"type": "paragraph", "inlineContent": text("one")}]}
                ],
            },
            {
                "type": "table",
                "rows": [
                    [[{"type": "paragraph", "inlineContent": text("Head")}]],
                    [[{"type": "paragraph", "inlineContent": text("Cell")}]],
                ],
            },
            {
                "type": "aside",
                "style": "warning",
                "content": [{"type": "paragraph", "inlineContent": text("Careful")}],
            },
            {"type": "mysteryBlock"},
        ]
    )
    soup = BeautifulSoup(str(html), "html.parser")
    assert soup.select_one("ul li p").get_text() == "one"
    assert soup.select_one("thead th").get_text() == "Head"
    assert soup.select_one("tbody td").get_text() == "Cell"
    assert soup.select_one("aside.warning .label").get_text() == "Warning"


def test_code_listing_defaults_to_swift() -> None:
    """Listings without a syntax are highlighted as swift."""
    html = _renderer().block({"type": "codeListing", "code": ["let x = 1"]})
    soup = BeautifulSoup(str(html), "html.parser")
    wrapper = soup.select_one("div.codehilite")
    assert wrapper is not None
    assert wrapper["data-language"] == "swift"
    assert soup.get_text() == "let x = 1"


def test_unknown_language_falls_back_to_plain_text() -> None:
    """An unknown lexer name does not fail the page."""
    html = CodeHighlighter().highlight("x := 1", "not-a-language")
    assert str(html) == "x := 1"


def test_highlighter_stylesheet_is_scoped() -> None:
    """The Pygments stylesheet targets the codehilite wrapper."""
    assert ".codehilite" in CodeHighlighter("monokai").stylesheet


def test_declaration_tokens_get_css_classes() -> None:
    """Declaration tokens are wrapped in spans by kind, and linked when known."""
    html = _renderer(depth=1).declaration(
        [
            {"kind": "keyword", "text": "func"},
            {"kind": "text", "text": " "},
            {"kind": "identifier", "text": "make"},
            {"kind": "text", "text": "() -> "},
            {
                "kind": "typeIdentifier",
                "text": "Widget",
                "identifier": "doc://kit/documentation/Kit/Widget",
            },
        ]
    )
    soup = BeautifulSoup(str(html), "html.parser")
    assert soup.select_one("span.keyword").get_text() == "func"
    link = soup.select_one("span.type a")
    assert link is not None
    assert link["href"] == "../documentation/kit/widget/index.html"
    assert soup.get_text() == "func make() -> Widget"
