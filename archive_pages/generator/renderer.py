"""Render archive inline and block content into HTML fragments.

Content arrives as decoded JSON mappings tagged by ``type``. Every helper
returns :class:`markupsafe.Markup`, so fragments can be dropped straight into
the Jinja templates without being escaped twice.
"""

from __future__ import annotations

import re
import typing as typ

from markupsafe import Markup, escape
from pygments import highlight
from pygments.formatters.html import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from archive_pages._constants import DEFAULT_LANGUAGE
from archive_pages.navigation import node_type_for
from archive_pages.paths import relative_asset_url, relative_page_url
from archive_pages.search_index import inline_text

if typ.TYPE_CHECKING:
    from archive_pages.models import JSONMapping

_SLUG_DROP = re.compile(r"[^\w-]|_")
_WRAPPER_TAGS = {
    "emphasis": "em",
    "strong": "strong",
    "strikethrough": "s",
    "subscript": "sub",
    "superscript": "sup",
    "newTerm": "dfn",
}
_TOKEN_CLASSES = {
    "keyword": "keyword",
    "typeIdentifier": "type",
    "genericParameter": "type",
    "internalParam": "param",
    "externalParam": "param",
    "identifier": "identifier",
    "label": "label",
    "number": "number",
    "string": "string",
    "attribute": "attribute",
}
_FALLBACK_BADGE = ("·", "badge-other")


def slugify(text: str) -> str:
    """Return a heading anchor for ``text``.

    >>> slugify("Getting Started!")
    'getting-started'
    """
    return _SLUG_DROP.sub("", text.lower().replace(" ", "-"))


class CodeHighlighter:
    """Highlight code listings with Pygments."""

    def __init__(self, pygments_style: str = "default") -> None:
        self.pygments_style = pygments_style
        self._formatter = HtmlFormatter(style=pygments_style, nowrap=True)

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return HtmlFormatter(style=self.pygments_style).get_style_defs(".codehilite")

    def highlight(self, code: str, language: str | None = None) -> Markup:
        """Return the highlighted token spans for ``code``.

        Unknown languages fall back to plain text.
        """
        try:
            lexer = get_lexer_by_name(language or DEFAULT_LANGUAGE)
        except ClassNotFound:
            lexer = get_lexer_by_name("text")
        return Markup(highlight(code, lexer, self._formatter).rstrip("\n"))  # noqa: S704

    def code_block(self, code: str, language: str | None = None) -> Markup:
        """Render ``code`` as a ``pre`` block tagged with its language."""
        lang = language or DEFAULT_LANGUAGE
        return Markup(
            '<div class="codehilite" data-language="{lang}">'
            '<pre class="language-{lang}"><code>{code}</code></pre></div>'
        ).format(lang=lang, code=self.highlight(code, lang))


class ContentRenderer:
    """Render the content of one page.

    Parameters
    ----------
    references : Mapping[str, dict]
        The page's reference table, used to resolve links and images.
    depth : int
        Directory depth of the page, used to build relative URLs.
    highlighter : CodeHighlighter, optional
        Shared code highlighter; a default-styled one is created when omitted.
    """

    def __init__(
        self,
        references: typ.Mapping[str, JSONMapping],
        *,
        depth: int = 0,
        highlighter: CodeHighlighter | None = None,
    ) -> None:
        self.references = references
        self.depth = depth
        self.highlighter = highlighter or CodeHighlighter()

    def page_url(self, url: str) -> str:
        """Return ``url`` relative to the current page."""
        return relative_page_url(url, depth=self.depth)

    def asset_url(self, url: str) -> str:
        """Return the media ``url`` relative to the current page."""
        return relative_asset_url(url, depth=self.depth)

    def topic(self, identifier: str) -> JSONMapping | None:
        """Return the topic reference for ``identifier`` when it has a URL."""
        reference = self.references.get(identifier)
        if reference and reference.get("type") == "topic" and reference.get("url"):
            return reference
        return None

    def image(self, identifier: str | None) -> tuple[str, str] | None:
        """Return ``(src, alt)`` for an image reference, if it resolves."""
        reference = self.references.get(identifier or "")
        if not reference:
            return None
        variants = reference.get("variants") or ()
        if not variants or not variants[0].get("url"):
            return None
        return self.asset_url(variants[0]["url"]), reference.get("alt") or ""

    def file(self, identifier: str | None) -> JSONMapping | None:
        """Return a file reference (tutorial code), if it resolves."""
        reference = self.references.get(identifier or "")
        if reference and reference.get("type") == "file":
            return reference
        return None

    def plain_text(self, content: typ.Iterable[JSONMapping] | None) -> str:
        """Flatten inline content to text, resolving reference titles."""
        return inline_text(content or (), self.references)

    def topic_badge(self, reference: JSONMapping) -> tuple[str, str]:
        """Return the badge character and CSS class for a topic reference."""
        keyword = next(
            (
                fragment.get("text", "")
                for fragment in reference.get("fragments") or ()
                if fragment.get("kind") == "keyword"
            ),
            "",
        )
        node_type = node_type_for(keyword)
        if not node_type.shows_badge:
            return _FALLBACK_BADGE
        return node_type.badge, node_type.badge_class

    # Inline content

    def inline(self, content: typ.Iterable[JSONMapping] | None) -> Markup:
        """Render a sequence of inline elements."""
        return Markup("").join(self._inline_item(item) for item in content or ())

    def _inline_item(self, item: JSONMapping) -> Markup:
        match item.get("type"):
            case "text":
                return escape(item.get("text", ""))
            case "codeVoice":
                return Markup("<code>{}</code>").format(item.get("code", ""))
            case "inlineHead":
                inner = self.inline(item.get("inlineContent"))
                return Markup('<strong class="inline-head">{}</strong>').format(inner)
            case kind if kind in _WRAPPER_TAGS:
                tag = _WRAPPER_TAGS[kind]
                inner = self.inline(item.get("inlineContent"))
                return Markup(f"<{tag}>{{}}</{tag}>").format(inner)  # noqa: S704
            case "reference":
                return self._reference(item)
            case "link":
                title = item.get("title") or item.get("destination", "")
                return Markup('<a href="{}">{}</a>').format(
                    item.get("destination", ""), title
                )
            case "image":
                image = self.image(item.get("identifier"))
                if image is None:
                    return Markup("")
                return Markup('<img src="{}" alt="{}">').format(*image)
            case _:
                return Markup("")

    def _reference(self, item: JSONMapping) -> Markup:
        identifier = item.get("identifier", "")
        reference = self.references.get(identifier) or {}
        if item.get("overridingTitleInlineContent"):
            title = self.inline(item["overridingTitleInlineContent"])
        else:
            title = escape(
                item.get("overridingTitle") or reference.get("title") or identifier
            )
        topic = self.topic(identifier)
        if item.get("isActive", True) and topic is not None:
            return Markup('<a href="{}">{}</a>').format(
                self.page_url(topic["url"]), title
            )
        return Markup('<span class="inactive-reference">{}</span>').format(title)

    # Block content

    def blocks(self, content: typ.Iterable[JSONMapping] | None) -> Markup:
        """Render a sequence of block elements."""
        return Markup("\n").join(self.block(block) for block in content or ())

    def block(self, block: JSONMapping) -> Markup:
        """Render one block element; unsupported blocks render as nothing."""
        match block.get("type"):
            case "paragraph":
                return Markup("<p>{}</p>").format(self.inline(block.get("inlineContent")))
            case "heading":
                return self._heading(block)
            case "aside":
                return self._aside(block)
            case "codeListing":
                code = "\n".join(block.get("code") or ())
                return self.highlighter.code_block(code, block.get("syntax"))
            case "unorderedList":
                return Markup("<ul>{}</ul>").format(self._list_items(block))
            case "orderedList":
                start = block.get("start", 1)
                attr = Markup(' start="{}"').format(start) if start != 1 else ""
                return Markup("<ol{}>{}</ol>").format(attr, self._list_items(block))
            case "table":
                return self._table(block.get("rows") or [])
            case "termList":
                return self._term_list(block.get("items") or ())
            case "thematicBreak":
                return Markup("<hr>")
            case "dictionaryExample":
                return self.blocks(block.get("summary"))
            case "step":
                return self.step(block)
            case _:
                return Markup("")

    def _heading(self, block: JSONMapping) -> Markup:
        level = int(block.get("level", 2))
        text = block.get("text", "")
        anchor = block.get("anchor") or slugify(text)
        return Markup(
            '<h{level} id="{anchor}"><a href="#{anchor}">{text}</a></h{level}>'
        ).format(level=level, anchor=anchor, text=text)

    def _aside(self, block: JSONMapping) -> Markup:
        style = str(block.get("style", "note")).lower()
        name = block.get("name") or style.capitalize()
        return Markup('<aside class="aside {}"><p class="label">{}</p>{}</aside>').format(
            style, name, self.blocks(block.get("content"))
        )

    def _list_items(self, block: JSONMapping) -> Markup:
        return Markup("").join(
            Markup("<li>{}</li>").format(self.blocks(item.get("content")))
            for item in block.get("items") or ()
        )

    def _table(self, rows: list[list[list[JSONMapping]]]) -> Markup:
        if not rows:
            return Markup("<table></table>")
        head = Markup("").join(
            Markup("<th>{}</th>").format(self.blocks(cell)) for cell in rows[0]
        )
        html = Markup("<table><thead><tr>{}</tr></thead>").format(head)
        if len(rows) > 1:
            body = Markup("").join(
                Markup("<tr>{}</tr>").format(
                    Markup("").join(
                        Markup("<td>{}</td>").format(self.blocks(cell)) for cell in row
                    )
                )
                for row in rows[1:]
            )
            html += Markup("<tbody>{}</tbody>").format(body)
        return html + Markup("</table>")

    def _term_list(self, items: typ.Iterable[JSONMapping]) -> Markup:
        entries = Markup("").join(
            Markup("<dt>{}</dt><dd>{}</dd>").format(
                self.inline((item.get("term") or {}).get("inlineContent")),
                self.blocks((item.get("definition") or {}).get("content")),
            )
            for item in items
        )
        return Markup("<dl>{}</dl>").format(entries)

    def step(self, block: JSONMapping) -> Markup:
        """Render a tutorial step inline, with its media, code, and caption."""
        html = self.blocks(block.get("content"))
        image = self.image(block.get("media"))
        if image is not None:
            html += Markup(
                '<div class="step-media"><img src="{}" alt="{}"></div>'
            ).format(*image)
        code = self.file(block.get("code"))
        if code is not None:
            html += Markup(
                '<div class="step-code"><p class="code-file-name">{}</p>{}</div>'
            ).format(
                code.get("fileName", ""),
                self.highlighter.code_block(
                    "\n".join(code.get("content") or ()), code.get("syntax")
                ),
            )
        if block.get("caption"):
            html += Markup('<div class="step-caption">{}</div>').format(
                self.blocks(block["caption"])
            )
        return html

    def declaration(self, tokens: typ.Iterable[JSONMapping]) -> Markup:
        """Render declaration tokens with their CSS classes and links."""
        parts: list[Markup] = []
        for token in tokens:
            text = escape(token.get("text", ""))
            topic = self.topic(token.get("identifier") or "")
            if topic is not None:
                text = Markup('<a href="{}">{}</a>').format(
                    self.page_url(topic["url"]), text
                )
            css_class = _TOKEN_CLASSES.get(token.get("kind", ""))
            if css_class is None:
                parts.append(text)
            else:
                parts.append(
                    Markup('<span class="{}">{}</span>').format(css_class, text)
                )
        return Markup("").join(parts)


__all__ = ["CodeHighlighter", "ContentRenderer", "slugify"]
