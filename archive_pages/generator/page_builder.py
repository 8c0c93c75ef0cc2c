"""Assemble complete HTML documents for render nodes.

Reference pages, articles, and unknown kinds share ``doc_page.jinja``;
tutorials and tutorial overviews have their own layouts. The builder prepares
small view models (breadcrumbs, topic cards, tutorial navigation) and hands
the page's :class:`~archive_pages.generator.renderer.ContentRenderer` to the
templates, which call it for inline and block content.

Example
-------
>>> from archive_pages.config import SiteConfig
>>> from archive_pages.generator.page_builder import PageBuilder
>>> builder = PageBuilder(SiteConfig())
>>> html = builder.build(node)  # doctest: +SKIP
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from archive_pages._constants import (
    DEFAULT_FOOTER,
    LUNR_SCRIPT_PATH,
    SEARCH_SCRIPT_PATH,
    STYLESHEET_PATH,
)
from archive_pages.generator.renderer import CodeHighlighter, ContentRenderer
from archive_pages.generator.sidebar import SidebarBuilder
from archive_pages.models import NodeKind
from archive_pages.paths import page_depth, root_prefix
from archive_pages.search_index import inline_text

if typ.TYPE_CHECKING:
    from archive_pages.config import SiteConfig
    from archive_pages.models import JSONMapping, RenderNode
    from archive_pages.navigation import NavigationIndex

DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"
TUTORIALS_OVERVIEW_URL = "/tutorials/tutorials"
DARK_SUFFIX = "~dark"

_ROLE_LABELS = {
    "collection": "Framework",
    "article": "Article",
    "tutorial": "Tutorial",
}
_SYMBOL_KIND_LABELS = {
    "class": "Class",
    "struct": "Structure",
    "enum": "Enumeration",
    "protocol": "Protocol",
    "typealias": "Type Alias",
    "func": "Function",
    "var": "Property",
    "property": "Property",
    "init": "Initializer",
    "macro": "Macro",
}


def make_environment(templates_dir: Path | None = None) -> Environment:
    """Return the Jinja environment shared by every page builder."""
    env = Environment(
        loader=FileSystemLoader(str(templates_dir or DEFAULT_TEMPLATES_DIR)),
        autoescape=select_autoescape(["html", "xml", "jinja"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["dark_variant"] = dark_variant
    env.filters["light_variant"] = light_variant
    return env


def dark_variant(path: str) -> str:
    """Return the ``~dark`` sibling of an image path.

    >>> dark_variant("images/intro.png")
    'images/intro~dark.png'
    """
    if DARK_SUFFIX in path:
        return path
    stem, dot, suffix = path.rpartition(".")
    if not dot or "/" in suffix:
        return f"{path}{DARK_SUFFIX}"
    return f"{stem}{DARK_SUFFIX}.{suffix}"


def light_variant(path: str) -> str:
    """Return ``path`` with any ``~dark`` marker removed."""
    return path.replace(DARK_SUFFIX, "")


def role_label(node: RenderNode) -> str:
    """Return the eyebrow label shown above a page title."""
    if node.metadata.role in _ROLE_LABELS:
        return _ROLE_LABELS[node.metadata.role]
    if symbol_kind := node.metadata.symbol_kind:
        return _SYMBOL_KIND_LABELS.get(symbol_kind, symbol_kind.capitalize())
    return "Symbol" if node.kind == NodeKind.SYMBOL else "Framework"


def hero_decoration(node: RenderNode) -> str | None:
    """Return which hero illustration the page shows, if any."""
    match node.kind:
        case NodeKind.ARTICLE | NodeKind.TUTORIAL:
            return "document"
        case NodeKind.OVERVIEW:
            return "brackets"
        case _:
            return None


@dc.dataclass(frozen=True, slots=True)
class Crumb:
    """One breadcrumb entry; ``url`` is ``None`` for unresolved identifiers."""

    title: str
    url: str | None = None


@dc.dataclass(frozen=True, slots=True)
class TopicCard:
    """A linked symbol shown in Topics and See Also groups."""

    title: str
    url: str
    summary: str
    badge: str
    badge_class: str


@dc.dataclass(frozen=True, slots=True)
class TopicGroup:
    """A titled list of topic cards or relationship links."""

    title: str | None
    cards: list[TopicCard]


@dc.dataclass(frozen=True, slots=True)
class MenuLink:
    """Entry in a tutorial navigation dropdown."""

    title: str
    url: str
    selected: bool = False


@dc.dataclass(frozen=True, slots=True)
class MenuChapter:
    """Chapter heading with its tutorials in the tutorial dropdown."""

    title: str
    links: list[MenuLink]


class PageBuilder:
    """Render one HTML document per render node."""

    def __init__(
        self,
        config: SiteConfig,
        navigation_index: NavigationIndex | None = None,
        *,
        templates_dir: Path | None = None,
        highlighter: CodeHighlighter | None = None,
    ) -> None:
        """Initialize the builder with configuration and template context.

        Parameters
        ----------
        config : SiteConfig
            Site settings; search inclusion and footer HTML affect every page.
        navigation_index : NavigationIndex, optional
            Sidebar source; pages fall back to topic-section sidebars without it.
        templates_dir : Path, optional
            Directory containing Jinja templates; defaults to the package templates.
        highlighter : CodeHighlighter, optional
            Shared code highlighter; defaults to one using the theme's style.
        """
        self.config = config
        self.env = make_environment(templates_dir)
        self.highlighter = highlighter or CodeHighlighter(config.theme.pygments_style)
        self.sidebar_builder = SidebarBuilder(navigation_index)

    @property
    def navigation_index(self) -> NavigationIndex | None:
        """Return the navigation index used for sidebars."""
        return self.sidebar_builder.navigation_index

    def build(self, node: RenderNode) -> str:
        """Return the HTML document for ``node``."""
        match node.kind:
            case NodeKind.TUTORIAL:
                template, context = "tutorial_page.jinja", self._tutorial_context(node)
            case NodeKind.OVERVIEW:
                template, context = "tutorial_overview.jinja", self._base_context(node)
            case _:
                template, context = "doc_page.jinja", self._doc_context(node)
        html = self.env.get_template(template).render(**context)
        if not html.endswith("\n"):
            html += "\n"
        return html

    def render_template(
        self, template: str, *, root: str, title: str, **context: typ.Any
    ) -> str:
        """Render a page that is not backed by a render node.

        ``root`` is the relative prefix from the page back to the site root;
        the stylesheet, scripts, and footer are derived from it.
        """
        html = self.env.get_template(template).render(
            title=title,
            description=None,
            root=root,
            stylesheet=f"{root}{STYLESHEET_PATH}",
            scripts=self._scripts(root),
            footer_html=self._footer(),
            **context,
        )
        if not html.endswith("\n"):
            html += "\n"
        return html

    def render_stylesheet(self) -> str:
        """Return ``css/main.css`` for the configured theme."""
        theme = self.config.theme
        return self.env.get_template("main.css.jinja").render(
            accent=theme.accent_colour,
            include_dark_mode=theme.include_dark_mode,
            custom_css=theme.custom_css,
            pygments_css=self.highlighter.stylesheet,
        )

    def _footer(self) -> Markup:
        return Markup(self.config.footer_html or DEFAULT_FOOTER)  # noqa: S704

    def _base_context(self, node: RenderNode) -> dict[str, typ.Any]:
        depth = page_depth(node.path)
        root = root_prefix(depth)
        renderer = ContentRenderer(
            node.references, depth=depth, highlighter=self.highlighter
        )
        return {
            "node": node,
            "r": renderer,
            "title": node.title,
            "description": (
                inline_text(node.abstract) if node.abstract is not None else None
            ),
            "root": root,
            "stylesheet": f"{root}{STYLESHEET_PATH}",
            "scripts": self._scripts(root),
            "footer_html": self._footer(),
        }

    def _scripts(self, root: str) -> list[str]:
        if not self.config.include_search:
            return []
        return [f"{root}{LUNR_SCRIPT_PATH}", f"{root}{SEARCH_SCRIPT_PATH}"]

    def _doc_context(self, node: RenderNode) -> dict[str, typ.Any]:
        context = self._base_context(node)
        renderer: ContentRenderer = context["r"]
        context.update(
            sidebar=self.sidebar_builder.build(
                node, depth=renderer.depth, renderer=renderer
            ),
            breadcrumbs=self._breadcrumbs(node, renderer),
            role_label=role_label(node),
            decoration=hero_decoration(node),
            declarations=self._declarations(node),
            topics=self._topic_groups(node.topic_sections, renderer),
            relationships=self._topic_groups(node.relationships_sections, renderer),
            see_also=self._topic_groups(node.see_also_sections, renderer),
        )
        return context

    @staticmethod
    def _breadcrumbs(node: RenderNode, renderer: ContentRenderer) -> list[Crumb]:
        if node.hierarchy is None or not node.hierarchy.paths:
            return []
        crumbs: list[Crumb] = []
        for identifier in node.hierarchy.paths[0]:
            reference = renderer.topic(identifier)
            if reference is None:
                crumbs.append(Crumb(title=identifier))
            else:
                crumbs.append(
                    Crumb(
                        title=reference.get("title", identifier),
                        url=renderer.page_url(reference["url"]),
                    )
                )
        return crumbs

    @staticmethod
    def _declarations(node: RenderNode) -> list[list[JSONMapping]]:
        if node.kind != NodeKind.SYMBOL:
            return []
        for section in node.primary_content_sections:
            if section.get("kind") == "declarations":
                return [
                    declaration.get("tokens") or []
                    for declaration in section.get("declarations") or ()
                ]
        return []

    @staticmethod
    def _topic_groups(
        groups: typ.Iterable[JSONMapping], renderer: ContentRenderer
    ) -> list[TopicGroup]:
        result: list[TopicGroup] = []
        for group in groups:
            cards: list[TopicCard] = []
            for identifier in group.get("identifiers") or ():
                reference = renderer.topic(identifier)
                if reference is None:
                    continue
                badge, badge_class = renderer.topic_badge(reference)
                cards.append(
                    TopicCard(
                        title=reference.get("title", identifier),
                        url=renderer.page_url(reference["url"]),
                        summary=inline_text(reference.get("abstract") or ()),
                        badge=badge,
                        badge_class=badge_class,
                    )
                )
            result.append(TopicGroup(title=group.get("title"), cards=cards))
        return result

    def _tutorial_context(self, node: RenderNode) -> dict[str, typ.Any]:
        context = self._base_context(node)
        renderer: ContentRenderer = context["r"]
        overview_title = "Tutorials"
        overview_url = renderer.page_url(TUTORIALS_OVERVIEW_URL)
        hierarchy = node.hierarchy
        if hierarchy is not None and hierarchy.paths and hierarchy.paths[0]:
            reference = renderer.topic(hierarchy.paths[0][0])
            if reference is not None:
                overview_title = reference.get("title", overview_title)
                overview_url = renderer.page_url(reference["url"])
        intro = next(
            (section for section in node.sections if section.get("kind") == "hero"),
            None,
        )
        context.update(
            overview_title=overview_title,
            overview_url=overview_url,
            chapters=self._tutorial_chapters(node, renderer),
            section_links=self._section_links(node),
            intro=intro,
        )
        return context

    @staticmethod
    def _tutorial_chapters(
        node: RenderNode, renderer: ContentRenderer
    ) -> list[MenuChapter]:
        if node.hierarchy is None:
            return []
        chapters: list[MenuChapter] = []
        for chapter in node.hierarchy.modules or ():
            chapter_id = chapter.get("reference", "")
            chapter_ref = renderer.topic(chapter_id)
            title = (
                chapter_ref.get("title", "")
                if chapter_ref is not None
                else chapter_id.rsplit("/", 1)[-1] or "Chapter"
            )
            links: list[MenuLink] = []
            for project in chapter.get("projects") or ():
                tutorial = renderer.topic(project.get("reference", ""))
                if tutorial is None:
                    continue
                links.append(
                    MenuLink(
                        title=tutorial.get("title", ""),
                        url=renderer.page_url(tutorial["url"]),
                        selected=tutorial["url"].lower() == node.path.lower(),
                    )
                )
            if links:
                chapters.append(MenuChapter(title=title, links=links))
        return chapters

    @staticmethod
    def _section_links(node: RenderNode) -> list[MenuLink]:
        links = [MenuLink(title="Introduction", url="#", selected=True)]
        for section in node.sections:
            match section.get("kind"):
                case "tasks":
                    links.extend(
                        MenuLink(
                            title=task.get("title", ""),
                            url=f"#{task.get('anchor', '')}",
                        )
                        for task in section.get("tasks") or ()
                    )
                case "assessments":
                    links.append(
                        MenuLink(
                            title="Check Your Understanding",
                            url=f"#{section.get('anchor', 'Check-Your-Understanding')}",
                        )
                    )
        return links


__all__ = [
    "DEFAULT_TEMPLATES_DIR",
    "Crumb",
    "MenuChapter",
    "MenuLink",
    "PageBuilder",
    "TopicCard",
    "TopicGroup",
    "dark_variant",
    "hero_decoration",
    "light_variant",
    "make_environment",
    "role_label",
]
