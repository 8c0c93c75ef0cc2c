"""Sidebar view models built from the navigation index.

The builder turns a module's navigation subtree into plain dataclasses which
``_macros.jinja`` renders recursively. Selection and expansion are computed
here so the template stays free of path logic.
"""

from __future__ import annotations

import dataclasses as dc
import itertools
import typing as typ

from archive_pages.navigation import node_type_for
from archive_pages.paths import path_components, relative_page_url

if typ.TYPE_CHECKING:
    from archive_pages.generator.renderer import ContentRenderer
    from archive_pages.models import RenderNode
    from archive_pages.navigation import NavigationIndex, NavigationNode, NodeType


@dc.dataclass(slots=True)
class SidebarItem:
    """One entry in the sidebar tree, or a group header among children."""

    title: str
    url: str | None = None
    node_type: NodeType | None = None
    selected: bool = False
    expanded: bool = False
    checkbox_id: str | None = None
    children: list[SidebarItem] = dc.field(default_factory=list)
    is_header: bool = False
    badge: str | None = None
    badge_class: str | None = None

    @property
    def expandable(self) -> bool:
        """Return ``True`` when the item has a disclosure toggle."""
        return self.checkbox_id is not None


@dc.dataclass(slots=True)
class SidebarSection:
    """A run of top-level items, optionally under a heading."""

    heading: str | None
    items: list[SidebarItem] = dc.field(default_factory=list)


@dc.dataclass(slots=True)
class Sidebar:
    """Everything ``_macros.jinja`` needs to draw one page's sidebar."""

    module_title: str
    module_url: str | None = None
    sections: list[SidebarSection] = dc.field(default_factory=list)


def _normalise(path: str | None) -> str | None:
    if path is None:
        return None
    return path.lower().strip("/")


def is_selected(path: str | None, current_path: str) -> bool:
    """Return whether ``path`` names the page being rendered."""
    return path is not None and _normalise(path) == _normalise(current_path)


def should_expand(node: NavigationNode, current_path: str) -> bool:
    """Return whether ``node`` or any descendant is the current page."""
    if is_selected(node.path, current_path):
        return True
    return any(should_expand(child, current_path) for child in node.children or ())


def sidebar_module_name(node: RenderNode) -> str:
    """Return the module title shown at the top of a page's sidebar."""
    segments = path_components(node.path)
    if len(segments) >= 2 and segments[0].lower() == "documentation":  # noqa: PLR2004
        if node.metadata.title and len(segments) == 2:  # noqa: PLR2004
            return node.metadata.title
        return segments[1]
    return node.metadata.title or "Documentation"


class SidebarBuilder:
    """Build sidebar view models for pages at a given depth."""

    def __init__(self, navigation_index: NavigationIndex | None) -> None:
        self.navigation_index = navigation_index

    def build(
        self,
        node: RenderNode,
        *,
        depth: int,
        renderer: ContentRenderer,
    ) -> Sidebar:
        """Return the sidebar for ``node``.

        Without a navigation index the sidebar lists the node's own topic
        sections. When the index has no matching module, a bare sidebar
        titled ``Documentation`` is returned.
        """
        module_name = sidebar_module_name(node)
        if self.navigation_index is None:
            return self._from_topic_sections(module_name, node, renderer)
        module = self.navigation_index.find_module(module_name)
        if module is None:
            return Sidebar(module_title="Documentation")
        return self._from_navigation(module, node.path, depth)

    def _from_navigation(
        self, module: NavigationNode, current_path: str, depth: int
    ) -> Sidebar:
        counter = itertools.count()
        sidebar = Sidebar(
            module_title=module.title,
            module_url=relative_page_url(module.path or "", depth=depth),
        )
        section = SidebarSection(heading=None)
        for child in module.children or ():
            if child.is_group_marker:
                if section.heading is not None or section.items:
                    sidebar.sections.append(section)
                section = SidebarSection(heading=child.title)
                continue
            section.items.append(self._item(child, current_path, depth, counter))
        if section.heading is not None or section.items:
            sidebar.sections.append(section)
        return sidebar

    def _item(
        self,
        node: NavigationNode,
        current_path: str,
        depth: int,
        counter: itertools.count[int],
    ) -> SidebarItem:
        item = SidebarItem(
            title=node.title,
            url=relative_page_url(node.path or "", depth=depth),
            node_type=node.node_type,
            selected=is_selected(node.path, current_path),
        )
        if not node.is_expandable:
            return item
        item.checkbox_id = f"nav-{next(counter)}"
        item.expanded = should_expand(node, current_path)
        for child in node.children or ():
            if child.is_group_marker:
                item.children.append(SidebarItem(title=child.title, is_header=True))
            else:
                item.children.append(self._item(child, current_path, depth, counter))
        return item

    @staticmethod
    def _from_topic_sections(
        module_name: str, node: RenderNode, renderer: ContentRenderer
    ) -> Sidebar:
        sidebar = Sidebar(module_title=module_name)
        for group in node.topic_sections:
            title = group.get("title")
            if not title:
                continue
            section = SidebarSection(heading=title)
            for identifier in group.get("identifiers") or ():
                reference = renderer.topic(identifier)
                if reference is None:
                    continue
                badge, badge_class = renderer.topic_badge(reference)
                section.items.append(
                    SidebarItem(
                        title=reference.get("title", identifier),
                        url=renderer.page_url(reference["url"]),
                        node_type=node_type_for(reference.get("role")),
                        badge=badge,
                        badge_class=badge_class,
                    )
                )
            sidebar.sections.append(section)
        return sidebar


__all__ = [
    "Sidebar",
    "SidebarBuilder",
    "SidebarItem",
    "SidebarSection",
    "is_selected",
    "should_expand",
    "sidebar_module_name",
]
