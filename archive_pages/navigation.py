"""Navigation index loading, lookup, and merging.

The archive's ``index/index.json`` describes the sidebar tree for each
interface language. This module decodes it with :mod:`msgspec`, tolerating
any extra fields newer archive formats add, and provides the lookups the
sidebar builder needs plus a pure reducer for combining indices from several
archives into one site.

Examples
--------
>>> node = NavigationNode(title="Widgets", type="groupMarker")
>>> node.is_group_marker, node.id
(True, 'Widgets')
>>> merged = NavigationIndex.merge([])
>>> merged.interface_languages
{}
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import msgspec

if typ.TYPE_CHECKING:
    from pathlib import Path

from archive_pages._constants import DEFAULT_LANGUAGE

GROUP_MARKER = "groupMarker"


class SchemaVersion(msgspec.Struct, frozen=True):
    """Navigation index format version."""

    major: int
    minor: int
    patch: int


class NavigationNode(msgspec.Struct, frozen=True):
    """One entry in the sidebar tree.

    Attributes
    ----------
    title : str
        Display title.
    path : str or None
        Identifier path of the target page; ``None`` for group headers.
    type : str or None
        Node type such as ``"class"``, ``"article"``, or ``"groupMarker"``.
    children : list[NavigationNode] or None
        Nested entries in display order.
    deprecated, external, beta : bool or None
        Availability flags carried through from the archive.
    """

    title: str
    path: str | None = None
    type: str | None = None
    children: list[NavigationNode] | None = None
    deprecated: bool | None = None
    external: bool | None = None
    beta: bool | None = None

    @property
    def id(self) -> str:
        """Return the node identity: its path, or its title when it has none."""
        return self.path if self.path is not None else self.title

    @property
    def is_group_marker(self) -> bool:
        """Return ``True`` for group headers that have no target page."""
        return self.type == GROUP_MARKER

    @property
    def is_expandable(self) -> bool:
        """Return ``True`` when at least one child is not a group marker."""
        return any(not child.is_group_marker for child in self.children or ())

    @property
    def node_type(self) -> NodeType:
        """Return badge and icon information for this node."""
        return node_type_for(self.type)


class NavigationIndex(msgspec.Struct, frozen=True, rename="camel"):
    """Sidebar trees keyed by interface language."""

    interface_languages: dict[str, list[NavigationNode]] = msgspec.field(
        default_factory=dict
    )
    schema_version: SchemaVersion | None = None
    included_archive_identifiers: list[str] | None = None

    @classmethod
    def load(cls, path: Path) -> NavigationIndex:
        """Decode the navigation index stored at ``path``.

        Raises
        ------
        OSError
            If the file cannot be read.
        msgspec.DecodeError
            If the content is not a valid navigation index.
        """
        return msgspec.json.decode(path.read_bytes(), type=cls)

    def find_module(
        self, name: str, language: str = DEFAULT_LANGUAGE
    ) -> NavigationNode | None:
        """Return the first top-level node whose path ends with ``/name``.

        The comparison ignores case. Nodes without a path never match.
        """
        suffix = f"/{name.lower()}"
        for node in self.interface_languages.get(language, ()):
            if node.path is not None and node.path.lower().endswith(suffix):
                return node
        return None

    def all_modules(self, language: str = DEFAULT_LANGUAGE) -> list[NavigationNode]:
        """Return top-level nodes that are modules or documentation pages."""
        return [
            node
            for node in self.interface_languages.get(language, ())
            if node.type == "module"
            or (node.path is not None and "/documentation/" in node.path)
        ]

    @classmethod
    def merge(cls, indices: typ.Sequence[NavigationIndex]) -> NavigationIndex:
        """Combine several indices into one.

        For each language, nodes are appended in input order. A node is kept
        when its lowercased path has not been seen yet, in earlier inputs or
        earlier in the same input, and always when it has no path, so group
        headers repeat across archives.
        Each language's list is then sorted by case-insensitive title. The
        schema version comes from the first input; archive identifiers are
        concatenated.

        Examples
        --------
        >>> a = NavigationIndex({"swift": [NavigationNode("B", "/documentation/b")]})
        >>> b = NavigationIndex({"swift": [NavigationNode("a", "/documentation/a"),
        ...                                NavigationNode("B", "/documentation/B")]})
        >>> [n.title for n in NavigationIndex.merge([a, b]).interface_languages["swift"]]
        ['a', 'B']
        """
        if not indices:
            return cls()

        merged: dict[str, list[NavigationNode]] = {}
        for index in indices:
            for language, nodes in index.interface_languages.items():
                accumulated = merged.setdefault(language, [])
                seen = {
                    node.path.lower() for node in accumulated if node.path is not None
                }
                for node in nodes:
                    if node.path is None:
                        accumulated.append(node)
                    elif (key := node.path.lower()) not in seen:
                        seen.add(key)
                        accumulated.append(node)

        return cls(
            interface_languages={
                language: sorted(nodes, key=lambda node: node.title.lower())
                for language, nodes in merged.items()
            },
            schema_version=indices[0].schema_version,
            included_archive_identifiers=[
                identifier
                for index in indices
                for identifier in index.included_archive_identifiers or ()
            ],
        )


@dc.dataclass(frozen=True, slots=True)
class NodeType:
    """Sidebar presentation for a navigation node type."""

    name: str
    badge: str = ""
    badge_class: str = "badge-other"
    icon: str | None = None

    @property
    def shows_badge(self) -> bool:
        """Return ``True`` when the node is drawn with a lettered badge."""
        return bool(self.badge)


_ALIASES: dict[str, str] = {
    "structure": "struct",
    "enumeration": "enum",
    "initializer": "init",
    "deinitializer": "deinit",
    "function": "func",
    "method": "func",
    "instanceMethod": "func",
    "typeMethod": "func",
    "instanceProperty": "property",
    "typeProperty": "property",
    "variable": "var",
    "globalVariable": "var",
    "localVariable": "var",
    "constant": "let",
    "enumerationCase": "case",
    "instanceSubscript": "subscript",
    "typeSubscript": "subscript",
}

_NODE_TYPES: dict[str, NodeType] = {
    node_type.name: node_type
    for node_type in (
        NodeType("module", "Mo", "badge-module"),
        NodeType("class", "C", "badge-class"),
        NodeType("struct", "S", "badge-struct"),
        NodeType("enum", "E", "badge-enum"),
        NodeType("case", "E", "badge-enum"),
        NodeType("protocol", "Pr", "badge-protocol"),
        NodeType("extension", "Ex", "badge-module"),
        NodeType("func", "M", "badge-func"),
        NodeType("init", "M", "badge-func"),
        NodeType("deinit", "M", "badge-func"),
        NodeType("subscript", "Su", "badge-func"),
        NodeType("operator", "Op", "badge-func"),
        NodeType("property", "P", "badge-var"),
        NodeType("var", "P", "badge-var"),
        NodeType("let", "P", "badge-var"),
        NodeType("macro", "Ma", "badge-macro"),
        NodeType("typealias", "T", "badge-typealias"),
        NodeType("associatedtype", "T", "badge-typealias"),
        NodeType("namespace", "N", "badge-other"),
        NodeType("union", "U", "badge-other"),
        NodeType("dictionary", "D", "badge-other"),
        NodeType("article", badge_class="badge-article", icon="article"),
        NodeType("overview", badge_class="badge-article", icon="article"),
        NodeType("tutorial", badge_class="badge-article", icon="tutorial"),
        NodeType("section"),
        NodeType(GROUP_MARKER),
        NodeType("languageGroup"),
    )
}
_UNKNOWN = NodeType("unknown")


def node_type_for(raw_type: str | None) -> NodeType:
    """Map a navigation or symbol type string onto its presentation."""
    if not raw_type:
        return _UNKNOWN
    name = _ALIASES.get(raw_type, raw_type)
    return _NODE_TYPES.get(name, _UNKNOWN)


__all__ = [
    "GROUP_MARKER",
    "NavigationIndex",
    "NavigationNode",
    "NodeType",
    "SchemaVersion",
    "node_type_for",
]
