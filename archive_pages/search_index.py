"""Build the client-side search index from render nodes.

Each consumed node contributes one document. Documents are keyed by the
node path, and their ``path`` field is computed by the same function the site
builder uses to place HTML files, so search results always resolve.

Examples
--------
>>> tokenize("Widget-Factory: an API")
['widget', 'factory', 'api']
>>> inline_text([{"type": "text", "text": "A "},
...              {"type": "emphasis", "inlineContent": [{"type": "text", "text": "fast"}]}])
'A fast'
"""

from __future__ import annotations

import dataclasses as dc
import json
import re
import threading
import typing as typ

from archive_pages.models import NodeKind
from archive_pages.paths import output_path, path_components

if typ.TYPE_CHECKING:
    from pathlib import Path

    from archive_pages.models import JSONMapping, RenderNode

INDEX_VERSION = "1.0"
INDEX_FIELDS = ("title", "summary", "keywords", "module")
MIN_TOKEN_LENGTH = 3

_TOKEN_SPLIT = re.compile(r"[^0-9A-Za-z]+")
_WRAPPERS = frozenset(
    {
        "emphasis",
        "strong",
        "strikethrough",
        "subscript",
        "superscript",
        "newTerm",
        "inlineHead",
    }
)
_DECLARATION_TOKEN_KINDS = frozenset({"identifier", "typeIdentifier"})


@dc.dataclass(frozen=True, slots=True)
class SearchDocument:
    """One entry of ``search-index.json``."""

    id: str
    title: str
    type: str
    path: str
    summary: str
    keywords: tuple[str, ...]
    module: str | None = None

    def to_json(self) -> dict[str, typ.Any]:
        """Return the JSON-ready mapping for this document."""
        payload = dc.asdict(self)
        payload["keywords"] = list(self.keywords)
        return payload


def tokenize(text: str) -> list[str]:
    """Split ``text`` on non-alphanumerics, keeping lowercased long tokens."""
    return [
        token.lower()
        for token in _TOKEN_SPLIT.split(text)
        if len(token) >= MIN_TOKEN_LENGTH
    ]


def inline_text(
    content: typ.Iterable[JSONMapping],
    references: typ.Mapping[str, JSONMapping] | None = None,
) -> str:
    """Flatten inline content to plain text.

    Formatting wrappers are unwrapped, references contribute their title,
    and images contribute nothing.
    """
    references = references or {}
    parts: list[str] = []
    for item in content:
        match item.get("type"):
            case "text":
                parts.append(item.get("text", ""))
            case "codeVoice":
                parts.append(item.get("code", ""))
            case kind if kind in _WRAPPERS:
                parts.append(inline_text(item.get("inlineContent", ()), references))
            case "reference":
                reference = references.get(item.get("identifier", ""), {})
                parts.append(
                    item.get("overridingTitle") or reference.get("title") or ""
                )
            case _:
                continue
    return "".join(parts)


def document_type(kind: str) -> str:
    """Map a render-node kind to its search document type."""
    match kind:
        case NodeKind.SYMBOL | NodeKind.ARTICLE | NodeKind.TUTORIAL:
            return kind
        case NodeKind.SECTION | NodeKind.OVERVIEW:
            return "section"
        case _:
            return "unknown"


def search_module(identifier_path: str) -> str | None:
    """Return the module a search result is grouped under."""
    segments = path_components(identifier_path)
    if not segments:
        return None
    if segments[0] == "documentation":
        return segments[1] if len(segments) > 1 else None
    return segments[0]


def _declaration_identifiers(node: RenderNode) -> typ.Iterator[str]:
    for section in node.primary_content_sections:
        if section.get("kind") != "declarations":
            continue
        for declaration in section.get("declarations", ()):
            for token in declaration.get("tokens", ()):
                if token.get("kind") in _DECLARATION_TOKEN_KINDS:
                    yield token.get("text", "")


def node_keywords(node: RenderNode) -> tuple[str, ...]:
    """Collect the sorted, case-folded keyword set for ``node``."""
    candidates = tokenize(node.title)
    if node.kind == NodeKind.SYMBOL:
        if node.metadata.role:
            candidates.append(node.metadata.role)
        candidates.extend(_declaration_identifiers(node))
    for section in node.topic_sections:
        candidates.extend(tokenize(section.get("title") or ""))
    return tuple(sorted({word.casefold() for word in candidates if word}))


def build_document(node: RenderNode) -> SearchDocument:
    """Extract the search document for a single render node."""
    return SearchDocument(
        id=node.path,
        title=node.title,
        type=document_type(node.kind),
        path=output_path(node.path),
        summary=inline_text(node.abstract or (), node.references).strip(),
        keywords=node_keywords(node),
        module=search_module(node.path),
    )


class SearchIndexBuilder:
    """Accumulate search documents from concurrently consumed nodes."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._documents: dict[str, SearchDocument] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._documents)

    def add_to_index(self, node: RenderNode) -> SearchDocument:
        """Add ``node`` to the index and return its document."""
        return self.add(build_document(node))

    def add(self, document: SearchDocument) -> SearchDocument:
        """Add an already built ``document``, replacing one with the same id."""
        with self._lock:
            self._documents[document.id] = document
        return document

    def documents(self) -> list[SearchDocument]:
        """Return a snapshot of the documents ordered by id."""
        with self._lock:
            return sorted(self._documents.values(), key=lambda doc: doc.id)

    def to_json(self) -> str:
        """Serialize the index deterministically."""
        payload = {
            "version": INDEX_VERSION,
            "fields": list(INDEX_FIELDS),
            "documents": [document.to_json() for document in self.documents()],
        }
        return json.dumps(payload, indent=2, sort_keys=True)

    def write_index(self, path: Path) -> Path:
        """Write the serialized index to ``path`` and return it."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json(), encoding="utf-8")
        return path


__all__ = [
    "INDEX_FIELDS",
    "INDEX_VERSION",
    "SearchDocument",
    "SearchIndexBuilder",
    "build_document",
    "document_type",
    "inline_text",
    "node_keywords",
    "search_module",
    "tokenize",
]
