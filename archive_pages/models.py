"""Data shapes shared by the archive reader, the page builders, and results.

Render nodes are decoded with :mod:`msgspec` straight from the archive's JSON
documents. Only the envelope is typed; inline and block content stay as the
decoded mappings tagged by ``type`` (or ``kind`` for tutorial sections), which
the renderers dispatch on. Generation results and warnings are plain frozen
dataclasses.
"""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ
from pathlib import Path
from urllib.parse import urlsplit

import msgspec

from archive_pages._constants import PAGE_FILENAME

JSONMapping = dict[str, typ.Any]


class NodeKind(enum.StrEnum):
    """Kinds of render node the archive format defines."""

    SYMBOL = "symbol"
    ARTICLE = "article"
    TUTORIAL = "tutorial"
    SECTION = "section"
    OVERVIEW = "overview"


class RenderIdentifier(msgspec.Struct, frozen=True, rename="camel"):
    """Resolved topic identifier of a render node."""

    url: str
    interface_language: str = "swift"

    @property
    def path(self) -> str:
        """Return the identifier path, e.g. ``/documentation/mykit/widget``."""
        return urlsplit(self.url).path


class RenderMetadata(msgspec.Struct, frozen=True, rename="camel"):
    """Page metadata used for titles, eyebrows, and search keywords."""

    title: str | None = None
    role: str | None = None
    role_heading: str | None = None
    symbol_kind: str | None = None


class RenderHierarchy(msgspec.Struct, frozen=True):
    """Breadcrumb paths, each a list of reference identifiers.

    Tutorial pages also carry the owning overview ``reference`` and its
    chapters in ``modules``, each with the tutorials it lists as ``projects``.
    """

    paths: list[list[str]] = msgspec.field(default_factory=list)
    reference: str | None = None
    modules: list[JSONMapping] | None = None


class RenderNode(msgspec.Struct, frozen=True, rename="camel"):
    """One documentation page as stored in ``data/**/*.json``.

    Attributes
    ----------
    identifier : RenderIdentifier
        Topic identifier; :attr:`path` is derived from its URL.
    kind : str
        One of :class:`NodeKind`; other strings decode but count as unknown.
    metadata : RenderMetadata
        Title, role, and symbol kind.
    abstract : list[dict] or None
        Inline content shown below the title.
    primary_content_sections, sections : list[dict]
        Reference-page sections and tutorial sections respectively.
    topic_sections, see_also_sections, relationships_sections : list[dict]
        Groups of reference identifiers rendered as cards or lists.
    references : dict[str, dict]
        Outward reference table keyed by identifier.
    hierarchy : RenderHierarchy or None
        Breadcrumb trail.
    """

    identifier: RenderIdentifier
    kind: str
    metadata: RenderMetadata = msgspec.field(default_factory=RenderMetadata)
    abstract: list[JSONMapping] | None = None
    primary_content_sections: list[JSONMapping] = msgspec.field(
        default_factory=list
    )
    sections: list[JSONMapping] = msgspec.field(default_factory=list)
    topic_sections: list[JSONMapping] = msgspec.field(default_factory=list)
    see_also_sections: list[JSONMapping] = msgspec.field(default_factory=list)
    relationships_sections: list[JSONMapping] = msgspec.field(default_factory=list)
    references: dict[str, JSONMapping] = msgspec.field(default_factory=dict)
    hierarchy: RenderHierarchy | None = None

    @property
    def path(self) -> str:
        """Return the identifier path of this node."""
        return self.identifier.path

    @property
    def title(self) -> str:
        """Return the metadata title, falling back to the last path segment."""
        if self.metadata.title:
            return self.metadata.title
        return self.path.rsplit("/", 1)[-1] or "Documentation"


_RENDER_NODE_DECODER = msgspec.json.Decoder(RenderNode)


def decode_render_node(data: bytes) -> RenderNode:
    """Decode one render-node JSON document.

    Raises
    ------
    msgspec.DecodeError
        If the bytes are not valid JSON or do not match the envelope.
    """
    return _RENDER_NODE_DECODER.decode(data)


class Severity(enum.StrEnum):
    """Severity of a collected warning."""

    WARNING = "warning"
    NOTE = "note"


@dc.dataclass(frozen=True, slots=True)
class SourceLocation:
    """File position a warning refers to."""

    file: str
    line: int
    column: int | None = None

    def __str__(self) -> str:
        if self.column is None:
            return f"{self.file}:{self.line}"
        return f"{self.file}:{self.line}:{self.column}"


@dc.dataclass(frozen=True, slots=True)
class GenerationWarning:
    """A non-fatal problem collected during generation."""

    severity: Severity
    summary: str
    source: SourceLocation | None = None
    explanation: str | None = None

    def __str__(self) -> str:
        text = f"[{self.severity}] {self.summary}"
        if self.source is not None:
            text += f" at {self.source}"
        if self.explanation is not None:
            text += f"\n  {self.explanation}"
        return text


@dc.dataclass(slots=True)
class GenerationStats:
    """Mutable counters owned by the site builder while a run is in flight."""

    pages_generated: int = 0
    modules_documented: int = 0
    symbols_documented: int = 0
    articles_generated: int = 0
    tutorials_generated: int = 0


@dc.dataclass(frozen=True, slots=True)
class GenerationResult:
    """Immutable summary of a finished run."""

    output_dir: Path
    generated_pages: int
    modules_documented: int
    symbols_documented: int
    articles_generated: int
    tutorials_generated: int
    warnings: tuple[GenerationWarning, ...] = ()
    search_index_path: Path | None = None

    @property
    def index_path(self) -> Path:
        """Return the landing page path."""
        return self.output_dir / PAGE_FILENAME


__all__ = [
    "GenerationResult",
    "GenerationStats",
    "GenerationWarning",
    "JSONMapping",
    "NodeKind",
    "RenderHierarchy",
    "RenderIdentifier",
    "RenderMetadata",
    "RenderNode",
    "Severity",
    "SourceLocation",
    "decode_render_node",
]
