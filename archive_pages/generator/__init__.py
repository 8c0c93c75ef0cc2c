"""Render documentation archives into static HTML pages."""

from .archive import ArchiveSiteGenerator
from .consumer import StaticHTMLConsumer
from .link_resolver import DocLinkResolver
from .page_builder import PageBuilder
from .renderer import CodeHighlighter, ContentRenderer
from .sink import OutputSink

__all__ = [
    "ArchiveSiteGenerator",
    "CodeHighlighter",
    "ContentRenderer",
    "DocLinkResolver",
    "OutputSink",
    "PageBuilder",
    "StaticHTMLConsumer",
]
