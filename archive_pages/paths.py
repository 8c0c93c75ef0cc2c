"""Canonical output paths and relative URLs for rendered pages.

Both the site builder and the search index derive a page's location from
:func:`output_path`, so a node's HTML file and its search entry always agree.

Examples
--------
>>> output_path("/documentation/MyKit/Widget")
'documentation/mykit/widget/index.html'
>>> page_depth("/documentation/MyKit/Widget")
3
>>> relative_page_url("/documentation/MyKit", depth=3)
'../../../documentation/mykit/index.html'
>>> relative_page_url("https://example.com/docs", depth=3)
'https://example.com/docs'
"""

from __future__ import annotations

from archive_pages._constants import PAGE_FILENAME

_PASSTHROUGH_PREFIXES = ("#", "http://", "https://")
_TOP_LEVEL_SECTIONS = ("documentation", "tutorials")


def path_components(identifier_path: str) -> list[str]:
    """Split an identifier path into its non-empty segments."""
    return [segment for segment in identifier_path.strip("/").split("/") if segment]


def output_path(identifier_path: str) -> str:
    """Return the site-relative HTML path for ``identifier_path``.

    Segments are lowercased and joined with ``/``, then ``index.html`` is
    appended. The root identifier maps to the landing page itself.
    """
    segments = [segment.lower() for segment in path_components(identifier_path)]
    return "/".join([*segments, PAGE_FILENAME])


def page_depth(identifier_path: str) -> int:
    """Return how many directories deep the page for ``identifier_path`` sits."""
    return len(path_components(identifier_path))


def root_prefix(depth: int) -> str:
    """Return the ``../`` chain leading from a page at ``depth`` to the root."""
    return "../" * depth


def relative_page_url(url: str, *, depth: int) -> str:
    """Return a link from a page at ``depth`` to the page for ``url``.

    The path is lowercased to match :func:`output_path`; a fragment keeps its
    case. Anchors and absolute ``http(s)`` URLs are returned unchanged.

    >>> relative_page_url("/documentation/MyKit/Widget#Overview", depth=1)
    '../documentation/mykit/widget/index.html#Overview'
    """
    if url.startswith(_PASSTHROUGH_PREFIXES):
        return url
    path, hash_mark, fragment = url.partition("#")
    return f"{root_prefix(depth)}{output_path(path)}{hash_mark}{fragment}"


def relative_asset_url(url: str, *, depth: int) -> str:
    """Return a link to a media asset, making site-absolute paths relative."""
    if not url.startswith("/"):
        return url
    return f"{root_prefix(depth)}{url.strip('/')}"


def module_name(identifier_path: str) -> str:
    """Return the module segment of a documentation or tutorials path.

    The module is the segment after a leading ``documentation`` or
    ``tutorials`` segment; any other path has no module.
    """
    segments = path_components(identifier_path)
    if len(segments) >= 2 and segments[0].lower() in _TOP_LEVEL_SECTIONS:  # noqa: PLR2004
        return segments[1]
    return ""


__all__ = [
    "module_name",
    "output_path",
    "page_depth",
    "path_components",
    "relative_asset_url",
    "relative_page_url",
    "root_prefix",
]
