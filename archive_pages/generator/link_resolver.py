"""Rewrite unresolved ``doc://`` links in rendered pages.

Archives refer to symbols in other bundles with ``doc://<bundle>/<path>``
URLs. When the bundle is rendered into the same site the URL becomes a
relative page link; when the configuration names an external site for the
bundle the URL points there instead. Links the resolver cannot place are left
as they are so the gap stays visible.
"""

from __future__ import annotations

import re
import typing as typ

from markupsafe import Markup, escape

from archive_pages.paths import relative_page_url

DOC_LINK_PATTERN = re.compile(r"doc://([A-Za-z0-9._-]+)(/[A-Za-z0-9/()_-]+)")
_CODE_OPEN = re.compile(r"<(?:code|pre)\b", re.IGNORECASE)
_CODE_CLOSE = re.compile(r"</(?:code|pre)>", re.IGNORECASE)


def _inside_code(html: str, position: int) -> bool:
    before = html[:position]
    return len(_CODE_OPEN.findall(before)) > len(_CODE_CLOSE.findall(before))


def _inside_attribute(html: str, position: int) -> bool:
    return position > 0 and html[position - 1] in "\"'"


class DocLinkResolver:
    """Resolve ``doc://`` URLs against documented modules and external sites.

    Parameters
    ----------
    documented_modules : Iterable[str]
        Bundle identifiers or module names rendered into this site.
    external_urls : Mapping[str, str]
        Base URLs keyed by bundle identifier for documentation hosted
        elsewhere.

    Examples
    --------
    >>> resolver = DocLinkResolver(["MyKit"], {})
    >>> resolver.resolve_url("mykit", "/documentation/MyKit/Widget", depth=2)
    '../../documentation/mykit/widget/index.html'
    """

    def __init__(
        self,
        documented_modules: typ.Iterable[str] = (),
        external_urls: typ.Mapping[str, str] | None = None,
    ) -> None:
        self.documented_modules = frozenset(
            module.lower() for module in documented_modules
        )
        self.external_urls = dict(external_urls or {})

    def __bool__(self) -> bool:
        return bool(self.documented_modules or self.external_urls)

    def resolve_url(self, bundle: str, path: str, *, depth: int) -> str | None:
        """Return the URL for ``doc://bundle/path``, or ``None`` if unknown."""
        if bundle.lower() in self.documented_modules:
            return relative_page_url(path, depth=depth)
        clean = path.lower()
        base = self.external_urls.get(bundle)
        if base:
            if not base.endswith("/"):
                base += "/"
            return f"{base}{clean.lstrip('/')}"
        return None

    def process(self, html: str, *, depth: int) -> str:
        """Return ``html`` with resolvable ``doc://`` URLs rewritten.

        Occurrences inside ``<code>`` or ``<pre>`` are left alone. An
        occurrence that is already an attribute value only has its URL
        replaced; bare occurrences become anchors titled with the last path
        component.
        """
        if "doc://" not in html:
            return html

        def replace(match: re.Match[str]) -> str:
            start = match.start()
            if _inside_code(html, start):
                return match.group(0)
            bundle, path = match.group(1), match.group(2)
            url = self.resolve_url(bundle, path, depth=depth)
            if url is None:
                return match.group(0)
            if _inside_attribute(html, start):
                return url
            name = path.rstrip("/").rsplit("/", 1)[-1]
            return str(Markup('<a href="{}">{}</a>').format(url, escape(name)))

        return DOC_LINK_PATTERN.sub(replace, html)


__all__ = ["DOC_LINK_PATTERN", "DocLinkResolver"]
