"""Resolve request paths to files below a served root.

The handler is a pure function of its root directory and the request path,
so one instance can serve every connection thread at once.
"""

from __future__ import annotations

import re
from pathlib import Path
from urllib.parse import unquote_to_bytes

from archive_pages._constants import PAGE_FILENAME
from archive_pages.server.mime import content_type_for_path
from archive_pages.server.response import HTTPResponse

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class BadRequestPathError(ValueError):
    """Raised when a request path cannot be percent-decoded."""


def percent_decode(path: str) -> str:
    """Strictly percent-decode ``path``.

    Raises
    ------
    BadRequestPathError
        If an escape is malformed, the bytes are not UTF-8, or the result
        contains a NUL character.

    Examples
    --------
    >>> percent_decode("/docs/My%20Kit")
    '/docs/My Kit'
    """
    if _BAD_ESCAPE.search(path):
        msg = f"malformed percent escape in {path!r}"
        raise BadRequestPathError(msg)
    try:
        decoded = unquote_to_bytes(path).decode("utf-8")
    except UnicodeDecodeError as exc:
        msg = f"request path is not UTF-8: {path!r}"
        raise BadRequestPathError(msg) from exc
    if "\x00" in decoded:
        msg = "request path contains a NUL byte"
        raise BadRequestPathError(msg)
    return decoded


def sanitize_path(request_path: str) -> str:
    """Return the root-relative path a request refers to.

    The query string is dropped, the path decoded, and ``.`` and empty
    segments removed. ``..`` removes the previous segment and is ignored at
    the root, so the result never climbs above it.

    >>> sanitize_path("/a/./b/../c?x=1")
    'a/c'
    >>> sanitize_path("/../../etc/passwd")
    'etc/passwd'
    >>> sanitize_path("")
    ''
    """
    path = request_path.split("?", 1)[0]
    segments: list[str] = []
    for segment in percent_decode(path).split("/"):
        match segment:
            case "" | ".":
                continue
            case "..":
                if segments:
                    segments.pop()
            case _:
                segments.append(segment)
    return "/".join(segments)


class StaticFileHandler:
    """Serve files from ``root``, mapping directories to their index page."""

    def __init__(self, root: Path) -> None:
        self.root = root.resolve()

    def resolve(self, relative: str) -> Path | None:
        """Return the absolute path for ``relative`` if it stays inside the root.

        Symlinks are followed before the containment check.
        """
        candidate = (self.root / relative).resolve()
        if candidate == self.root or candidate.is_relative_to(self.root):
            return candidate
        return None

    def handle_request(
        self, request_path: str, *, include_body: bool = True
    ) -> HTTPResponse:
        """Return the response for a GET (or HEAD, without body) request."""
        response = self._respond(request_path, include_body=include_body)
        return response if include_body else response.without_body()

    def _respond(self, request_path: str, *, include_body: bool) -> HTTPResponse:
        try:
            relative = sanitize_path(request_path)
        except BadRequestPathError:
            return HTTPResponse.bad_request()

        target = self.resolve(relative)
        if target is None:
            return HTTPResponse.forbidden()
        if target.is_dir():
            index = f"{relative}/{PAGE_FILENAME}" if relative else PAGE_FILENAME
            target = self.resolve(index)
            if target is None:
                return HTTPResponse.forbidden()
        if not target.is_file():
            return HTTPResponse.not_found()

        content_type = content_type_for_path(target.name)
        try:
            if not include_body:
                size = target.stat().st_size
                return HTTPResponse.ok_with_length(
                    b"", content_type, content_length=size
                )
            return HTTPResponse.ok(target.read_bytes(), content_type)
        except OSError:
            return HTTPResponse.internal_error()


__all__ = [
    "BadRequestPathError",
    "StaticFileHandler",
    "percent_decode",
    "sanitize_path",
]
