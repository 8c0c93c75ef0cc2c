"""Map file extensions to ``Content-Type`` values for the preview server."""

from __future__ import annotations

from pathlib import PurePosixPath

DEFAULT_CONTENT_TYPE = "application/octet-stream"

MIME_TYPES: dict[str, str] = {
    "html": "text/html; charset=utf-8",
    "htm": "text/html; charset=utf-8",
    "css": "text/css; charset=utf-8",
    "js": "text/javascript; charset=utf-8",
    "mjs": "text/javascript; charset=utf-8",
    "json": "application/json; charset=utf-8",
    "txt": "text/plain; charset=utf-8",
    "xml": "text/xml; charset=utf-8",
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "svg": "image/svg+xml",
    "webp": "image/webp",
    "ico": "image/x-icon",
    "woff": "font/woff",
    "woff2": "font/woff2",
    "ttf": "font/ttf",
    "otf": "font/otf",
    "pdf": "application/pdf",
    "zip": "application/zip",
    "mp4": "video/mp4",
    "webm": "video/webm",
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
}


def content_type_for_extension(extension: str) -> str:
    """Return the content type for ``extension``, ignoring case.

    >>> content_type_for_extension("PNG")
    'image/png'
    >>> content_type_for_extension("")
    'application/octet-stream'
    """
    return MIME_TYPES.get(extension.lower().lstrip("."), DEFAULT_CONTENT_TYPE)


def content_type_for_path(path: str | PurePosixPath) -> str:
    """Return the content type for a file path based on its extension."""
    return content_type_for_extension(PurePosixPath(path).suffix)


__all__ = [
    "DEFAULT_CONTENT_TYPE",
    "MIME_TYPES",
    "content_type_for_extension",
    "content_type_for_path",
]
