"""Loopback preview server for generated sites."""

from .handler import StaticFileHandler, sanitize_path
from .mime import content_type_for_extension, content_type_for_path
from .preview import PreviewServer
from .response import HTTPResponse

__all__ = [
    "HTTPResponse",
    "PreviewServer",
    "StaticFileHandler",
    "content_type_for_extension",
    "content_type_for_path",
    "sanitize_path",
]
