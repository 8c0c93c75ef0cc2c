"""HTTP responses produced by the static file handler."""

from __future__ import annotations

import dataclasses as dc
import http

TEXT_PLAIN = "text/plain; charset=utf-8"
ALLOWED_METHODS = "GET, HEAD"


@dc.dataclass(frozen=True, slots=True)
class HTTPResponse:
    """Status, headers, and body of one response.

    Header names are lowercase. ``content-length`` always states the size of
    the full representation, even when ``body`` is empty for a HEAD request.
    """

    status: http.HTTPStatus
    headers: dict[str, str]
    body: bytes = b""

    @property
    def keep_alive_allowed(self) -> bool:
        """Return ``True`` unless the response demands the connection close."""
        return self.headers.get("connection") != "close"

    def without_body(self) -> HTTPResponse:
        """Return this response with the body dropped and headers intact."""
        return dc.replace(self, body=b"")

    @classmethod
    def ok(cls, body: bytes, content_type: str) -> HTTPResponse:
        """Return a 200 response for ``body``."""
        return cls.ok_with_length(body, content_type, content_length=len(body))

    @classmethod
    def ok_with_length(
        cls, body: bytes, content_type: str, *, content_length: int
    ) -> HTTPResponse:
        """Return a 200 response whose length is known without the body."""
        return cls(
            status=http.HTTPStatus.OK,
            headers={
                "content-type": content_type,
                "content-length": str(content_length),
            },
            body=body,
        )

    @classmethod
    def error(cls, status: http.HTTPStatus) -> HTTPResponse:
        """Return the fixed plain-text response for an error ``status``."""
        text = status.phrase.encode("utf-8")
        headers = {
            "content-type": TEXT_PLAIN,
            "content-length": str(len(text)),
            "connection": "close",
        }
        if status == http.HTTPStatus.METHOD_NOT_ALLOWED:
            headers["allow"] = ALLOWED_METHODS
        return cls(status=status, headers=headers, body=text)

    @classmethod
    def bad_request(cls) -> HTTPResponse:
        """Return 400 Bad Request."""
        return cls.error(http.HTTPStatus.BAD_REQUEST)

    @classmethod
    def forbidden(cls) -> HTTPResponse:
        """Return 403 Forbidden."""
        return cls.error(http.HTTPStatus.FORBIDDEN)

    @classmethod
    def not_found(cls) -> HTTPResponse:
        """Return 404 Not Found."""
        return cls.error(http.HTTPStatus.NOT_FOUND)

    @classmethod
    def method_not_allowed(cls) -> HTTPResponse:
        """Return 405 Method Not Allowed with an ``allow`` header."""
        return cls.error(http.HTTPStatus.METHOD_NOT_ALLOWED)

    @classmethod
    def internal_error(cls) -> HTTPResponse:
        """Return 500 Internal Server Error."""
        return cls.error(http.HTTPStatus.INTERNAL_SERVER_ERROR)


__all__ = ["ALLOWED_METHODS", "TEXT_PLAIN", "HTTPResponse"]
