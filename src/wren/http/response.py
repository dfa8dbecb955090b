"""HTTP response with chainable .with_*() transformation API.

Each transformation returns a new Response. Immutable by convention,
built incrementally by design.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from urllib.parse import quote

# Left as-is in Location: RFC 3986 reserved characters and existing escapes
_LOCATION_SAFE = "/:@!$&'()*+,;=-._~%?#"


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations.

    Construct with a body, then chain ``.with_*()`` calls to set
    status and headers. Each call returns a new ``Response``.
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/html; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    # -- Chainable transformations --

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        """Return a new Response with additional headers."""
        new = tuple(headers.items())
        return replace(self, headers=(*self.headers, *new))

    def with_content_type(self, content_type: str) -> Response:
        """Return a new Response with a different content type."""
        return replace(self, content_type=content_type)

    # -- Accessors --

    def header(self, name: str, default: str | None = None) -> str | None:
        """Return the first header value for *name* (case-insensitive)."""
        lower = name.lower()
        for key, value in self.headers:
            if key.lower() == lower:
                return value
        return default

    @property
    def location(self) -> str | None:
        """The ``Location`` header, set on redirects."""
        return self.header("location")

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        """Body as string."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body


@dataclass(frozen=True, slots=True)
class Redirect:
    """A redirect returned from a handler."""

    url: str
    status: int = 302
    headers: tuple[tuple[str, str], ...] = ()


def quote_location(location: str) -> str:
    """Percent-encode *location* for a ``Location`` header.

    ASGI paths arrive decoded, so ``/日本/`` must go out as
    ``/%E6%97%A5%E6%9C%AC/``. Already-encoded input is left unchanged.
    """
    return quote(location, safe=_LOCATION_SAFE)


def redirect_response(location: str, status: int = 301) -> Response:
    """Build a redirect response pointing at *location*."""
    return Response(
        body="",
        status=status,
        content_type="text/plain; charset=utf-8",
        headers=(("Location", quote_location(location)),),
    )


def not_found_response(detail: str = "Not Found") -> Response:
    """The default response for requests no route matched."""
    return Response(body=detail, status=404, content_type="text/plain; charset=utf-8")
