"""ASGI response sending — one ``http.response.start`` and one body message."""

from wren._internal.asgi import Send
from wren.http.response import Response

_LATIN1 = "latin-1"


def _body_allowed(status: int) -> bool:
    # 1xx, 204 and 304 never carry a message body.
    return not (100 <= status < 200 or status in {204, 304})


def _encode_headers(response: Response, content_length: int) -> list[tuple[bytes, bytes]]:
    """Lower-cased latin-1 header pairs, content-type first, content-length last."""
    encoded = [(b"content-type", response.content_type.encode(_LATIN1))]
    encoded.extend(
        (name.lower().encode(_LATIN1), value.encode(_LATIN1)) for name, value in response.headers
    )
    encoded.append((b"content-length", str(content_length).encode(_LATIN1)))
    return encoded


async def send_response(response: Response, send: Send, *, head: bool = False) -> None:
    """Send *response* through ASGI.

    With ``head=True`` the body is withheld but ``content-length`` still
    reports the size a GET would have produced.
    """
    body = response.body_bytes if _body_allowed(response.status) else b""
    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": _encode_headers(response, len(body)),
        }
    )
    await send({"type": "http.response.body", "body": b"" if head else body})
