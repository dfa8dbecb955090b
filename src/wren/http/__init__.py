"""HTTP primitives — Request, Response, Headers, QueryParams.

Thin immutable types over ASGI. The router reads from them and builds
new ones; it never mutates a request in place.
"""

from wren.http.headers import Headers
from wren.http.query import QueryParams
from wren.http.request import Request
from wren.http.response import Redirect, Response, not_found_response, redirect_response

__all__ = [
    "Headers",
    "QueryParams",
    "Redirect",
    "Request",
    "Response",
    "not_found_response",
    "redirect_response",
]
