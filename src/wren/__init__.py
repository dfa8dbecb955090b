"""Wren — a small HTTP request router.

Matches request paths against ``<type:name>`` patterns in registration
order, runs hooks and per-route middleware, dispatches to the handler,
and builds URLs back from route names.

Basic usage::

    from wren import Router

    router = Router()

    @router.route("/users/<int:id>/", name="user")
    def show(id: int):
        return f"user {id}"

    router.url_for("user", {"id": 7})  # ("/users/7/", True)

A ``Router`` is an ASGI application; serve it with any ASGI server.
"""

__version__ = "0.1.0"
__all__ = [
    "BeforeAfterMiddleware",
    "ConfigurationError",
    "HTTPError",
    "HookStage",
    "InvalidPatternError",
    "MatchResult",
    "MethodNotAllowed",
    "Middleware",
    "Next",
    "NotFound",
    "Redirect",
    "Request",
    "Response",
    "Route",
    "Router",
    "RouterConfig",
    "WrenError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wren`` fast while providing a clean top-level API.
    """
    if name == "Router":
        from wren.routing.router import Router

        return Router

    if name in ("Route", "MatchResult"):
        from wren.routing import route as _route

        return getattr(_route, name)

    if name == "RouterConfig":
        from wren.config import RouterConfig

        return RouterConfig

    if name == "Request":
        from wren.http.request import Request

        return Request

    if name in ("Response", "Redirect"):
        from wren.http import response as _resp

        return getattr(_resp, name)

    if name in ("BeforeAfterMiddleware", "HookStage", "Middleware", "Next"):
        from wren import middleware as _mw

        return getattr(_mw, name)

    if name in (
        "ConfigurationError",
        "HTTPError",
        "InvalidPatternError",
        "MethodNotAllowed",
        "NotFound",
        "WrenError",
    ):
        from wren import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
