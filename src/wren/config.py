"""Router configuration.

RouterConfig holds the router-wide defaults applied at registration time:
the path prefix and the strict-slash flag. ``debug`` only affects the
ASGI adapter's 500 bodies.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(prefix="/api", strict_slash=True)
    """

    # Prepended to every pattern registered on the router
    prefix: str = ""

    # Default strict-slash policy for new routes (per-route override wins)
    strict_slash: bool = False

    # Include tracebacks in 500 responses from the ASGI adapter
    debug: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "prefix", normalize_prefix(self.prefix))


def normalize_prefix(prefix: str) -> str:
    """Return *prefix* with a leading ``/`` and no trailing ``/``.

    An empty prefix stays empty::

        normalize_prefix("api/")  -> "/api"
        normalize_prefix("/")     -> ""
    """
    if not prefix:
        return ""
    if not prefix.startswith("/"):
        prefix = "/" + prefix
    return prefix.rstrip("/")
