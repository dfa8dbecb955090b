"""Test utilities for wren routers.

    from wren.testing import TestClient, make_request
"""

from wren.testing.client import TestClient, build_scope, make_request

__all__ = [
    "TestClient",
    "build_scope",
    "make_request",
]
