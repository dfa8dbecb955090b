"""Shared type aliases used across wren modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler — user-defined function with variable signature
Handler: TypeAlias = Callable[..., Any]

# Not-found handler — receives the request, returns a response value
FallbackHandler: TypeAlias = Callable[..., Any]
