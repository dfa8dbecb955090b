"""Handler invocation — build arguments from the request, call, negotiate.

Handlers declare what they need by parameter name::

    def show(request): ...
    def show(user_id: int): ...            # path param, coerced to int
    async def show(request, slug): ...     # both, async

Resolution order:

1. ``request`` parameter (by name or ``Request`` annotation)
2. Path parameters (by name, coerced to the annotation when possible)
"""

import inspect
from collections.abc import Mapping
from typing import Any

from wren._internal.invoke import invoke
from wren._internal.types import Handler
from wren.http.request import Request
from wren.http.response import Response
from wren.routing.params import convert_param
from wren.server.negotiation import negotiate


async def call_handler(
    handler: Handler,
    request: Request,
    param_types: Mapping[str, str] | None = None,
) -> Response:
    """Call *handler* (sync or async) and convert its return value."""
    kwargs = build_handler_kwargs(handler, request, param_types or {})
    result = await invoke(handler, **kwargs)
    return negotiate(result)


def build_handler_kwargs(
    handler: Handler,
    request: Request,
    param_types: Mapping[str, str],
) -> dict[str, Any]:
    """Inspect *handler*'s signature and build kwargs from the request.

    A handler taking ``**kwargs`` receives every path parameter.
    """
    sig = inspect.signature(handler, eval_str=True)
    path_params = request.path_params
    kwargs: dict[str, Any] = {}

    for name, param in sig.parameters.items():
        if param.kind is inspect.Parameter.VAR_KEYWORD:
            for key, value in path_params.items():
                kwargs.setdefault(key, value)
        elif name == "request" or param.annotation is Request:
            kwargs[name] = request
        elif name in path_params:
            kwargs[name] = _coerce(path_params[name], param, param_types.get(name))

    return kwargs


def _coerce(value: str, param: inspect.Parameter, param_type: str | None) -> Any:
    annotation = param.annotation
    if annotation is not inspect.Parameter.empty and annotation is not str:
        try:
            return annotation(value)
        except (ValueError, TypeError):
            return value
    if annotation is str or param_type is None:
        return value
    try:
        return convert_param(value, param_type)
    except ValueError:
        return value
