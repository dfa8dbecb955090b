"""Pattern compiler — turns ``/users/<int:id>/`` into an anchored regex.

A pattern is literal text plus ``<name>`` or ``<type:name>`` placeholders.
Compilation produces one regular expression with a named group per
placeholder, in template order::

    compile_pattern("/users/<int:id>/").regex.pattern
    # '/users/(?P<id>[0-9]+)/?'

Every error is raised as ``InvalidPatternError`` so bad patterns fail at
registration, never while serving.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from wren.errors import InvalidPatternError
from wren.routing.params import DEFAULT_TYPE, resolve_fragment

_PLACEHOLDER_RE = re.compile(r"<([^<>]+)>")


@dataclass(frozen=True, slots=True)
class Segment:
    """A parsed piece of a route pattern.

    Literal:  ``/users/``   (is_param=False)
    Param:    ``<id>``      (is_param=True, param_name="id", param_type="any")
    Typed:    ``<int:id>``  (is_param=True, param_name="id", param_type="int")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    param_type: str = DEFAULT_TYPE


@dataclass(frozen=True, slots=True)
class CompiledPattern:
    """The output of ``compile_pattern``."""

    pattern: str
    regex: re.Pattern[str]
    param_names: tuple[str, ...]
    param_types: Mapping[str, str]
    trailing_slash: bool

    def match(self, path: str) -> dict[str, str] | None:
        """Return ``{name: value}`` for *path*, or ``None`` if it doesn't match."""
        m = self.regex.fullmatch(path)
        if m is None:
            return None
        return {name: m.group(name) for name in self.param_names}


def normalize_pattern(template: str) -> str:
    """Return *template* with a leading ``/``."""
    if not template.startswith("/"):
        return "/" + template
    return template


def parse_pattern(template: str) -> list[Segment]:
    """Split a pattern into literal and placeholder segments.

    Examples::

        "/users"             -> [Segment("/users")]
        "/users/<id>"        -> [Segment("/users/"), Segment("<id>", is_param=True, ...)]
        "/users/<int:id>/"   -> [..., Segment("<int:id>", ..., param_type="int"), Segment("/")]
        "<[a-z]{2}:lang>"    -> [Segment("/"), Segment(..., param_type="[a-z]{2}")]

    The type is split off at the last ``:``, so custom fragments may
    contain colons (``<(?:v1|v2):version>``).
    """
    pattern = normalize_pattern(template)
    segments: list[Segment] = []
    seen: set[str] = set()
    literal_start = 0
    i = 0

    while i < len(pattern):
        ch = pattern[i]
        if ch == ">":
            raise InvalidPatternError(pattern, f"unexpected '>' at position {i}")
        if ch != "<":
            i += 1
            continue

        close = pattern.find(">", i + 1)
        if close == -1:
            raise InvalidPatternError(pattern, f"unterminated '<' at position {i}")
        inner = pattern[i + 1 : close]
        if "<" in inner:
            raise InvalidPatternError(pattern, f"nested '<' inside placeholder at position {i}")

        if i > literal_start:
            segments.append(Segment(pattern[literal_start:i]))
        segments.append(_parse_placeholder(pattern, inner, seen))
        i = close + 1
        literal_start = i

    if literal_start < len(pattern):
        segments.append(Segment(pattern[literal_start:]))
    return segments


def _parse_placeholder(pattern: str, inner: str, seen: set[str]) -> Segment:
    if not inner:
        raise InvalidPatternError(pattern, "empty placeholder '<>'")

    if ":" in inner:
        param_type, param_name = inner.rsplit(":", 1)
        if not param_type:
            raise InvalidPatternError(pattern, f"empty type in placeholder <{inner}>")
    else:
        param_type, param_name = DEFAULT_TYPE, inner

    if not param_name.isidentifier():
        raise InvalidPatternError(
            pattern, f"parameter name {param_name!r} in <{inner}> is not a valid identifier"
        )
    if param_name in seen:
        raise InvalidPatternError(pattern, f"duplicate parameter name {param_name!r}")
    seen.add(param_name)

    return Segment(
        value=f"<{inner}>",
        is_param=True,
        param_name=param_name,
        param_type=param_type,
    )


def compile_pattern(template: str) -> CompiledPattern:
    """Compile *template* into an anchored regular expression.

    Literal text is escaped. A single trailing ``/`` is optional whether
    or not the template declares one; the strict-slash policy decides
    at match time what to do when they differ.
    """
    pattern = normalize_pattern(template)
    segments = parse_pattern(pattern)
    trailing_slash = pattern.endswith("/")

    parts: list[str] = []
    names: list[str] = []
    types: dict[str, str] = {}
    for index, seg in enumerate(segments):
        if seg.is_param:
            name = seg.param_name or ""
            fragment = resolve_fragment(seg.param_type)
            _check_fragment(pattern, seg, fragment)
            parts.append(f"(?P<{name}>{fragment})")
            names.append(name)
            types[name] = seg.param_type
            continue
        literal = seg.value
        if trailing_slash and index == len(segments) - 1:
            literal = literal[:-1]
        parts.append(re.escape(literal))
    parts.append("/?")

    try:
        regex = re.compile("".join(parts))
    except re.error as exc:
        raise InvalidPatternError(pattern, f"compiled expression is invalid: {exc}") from exc

    return CompiledPattern(
        pattern=pattern,
        regex=regex,
        param_names=tuple(names),
        param_types=types,
        trailing_slash=trailing_slash,
    )


def _check_fragment(pattern: str, seg: Segment, fragment: str) -> None:
    try:
        re.compile(fragment)
    except re.error as exc:
        raise InvalidPatternError(
            pattern, f"type {seg.param_type!r} of {seg.value} is not a valid regex: {exc}"
        ) from exc


def build_url(template: str, params: Mapping[str, Any]) -> str:
    """Substitute placeholder values into *template*.

    Each ``<name>`` or ``<type:name>`` whose name is a key of *params* is
    replaced by ``str(value)``. Other placeholders are left as they are.
    Values are not validated or escaped::

        build_url("/user/<int:id>/", {"id": 7})  -> "/user/7/"
    """

    def substitute(m: re.Match[str]) -> str:
        name = m.group(1).rsplit(":", 1)[-1]
        if name in params:
            return str(params[name])
        return m.group(0)

    return _PLACEHOLDER_RE.sub(substitute, normalize_pattern(template))
