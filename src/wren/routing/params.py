"""Placeholder types and path parameter conversion.

Built-in types for pattern placeholders like ``<int:id>``. A type that
is not in the table is used verbatim as a regular expression fragment.
"""

# (regex_fragment, python_type) for each built-in placeholder type
CONVERTERS: dict[str, tuple[str, type]] = {
    "int": (r"[0-9]+", int),
    "string": (r"[A-Za-z0-9_\-]+", str),
    "str": (r"[A-Za-z0-9_\-]+", str),
    "any": (r"[^/]+", str),
}

# Type used by bare ``<name>`` placeholders
DEFAULT_TYPE = "any"


def resolve_fragment(param_type: str) -> str:
    """Return the regex fragment for *param_type*.

    Built-in types come from ``CONVERTERS``; anything else is returned
    unchanged and treated as a custom regular expression.
    """
    entry = CONVERTERS.get(param_type)
    if entry is None:
        return param_type
    return entry[0]


def convert_param(value: str, param_type: str) -> str | int:
    """Convert a captured path parameter string to the type's python type.

    Custom fragments have no python type and pass through as ``str``.
    Raises ``ValueError`` if the string cannot be converted.
    """
    entry = CONVERTERS.get(param_type)
    if entry is None:
        return value
    return entry[1](value)
