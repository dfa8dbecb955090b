"""Tests for wren.routing.params — placeholder types and conversion."""

import pytest

from wren.routing.params import CONVERTERS, DEFAULT_TYPE, convert_param, resolve_fragment


class TestConverters:
    def test_all_types_registered(self) -> None:
        assert set(CONVERTERS) == {"int", "string", "str", "any"}

    def test_default_type_is_any(self) -> None:
        assert DEFAULT_TYPE == "any"

    def test_string_and_str_share_fragment(self) -> None:
        assert CONVERTERS["string"][0] == CONVERTERS["str"][0]

    def test_any_excludes_slash(self) -> None:
        pattern, _ = CONVERTERS["any"]
        assert pattern == r"[^/]+"


class TestResolveFragment:
    def test_builtin(self) -> None:
        assert resolve_fragment("int") == r"[0-9]+"

    def test_custom_fragment_verbatim(self) -> None:
        assert resolve_fragment("[a-z]{2}") == "[a-z]{2}"


class TestConvertParam:
    def test_int_conversion(self) -> None:
        assert convert_param("42", "int") == 42
        assert isinstance(convert_param("42", "int"), int)

    def test_string_passthrough(self) -> None:
        assert convert_param("alice", "string") == "alice"

    def test_any_passthrough(self) -> None:
        assert convert_param("a.b", "any") == "a.b"

    def test_custom_type_stays_str(self) -> None:
        assert convert_param("en", "[a-z]{2}") == "en"

    def test_int_invalid_raises(self) -> None:
        with pytest.raises(ValueError):
            convert_param("abc", "int")
