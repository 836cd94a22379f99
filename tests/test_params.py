"""Tests for plover.routing.params — path parameter conversion."""

import pytest

from plover.routing.params import CONVERTERS, convert_param, param_matches


class TestConverters:
    def test_all_types_registered(self) -> None:
        assert set(CONVERTERS) == {"str", "int", "float", "path"}

    def test_path_regex_matches_slashes(self) -> None:
        pattern, _ = CONVERTERS["path"]
        assert pattern == r".+"


class TestConvertParam:
    def test_str_passthrough(self) -> None:
        assert convert_param("hello", "str") == "hello"

    def test_int_conversion(self) -> None:
        assert convert_param("42", "int") == 42
        assert isinstance(convert_param("42", "int"), int)

    def test_float_conversion(self) -> None:
        assert convert_param("9.99", "float") == 9.99

    def test_invalid_int(self) -> None:
        with pytest.raises(ValueError):
            convert_param("abc", "int")

    def test_unknown_type(self) -> None:
        with pytest.raises(KeyError):
            convert_param("x", "uuid")


class TestParamMatches:
    def test_int(self) -> None:
        assert param_matches("42", "int") is True
        assert param_matches("4a", "int") is False

    def test_str_rejects_slash(self) -> None:
        assert param_matches("a/b", "str") is False

    def test_path_accepts_slash(self) -> None:
        assert param_matches("a/b", "path") is True
