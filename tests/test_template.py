"""Tests for ``{key}`` template expansion."""

from __future__ import annotations

import pytest

from crude.exceptions import MissingVariableError
from crude.exit_codes import EXIT_INVALID_USAGE
from crude.template import expand, template_variables


class TestExpand:
    def test_expands_and_consumes_keys(self) -> None:
        data = {"baseUrl": "http://x", "id": 5}
        assert expand("{baseUrl}/posts/{id}.json", data) == "http://x/posts/5.json"
        assert data == {}

    def test_unused_keys_are_kept(self) -> None:
        data = {"id": 5, "page": 2}
        assert expand("posts/{id}", data) == "posts/5"
        assert data == {"page": 2}

    def test_whitespace_inside_braces(self) -> None:
        assert expand("{ id }", {"id": 1}) == "1"
        assert expand("{id  }/{  x}", {"id": 1, "x": "y"}) == "1/y"

    def test_values_are_stringified(self) -> None:
        assert expand("{a}-{b}", {"a": 0, "b": None}) == "0-None"

    def test_no_tokens(self) -> None:
        data = {"a": 1}
        assert expand("plain/path", data) == "plain/path"
        assert data == {"a": 1}

    def test_unterminated_brace_is_literal(self) -> None:
        assert expand("posts/{id", {"id": 1}) == "posts/{id"


class TestMissingVariable:
    def test_missing_key_raises(self) -> None:
        with pytest.raises(MissingVariableError) as exc_info:
            expand("{foo}", {})
        assert exc_info.value.variable == "foo"
        assert exc_info.value.template == "{foo}"
        assert "foo" in str(exc_info.value)

    def test_same_key_twice_fails_on_second_use(self) -> None:
        with pytest.raises(MissingVariableError) as exc_info:
            expand("{id}/{id}", {"id": 1})
        assert exc_info.value.variable == "id"

    def test_exit_code(self) -> None:
        with pytest.raises(MissingVariableError) as exc_info:
            expand("{foo}", {})
        assert exc_info.value.exit_code == EXIT_INVALID_USAGE


class TestTemplateVariables:
    def test_lists_tokens_in_order(self) -> None:
        assert template_variables("{a}/x/{ b }/{a}") == ["a", "b", "a"]

    def test_no_tokens(self) -> None:
        assert template_variables("posts") == []
