"""Tests for payload wrapping and merging."""

from __future__ import annotations

from crude.payload import merge, wrap_keys


class TestWrapKeys:
    def test_wraps_each_key(self) -> None:
        assert wrap_keys({"title": "hi", "body": "x"}, "post") == {
            "post[title]": "hi",
            "post[body]": "x",
        }

    def test_none_and_empty(self) -> None:
        assert wrap_keys(None, "post") == {}
        assert wrap_keys({}, "post") == {}

    def test_does_not_mutate_input(self) -> None:
        props = {"title": "hi"}
        wrap_keys(props, "post")
        assert props == {"title": "hi"}


class TestMerge:
    def test_later_sources_win(self) -> None:
        assert merge({"a": 1, "b": 1}, {"b": 2}) == {"a": 1, "b": 2}

    def test_skips_none(self) -> None:
        assert merge(None, {"a": 1}, None) == {"a": 1}

    def test_returns_new_dict(self) -> None:
        source = {"a": 1}
        merged = merge(source)
        merged["b"] = 2
        assert source == {"a": 1}
