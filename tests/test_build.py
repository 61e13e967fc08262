"""Tests for build-tool integration: JSON and nested mappings to module source."""

from __future__ import annotations

import json
import logging

import pytest

from precompile_intl.build import (
    TransformResult,
    flatten_messages,
    transform_json,
    transform_messages,
)
from precompile_intl.diagnostics import IntlSyntaxError


def _load(source: str) -> dict[str, object]:
    namespace: dict[str, object] = {}
    exec(source, namespace)  # noqa: S102
    messages = namespace["messages"]
    assert isinstance(messages, dict)
    return messages


class TestFlattenMessages:
    """flatten_messages() joins nested group keys."""

    def test_nested(self) -> None:
        """Groups of any depth become dotted keys."""
        assert flatten_messages({"a": {"b": "x", "c": {"d": "y"}}, "e": "z"}) == {
            "a.b": "x",
            "a.c.d": "y",
            "e": "z",
        }

    def test_custom_separator(self) -> None:
        """sep joins the parts."""
        assert flatten_messages({"cart": {"total": "T"}}, sep="/") == {"cart/total": "T"}

    def test_duplicate_key_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        """A flat key colliding with a nested one keeps the later value."""
        with caplog.at_level(logging.WARNING, logger="precompile_intl.build"):
            flat = flatten_messages({"a.b": "flat", "a": {"b": "nested"}})
        assert flat == {"a.b": "nested"}
        assert "a.b" in caplog.text

    @pytest.mark.parametrize("leaf", [42, None, ["x"]])
    def test_rejects_other_leaves(self, leaf: object) -> None:
        """Leaves must be strings or groups."""
        with pytest.raises(TypeError, match="must be a string or a group"):
            flatten_messages({"group": {"bad": leaf}})


class TestTransform:
    """transform_messages() and transform_json()."""

    def test_json_document(self) -> None:
        """A JSON object compiles to an importable module."""
        document = json.dumps(
            {
                "greeting": "Hello {name}!",
                "cart": {"items": "{n, plural, one {# item} other {# items}}"},
            }
        )
        result = transform_json(document)
        assert isinstance(result, TransformResult)
        assert result.is_valid
        messages = _load(result.source)
        assert messages["greeting"]("Ann") == "Hello Ann!"  # type: ignore[operator]
        assert messages["cart.items"](3) == "3 items"  # type: ignore[operator]

    def test_bytes_input(self) -> None:
        """Raw bytes are decoded as JSON."""
        result = transform_json(b'{"hi": "Hi"}')
        assert _load(result.source) == {"hi": "Hi"}

    def test_errors_reported_and_skipped(self) -> None:
        """Malformed messages are absent from the module and listed in errors."""
        result = transform_messages({"ok": "fine", "bad": "{n, plural, one {x}}"})
        assert not result.is_valid
        assert list(result.errors) == ["bad"]
        assert _load(result.source) == {"ok": "fine"}

    def test_strict(self) -> None:
        """strict=True raises instead."""
        with pytest.raises(IntlSyntaxError):
            transform_messages({"bad": "{"}, strict=True)

    def test_runtime_module(self) -> None:
        """The helper import path is configurable."""
        result = transform_messages({"x": "{v}"}, runtime_module="app.intl_runtime")
        assert "from app.intl_runtime import interpolate as _interpolate" in result.source

    def test_non_object_document(self) -> None:
        """Only JSON objects are message documents."""
        with pytest.raises(TypeError, match="must be a JSON object"):
            transform_json("[1, 2]")

    def test_invalid_json(self) -> None:
        """Decoding errors propagate."""
        with pytest.raises(json.JSONDecodeError):
            transform_json("{not json")

    def test_deterministic(self) -> None:
        """The same document yields the same source."""
        document = '{"a": "{x, select, y {Y} other {O}}", "b": "{n, number, percent}"}'
        assert transform_json(document).source == transform_json(document).source
