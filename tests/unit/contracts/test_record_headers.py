# tests/unit/contracts/test_record_headers.py
"""Tests for record headers."""

from __future__ import annotations

import pytest

from sinkfields.contracts.headers import Header, Headers


class TestHeader:
    def test_string_value_unchanged(self) -> None:
        assert Header("pk", "order_id").value_as_str() == "order_id"

    def test_bytes_value_decoded(self) -> None:
        assert Header("pk", b"order_id").value_as_str() == "order_id"

    def test_other_values_stringified(self) -> None:
        assert Header("pk", 42).value_as_str() == "42"

    def test_invalid_utf8_bytes_raise(self) -> None:
        with pytest.raises(UnicodeDecodeError):
            Header("pk", b"\xff\xfe").value_as_str()

    def test_key_must_be_string(self) -> None:
        with pytest.raises(TypeError, match="Header key must be a string, got int"):
            Header(1, "id")  # type: ignore[arg-type]


class TestHeaders:
    def test_preserves_insertion_order(self) -> None:
        headers = Headers.from_pairs([("b", "2"), ("a", "1")])

        assert [h.key for h in headers] == ["b", "a"]
        assert len(headers) == 2

    def test_repeated_keys_kept(self) -> None:
        headers = Headers.from_pairs([("pk", "a"), ("pk", "b")])

        assert [h.value for h in headers] == ["a", "b"]

    def test_from_mapping(self) -> None:
        headers = Headers.from_mapping({"tenant": "tenant_id", "id": "order_id"})

        assert [(h.key, h.value) for h in headers] == [("tenant", "tenant_id"), ("id", "order_id")]

    def test_empty_by_default(self) -> None:
        assert len(Headers()) == 0
        assert list(Headers()) == []

    def test_str_lists_pairs(self) -> None:
        assert str(Headers.from_pairs([("pk", "id")])) == "[pk=id]"

    def test_is_immutable(self) -> None:
        headers = Headers.from_pairs([("pk", "id")])
        with pytest.raises(AttributeError):
            headers.entries = ()  # type: ignore[misc]

    def test_str_renders_undecodable_bytes(self) -> None:
        headers = Headers.from_pairs([("pk", b"\xff"), ("id", b"order_id")])

        assert str(headers) == "[pk=b'\\xff', id=order_id]"
