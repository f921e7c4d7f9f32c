"""Tests for trh.core.structured module."""

from __future__ import annotations

from trh.core.structured import as_str_dict, get_int, get_str, get_table


def test_as_str_dict() -> None:
    assert as_str_dict({"a": 1}) == {"a": 1}
    assert as_str_dict({1: "a"}) is None
    assert as_str_dict([("a", 1)]) is None


def test_get_str_strips_and_rejects_blank() -> None:
    assert get_str({"k": "  v "}, "k") == "v"
    assert get_str({"k": "  "}, "k") is None
    assert get_str({"k": 1}, "k") is None
    assert get_str({}, "k") is None


def test_get_int() -> None:
    assert get_int({"k": 12}, "k") == 12
    assert get_int({"k": "34"}, "k") == 34
    assert get_int({"k": True}, "k") is None
    assert get_int({"k": 1.5}, "k") is None
    assert get_int({"k": "x1"}, "k") is None


def test_get_table() -> None:
    assert get_table({"cloud": {"pluginId": 1}}, "cloud") == {"pluginId": 1}
    assert get_table({"cloud": 1}, "cloud") is None
