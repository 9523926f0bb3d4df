"""Tests for merge and sort helpers."""

from types import MappingProxyType

from templating_core.utils import deep_merge, sort_by


def test_deep_merge_later_mapping_wins() -> None:
    assert deep_merge({"a": 1, "b": 2}, {"b": 3}) == {"a": 1, "b": 3}


def test_deep_merge_merges_nested_mappings_without_mutation() -> None:
    base = {"site": {"name": "Example", "url": "https://example.org"}}
    override = {"site": {"name": "Other"}}

    merged = deep_merge(base, override)

    assert merged == {"site": {"name": "Other", "url": "https://example.org"}}
    assert base["site"]["name"] == "Example"
    assert merged["site"] is not base["site"]


def test_deep_merge_accepts_none_and_read_only_mappings() -> None:
    merged = deep_merge(MappingProxyType({"a": 1}), None)

    assert merged == {"a": 1}


def test_deep_merge_replaces_non_mapping_with_mapping() -> None:
    assert deep_merge({"a": 1}, {"a": {"b": 2}}) == {"a": {"b": 2}}


def test_sort_by_is_stable() -> None:
    items = [("a", 1), ("b", 0), ("c", 1), ("d", 0)]

    assert sort_by(items, key=lambda item: item[1]) == [
        ("b", 0),
        ("d", 0),
        ("a", 1),
        ("c", 1),
    ]
