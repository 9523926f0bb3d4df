"""Common utility functions and helpers."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, TypeVar

T = TypeVar("T")


def deep_merge(*mappings: Mapping[str, Any] | None) -> dict[str, Any]:
    """Merge mappings into a new dict; later mappings win.

    Nested mappings present on both sides are merged recursively, everything
    else is replaced. The inputs are never mutated.
    """
    merged: dict[str, Any] = {}
    for mapping in mappings:
        if not mapping:
            continue
        for key, value in mapping.items():
            existing = merged.get(key)
            if isinstance(existing, Mapping) and isinstance(value, Mapping):
                merged[key] = deep_merge(existing, value)
            elif isinstance(value, Mapping):
                merged[key] = deep_merge(value)
            else:
                merged[key] = value
    return merged


def sort_by(items: list[T], key: Callable[[T], Any]) -> list[T]:
    """Sort ``items`` in place, ascending and stable, and return it."""
    items.sort(key=key)
    return items
