"""Template rendering engines."""

from __future__ import annotations

from .jinja import JinjaEngine, RegistryLoader
from .string import StringFormatEngine

__all__ = ["JinjaEngine", "RegistryLoader", "StringFormatEngine"]
