"""Port definitions for templating-core."""

from __future__ import annotations

from .engine import Engine, IEngine, is_engine
from .resolver import ITemplateResolver

__all__ = [
    "Engine",
    "IEngine",
    "ITemplateResolver",
    "is_engine",
]
