"""Engine, template and locals stores."""

from __future__ import annotations

from .engines import EngineRegistry
from .locals import LocalsStore
from .templates import TemplateRegistry

__all__ = [
    "EngineRegistry",
    "LocalsStore",
    "TemplateRegistry",
]
