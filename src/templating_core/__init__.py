"""Weighted multi-source template registry with pluggable rendering engines."""

from __future__ import annotations

from .config import DEFAULT_ENGINE, TemplatingConfig

# Engines
from .engines.jinja import JinjaEngine, RegistryLoader
from .engines.string import StringFormatEngine
from .exceptions import (
    InvalidEngineError,
    TemplateResolutionTimeoutError,
    TemplatingError,
    UnknownEngineError,
    UnknownTemplateError,
)
from .instrumentation import HookRegistry, InstrumentationHook
from .ports.engine import Engine, IEngine, is_engine
from .ports.resolver import ITemplateResolver

# Registries and pipeline
from .registry import EngineRegistry, LocalsStore, TemplateRegistry
from .resolution import load_template, load_template_sync
from .sources import InlineCode, TemplateSource
from .templating import Templating, get_templating, reset_templating

__all__ = [
    "DEFAULT_ENGINE",
    "Engine",
    "EngineRegistry",
    "HookRegistry",
    "IEngine",
    "ITemplateResolver",
    "InlineCode",
    "InstrumentationHook",
    "InvalidEngineError",
    "JinjaEngine",
    "LocalsStore",
    "RegistryLoader",
    "StringFormatEngine",
    "TemplateRegistry",
    "TemplateResolutionTimeoutError",
    "TemplateSource",
    "Templating",
    "TemplatingConfig",
    "TemplatingError",
    "UnknownEngineError",
    "UnknownTemplateError",
    "get_templating",
    "is_engine",
    "load_template",
    "load_template_sync",
    "reset_templating",
]
