"""Template registry with weighted multi-source override."""

from __future__ import annotations

import asyncio
import inspect
import logging
import threading
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

from ..config import TemplatingConfig
from ..exceptions import UnknownTemplateError
from ..sources import TemplateSource
from ..utils import sort_by

logger = logging.getLogger(__name__)


class TemplateRegistry:
    """
    Registry of template sources keyed by name.

    Each name holds a list of sources kept in ascending weight order; equal
    weights stay in registration order. The last source is the active one,
    so the highest weight wins and ties go to the latest registration.
    """

    def __init__(self, config: TemplatingConfig | None = None) -> None:
        self._config = config or TemplatingConfig()
        self._templates: dict[str, list[TemplateSource]] = {}
        self._lock = threading.RLock()

    # ── Registration ─────────────────────────────────────────────

    def register(
        self,
        name: str,
        target: Any,
        weight: int = 0,
        engine: str | None = None,
    ) -> TemplateSource:
        """Register a new source for ``name`` and return it."""
        source = TemplateSource.from_target(
            target,
            engine=engine or self._config.default_engine,
            weight=weight or 0,
        )
        with self._lock:
            sources = self._templates.setdefault(name, [])
            sources.append(source)
            sort_by(sources, key=lambda s: s.weight)
        logger.debug(
            "Registered %s template %s (weight=%d, engine=%s)",
            source.kind,
            name,
            source.weight,
            source.engine,
        )
        return source

    def unregister(self, name: str, target: Any = None) -> None:
        """Drop every source of ``name``, or only those matching ``target``.

        An empty target (``None``, ``""``, ``{}``) drops every source.
        """
        with self._lock:
            if name not in self._templates:
                return
            if not target:
                del self._templates[name]
                logger.debug("Unregistered all templates for %s", name)
                return

            survivors = [s for s in self._templates[name] if not s.matches(target)]
            removed = len(self._templates[name]) - len(survivors)
            if survivors:
                self._templates[name] = survivors
            else:
                del self._templates[name]
        logger.debug("Unregistered %d template source(s) for %s", removed, name)

    # ── Lookup ───────────────────────────────────────────────────

    def is_registered(self, name: str) -> bool:
        with self._lock:
            return bool(self._templates.get(name))

    def list(
        self, name: str | None = None
    ) -> tuple[TemplateSource, ...] | Mapping[str, tuple[TemplateSource, ...]]:
        """Return the sources of ``name``, or a snapshot of every name."""
        with self._lock:
            if name is not None:
                return tuple(self._templates.get(name, ()))
            return MappingProxyType(
                {key: tuple(sources) for key, sources in self._templates.items()}
            )

    def active(self, name: str) -> TemplateSource:
        """Return the source that currently wins for ``name``."""
        with self._lock:
            sources = self._templates.get(name)
            if not sources:
                raise UnknownTemplateError(name)
            return sources[-1]

    # ── Resolution ───────────────────────────────────────────────

    async def resolve(self, name: str) -> tuple[str, str]:
        """Resolve ``name`` to ``(engine_name, code)``.

        File reads and producer calls may suspend; their failures propagate
        unchanged.
        """
        source = self.active(name)
        code = await self._load(source)
        logger.debug("Resolved template %s from %s source", name, source.kind)
        return source.engine, code

    async def _load(self, source: TemplateSource) -> str:
        if source.code is not None:
            return source.code

        if source.filename is not None:
            return await asyncio.to_thread(
                Path(source.filename).read_text, encoding=self._config.encoding
            )

        assert source.producer is not None  # ensured by TemplateSource
        result = source.producer()
        if inspect.isawaitable(result):
            result = await result
        return result

    # ── Cleanup ──────────────────────────────────────────────────

    def clear(self) -> None:
        """Remove all templates (testing utility)."""
        with self._lock:
            self._templates.clear()
