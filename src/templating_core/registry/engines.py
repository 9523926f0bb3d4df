"""Engine registry mapping names to engine instances."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any

from ..exceptions import InvalidEngineError
from ..ports.engine import IEngine, is_engine

logger = logging.getLogger(__name__)


class EngineRegistry:
    """Stores rendering engines by name.

    Every stored instance satisfies :class:`~templating_core.ports.IEngine`;
    a rejected registration leaves the registry untouched. Registering an
    existing name replaces the previous engine.
    """

    def __init__(self) -> None:
        self._engines: dict[str, IEngine] = {}
        self._lock = threading.RLock()

    def register(self, name: str, engine: IEngine | Callable[[], Any]) -> IEngine:
        """Register an engine instance, or a class/factory that builds one."""
        instance = engine
        if isinstance(engine, type) or (callable(engine) and not is_engine(engine)):
            instance = engine()
        if not is_engine(instance):
            raise InvalidEngineError(name)

        with self._lock:
            self._engines[name] = instance
        logger.debug("Registered engine %s -> %s", name, type(instance).__name__)
        return instance

    def is_registered(self, name: str) -> bool:
        with self._lock:
            return name in self._engines

    def get(self, name: str) -> IEngine | None:
        with self._lock:
            return self._engines.get(name)

    def unregister(self, name: str) -> None:
        with self._lock:
            removed = self._engines.pop(name, None)
        if removed is not None:
            logger.debug("Unregistered engine %s", name)

    def all(self) -> Mapping[str, IEngine]:
        """Return a read-only snapshot of the registered engines."""
        with self._lock:
            return MappingProxyType(dict(self._engines))

    def clear(self) -> None:
        """Remove all engines (testing utility)."""
        with self._lock:
            self._engines.clear()
