"""Default render variables shared by every template."""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any

logger = logging.getLogger(__name__)


def now() -> datetime:
    """Current timezone-aware UTC timestamp."""
    return datetime.now(timezone.utc)


class LocalsStore:
    """Name to value mapping merged into every render as defaults."""

    def __init__(self, *, builtins: bool = True) -> None:
        self._values: dict[str, Any] = {}
        self._lock = threading.RLock()
        if builtins:
            self.add("now", now)

    def add(self, name: str, value: Any) -> None:
        with self._lock:
            self._values[name] = value
        logger.debug("Set local %s", name)

    def delete(self, name: str) -> None:
        with self._lock:
            self._values.pop(name, None)

    def all(self) -> Mapping[str, Any]:
        """Return a read-only snapshot of the locals."""
        with self._lock:
            return MappingProxyType(dict(self._values))
