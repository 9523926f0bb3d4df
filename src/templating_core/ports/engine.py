"""Rendering engine port."""

from __future__ import annotations

from collections.abc import Awaitable, Mapping
from typing import Any, Protocol, runtime_checkable

ENGINE_METHODS = ("get_title", "get_description", "render")


@runtime_checkable
class IEngine(Protocol):
    """Protocol every rendering engine satisfies.

    The contract is structural: any object exposing these three callables
    qualifies, whether or not it inherits from :class:`Engine`.
    ``render`` may return the output directly or an awaitable of it; failures
    are raised from the (awaited) call.
    """

    def get_title(self) -> str:
        """Display name of the engine."""
        ...

    def get_description(self) -> str:
        """Display description of the engine."""
        ...

    def render(self, code: str, args: Mapping[str, Any]) -> str | Awaitable[str]:
        """Render template code with the given variables."""
        ...


def is_engine(candidate: object) -> bool:
    """Return True if ``candidate`` satisfies the engine contract.

    Mappings are rejected even when they carry matching keys.
    """
    if isinstance(candidate, (Mapping, type)):
        return False
    if not isinstance(candidate, IEngine):
        return False
    return all(callable(getattr(candidate, attr, None)) for attr in ENGINE_METHODS)


class Engine:
    """Identity engine and convenient base class for concrete engines."""

    def get_title(self) -> str:
        return ""

    def get_description(self) -> str:
        return ""

    async def render(self, code: str, args: Mapping[str, Any]) -> str:
        """Return ``code`` unchanged."""
        return code
