"""Template resolver port consumed by engine loaders."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ITemplateResolver(Protocol):
    """
    Protocol for turning a template name into ``(engine_name, code)``.

    Implementations: Templating. Engines use it through
    :mod:`templating_core.resolution` to load nested templates.
    """

    async def template(self, name: str) -> tuple[str, str]:
        """Resolve a template without blocking."""
        ...

    def template_sync(
        self, name: str, timeout: float | None = None
    ) -> tuple[str, str]:
        """Resolve a template, blocking the calling thread."""
        ...
