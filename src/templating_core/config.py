"""Runtime configuration for the templating pipeline."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_ENGINE = "jinja"


@dataclass(frozen=True)
class TemplatingConfig:
    """Templating configuration.

    Attributes:
        default_engine: Engine used by templates registered without one.
        sync_timeout: Seconds the blocking resolution bridge waits before
            raising ``TemplateResolutionTimeoutError``.
        encoding: Encoding used when reading file-backed templates.
    """

    default_engine: str = DEFAULT_ENGINE
    sync_timeout: float = 10.0
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        if not self.default_engine:
            raise ValueError("default_engine cannot be empty.")
        if self.sync_timeout <= 0:
            raise ValueError(
                f"sync_timeout must be positive, got {self.sync_timeout!r}."
            )
