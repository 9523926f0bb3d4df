"""Exception hierarchy for templating-core."""

from __future__ import annotations


class TemplatingError(Exception):
    """Root exception for the templating toolkit."""


class InvalidEngineError(TemplatingError, TypeError):
    """Raised when a registered engine does not satisfy the engine contract.

    Usage: EngineRegistry raises this synchronously at registration time;
    the registry is left unchanged.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f'The engine registered as "{name}" does not implement '
            "get_title(), get_description() and render()."
        )


class UnknownTemplateError(TemplatingError, LookupError):
    """Raised when no source is registered for a template name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f'Unknown template "{name}".')


class UnknownEngineError(TemplatingError, LookupError):
    """Raised when a template declares an engine that is not registered."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f'Unknown templating engine "{name}".')


class TemplateResolutionTimeoutError(TemplatingError, TimeoutError):
    """Raised by the blocking resolution bridge when it gives up waiting.

    Only ``Templating.template_sync`` / ``load_template_sync`` raise this.
    A ``TimeoutError`` raised by a producer itself is propagated as-is.
    """

    def __init__(self, name: str, timeout: float) -> None:
        self.name = name
        self.timeout = timeout
        super().__init__(
            f'Timed out after {timeout}s waiting for template "{name}" to resolve.'
        )


__all__ = [
    "InvalidEngineError",
    "TemplateResolutionTimeoutError",
    "TemplatingError",
    "UnknownEngineError",
    "UnknownTemplateError",
]
