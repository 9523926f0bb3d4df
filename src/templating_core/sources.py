"""Template source value objects."""

from __future__ import annotations

import os
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any, Union

Producer = Callable[[], Union[str, Awaitable[str]]]


@dataclass(frozen=True)
class InlineCode:
    """Immutable inline template code target."""

    code: str


@dataclass(frozen=True)
class TemplateSource:
    """One registered origin for a template name.

    Exactly one of ``code``, ``filename`` or ``producer`` is set.
    """

    engine: str
    weight: int = 0
    code: str | None = None
    filename: str | None = None
    producer: Producer | None = None

    def __post_init__(self) -> None:
        payloads = [p for p in (self.code, self.filename, self.producer) if p is not None]
        if len(payloads) != 1:
            raise ValueError(
                "A template source needs exactly one of code, filename or producer, "
                f"got {len(payloads)}."
            )

    @property
    def kind(self) -> str:
        if self.code is not None:
            return "code"
        if self.filename is not None:
            return "file"
        return "producer"

    @classmethod
    def from_target(cls, target: Any, *, engine: str, weight: int = 0) -> TemplateSource:
        """Build a source from a registration target.

        Strings and path-likes are filenames, callables are producers, and
        ``InlineCode`` or mappings with a ``"code"`` key carry inline code.
        """
        if isinstance(target, (str, os.PathLike)):
            return cls(engine=engine, weight=weight, filename=os.fspath(target))
        if isinstance(target, InlineCode):
            return cls(engine=engine, weight=weight, code=target.code)
        if isinstance(target, Mapping) and isinstance(target.get("code"), str):
            return cls(engine=engine, weight=weight, code=target["code"])
        if callable(target):
            return cls(engine=engine, weight=weight, producer=target)
        raise TypeError(
            "Template target must be a file path, a producer callable, "
            f"InlineCode or a mapping with 'code', got {type(target).__name__}."
        )

    def matches(self, target: Any) -> bool:
        """Return True if this source's payload equals ``target``'s."""
        if isinstance(target, InlineCode):
            return self.code is not None and self.code == target.code
        if isinstance(target, Mapping):
            return self.code is not None and self.code == target.get("code")
        if isinstance(target, (str, os.PathLike)):
            return self.filename is not None and self.filename == os.fspath(target)
        if callable(target):
            return self.producer is target
        return False
