"""Nested template resolution for engine loaders.

Engines that support include/import directives resolve the referenced
templates through the ``Templating`` instance that started the render. That
instance, together with the event loop running the render, is carried in a
context variable so it survives hops onto worker threads that run with a
copied context (``asyncio.to_thread``, ``copy_context().run``).

Two calling conventions are offered:

* :func:`load_template`: awaitable, for engines whose loaders can suspend.
* :func:`load_template_sync`: blocks the calling thread with a bounded wait.
  It exists only for engine internals that call their loader from
  synchronous code (Jinja2's ``BaseLoader.get_source``) and should not be
  used elsewhere.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Iterator
from contextvars import ContextVar
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .ports.resolver import ITemplateResolver


@dataclass(frozen=True)
class RenderScope:
    """The resolver and event loop of an in-flight render."""

    resolver: ITemplateResolver
    loop: asyncio.AbstractEventLoop | None


_render_scope: ContextVar[RenderScope | None] = ContextVar("render_scope", default=None)


def current_scope() -> RenderScope | None:
    """Get the render scope active in this context, if any."""
    return _render_scope.get()


@contextlib.contextmanager
def render_scope(resolver: ITemplateResolver) -> Iterator[RenderScope]:
    """Bind ``resolver`` and the running loop for the duration of a render."""
    try:
        loop: asyncio.AbstractEventLoop | None = asyncio.get_running_loop()
    except RuntimeError:
        loop = None
    scope = RenderScope(resolver=resolver, loop=loop)
    token = _render_scope.set(scope)
    try:
        yield scope
    finally:
        _render_scope.reset(token)


def _current_resolver() -> ITemplateResolver:
    scope = _render_scope.get()
    if scope is not None:
        return scope.resolver
    from .templating import get_templating

    return get_templating()


async def load_template(name: str) -> str:
    """Resolve a nested template's code without blocking."""
    _, code = await _current_resolver().template(name)
    return code


def load_template_sync(name: str, timeout: float | None = None) -> str:
    """Resolve a nested template's code, blocking for at most ``timeout`` seconds.

    Raises:
        TemplateResolutionTimeoutError: the resolution did not finish in time.
    """
    _, code = _current_resolver().template_sync(name, timeout=timeout)
    return code
