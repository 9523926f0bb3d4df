"""Templating facade: registries plus the render pipeline."""

from __future__ import annotations

import asyncio
import concurrent.futures
import inspect
import logging
import threading
from collections.abc import Callable, Mapping
from typing import Any

from .config import DEFAULT_ENGINE, TemplatingConfig
from .engines.jinja import JinjaEngine
from .exceptions import TemplateResolutionTimeoutError, UnknownEngineError
from .instrumentation import RENDER_OPERATION, RESOLVE_OPERATION, HookRegistry
from .ports.engine import IEngine
from .registry import EngineRegistry, LocalsStore, TemplateRegistry
from .resolution import current_scope, render_scope
from .sources import TemplateSource
from .utils import deep_merge

logger = logging.getLogger(__name__)


_CLOSE_TIMEOUT = 1.0


def _is_loop_thread(loop: asyncio.AbstractEventLoop) -> bool:
    try:
        return asyncio.get_running_loop() is loop
    except RuntimeError:
        return False


async def _cancel_pending() -> None:
    tasks = [t for t in asyncio.all_tasks() if t is not asyncio.current_task()]
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)


class Templating:
    """Registers templates and engines and renders templates by name.

    A render runs: merge locals with the call's arguments, resolve the
    template's active source, look up its engine, then delegate to the
    engine. Failures at any step surface unchanged to the caller; nothing is
    retried.

    Registration methods return ``self`` so calls can be chained::

        templating = (
            Templating()
            .register("greeting", InlineCode("Hello {{ name }}"))
            .add_local("site", "example.org")
        )
        await templating.render("greeting", {"name": "John"})

    The built-in Jinja2 engine is registered as ``"jinja"`` and the ``now``
    local is installed at construction.
    """

    def __init__(
        self,
        config: TemplatingConfig | None = None,
        *,
        hooks: HookRegistry | None = None,
        builtins: bool = True,
    ) -> None:
        self.config = config or TemplatingConfig()
        self.hooks = hooks or HookRegistry()
        self._engines = EngineRegistry()
        self._templates = TemplateRegistry(self.config)
        self._locals = LocalsStore(builtins=builtins)
        self._resolver_loop: asyncio.AbstractEventLoop | None = None
        self._resolver_thread: threading.Thread | None = None
        self._resolver_lock = threading.Lock()
        if builtins:
            self._engines.register(DEFAULT_ENGINE, JinjaEngine)

    # ── Engines ──────────────────────────────────────────────────

    def register_engine(
        self, name: str, engine: IEngine | Callable[[], Any]
    ) -> Templating:
        self._engines.register(name, engine)
        return self

    def registered_engine(self, name: str) -> bool:
        return self._engines.is_registered(name)

    def unregister_engine(self, name: str) -> Templating:
        self._engines.unregister(name)
        return self

    def engines(self) -> Mapping[str, IEngine]:
        return self._engines.all()

    # ── Locals ───────────────────────────────────────────────────

    def add_local(self, name: str, value: Any) -> Templating:
        self._locals.add(name, value)
        return self

    def del_local(self, name: str) -> Templating:
        self._locals.delete(name)
        return self

    def locals(self) -> Mapping[str, Any]:
        return self._locals.all()

    # ── Templates ────────────────────────────────────────────────

    def register(
        self,
        name: str,
        target: Any,
        weight: int = 0,
        engine: str | None = None,
    ) -> Templating:
        """Register a template source.

        Args:
            name: Template name.
            target: A file path, a producer callable (sync or async, no
                arguments) or inline code (``InlineCode`` or ``{"code": ...}``).
            weight: Priority; the highest weight is rendered.
            engine: Engine name, defaults to ``config.default_engine``.
        """
        self._templates.register(name, target, weight=weight, engine=engine)
        return self

    def registered(self, name: str) -> bool:
        return self._templates.is_registered(name)

    def unregister(self, name: str, target: Any = None) -> Templating:
        self._templates.unregister(name, target)
        return self

    def templates(
        self, name: str | None = None
    ) -> tuple[TemplateSource, ...] | Mapping[str, tuple[TemplateSource, ...]]:
        return self._templates.list(name)

    # ── Resolution ───────────────────────────────────────────────

    async def template(self, name: str) -> tuple[str, str]:
        """Resolve ``name`` to ``(engine_name, code)``.

        Raises:
            UnknownTemplateError: nothing is registered under ``name``.
        """
        return await self.hooks.execute_all(
            RESOLVE_OPERATION,
            {"template": name},
            lambda: self._templates.resolve(name),
        )

    def template_sync(
        self, name: str, timeout: float | None = None
    ) -> tuple[str, str]:
        """Resolve ``name`` from synchronous code, blocking the calling thread.

        Inside a render running on another thread's event loop the
        resolution is scheduled on that loop; otherwise it runs on the
        instance's resolver loop thread. On timeout the resolution is
        cancelled. Waits at most ``timeout`` seconds
        (``config.sync_timeout`` by default).

        Raises:
            TemplateResolutionTimeoutError: the timeout elapsed first.
        """
        wait = self.config.sync_timeout if timeout is None else timeout
        future = self._submit_resolution(name)
        done, _ = concurrent.futures.wait([future], timeout=wait)
        if not done:
            future.cancel()
            logger.warning("Blocking resolution of %s timed out after %ss", name, wait)
            raise TemplateResolutionTimeoutError(name, wait)
        return future.result()

    def _submit_resolution(self, name: str) -> concurrent.futures.Future[tuple[str, str]]:
        scope = current_scope()
        loop = scope.loop if scope is not None and scope.resolver is self else None
        if loop is None or not loop.is_running() or _is_loop_thread(loop):
            loop = self._get_resolver_loop()
        return asyncio.run_coroutine_threadsafe(self.template(name), loop)

    def _get_resolver_loop(self) -> asyncio.AbstractEventLoop:
        with self._resolver_lock:
            if self._resolver_loop is None:
                loop = asyncio.new_event_loop()
                thread = threading.Thread(
                    target=loop.run_forever, name="templating-resolve", daemon=True
                )
                thread.start()
                self._resolver_loop, self._resolver_thread = loop, thread
                logger.debug("Started resolver loop thread")
            return self._resolver_loop

    # ── Rendering ────────────────────────────────────────────────

    async def render(self, name: str, args: Mapping[str, Any] | None = None) -> str:
        """Render template ``name`` with ``args`` layered over the locals.

        Raises:
            UnknownTemplateError: nothing is registered under ``name``.
            UnknownEngineError: the active source's engine is not registered.
        """
        return await self.hooks.execute_all(
            RENDER_OPERATION,
            {"template": name},
            lambda: self._render(name, args),
        )

    async def _render(self, name: str, args: Mapping[str, Any] | None) -> str:
        variables = deep_merge(self._locals.all(), args)
        engine_name, code = await self.template(name)

        engine = self._engines.get(engine_name)
        if engine is None:
            raise UnknownEngineError(engine_name)

        logger.debug("Rendering %s with engine %s", name, engine_name)
        with render_scope(self):
            output = engine.render(code, variables)
            if inspect.isawaitable(output):
                output = await output
        return output

    # ── Lifecycle ────────────────────────────────────────────────

    def close(self) -> None:
        """Stop the resolver loop thread and release engine resources.

        Resolutions still pending on the resolver loop are cancelled. The
        instance stays usable; the loop is restarted on the next blocking
        resolution.
        """
        with self._resolver_lock:
            loop, self._resolver_loop = self._resolver_loop, None
            thread, self._resolver_thread = self._resolver_thread, None
        if loop is not None and thread is not None:
            drained = asyncio.run_coroutine_threadsafe(_cancel_pending(), loop)
            concurrent.futures.wait([drained], timeout=_CLOSE_TIMEOUT)
            loop.call_soon_threadsafe(loop.stop)
            thread.join(timeout=_CLOSE_TIMEOUT)
            if thread.is_alive():
                logger.warning("Resolver loop thread did not stop within %ss", _CLOSE_TIMEOUT)
            else:
                loop.close()
                logger.debug("Stopped resolver loop thread")

        for engine in self._engines.all().values():
            close = getattr(engine, "close", None)
            if callable(close):
                close()


_default: Templating | None = None
_default_lock = threading.Lock()


def get_templating() -> Templating:
    """Return the process-wide ``Templating``, creating it on first use."""
    global _default
    with _default_lock:
        if _default is None:
            _default = Templating()
            logger.debug("Created process-wide templating instance")
        return _default


def reset_templating() -> None:
    """Discard the process-wide instance (testing utility)."""
    global _default
    with _default_lock:
        instance, _default = _default, None
    if instance is not None:
        instance.close()


__all__ = ["Templating", "get_templating", "reset_templating"]
