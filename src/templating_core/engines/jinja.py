"""Jinja2 template engine."""

from __future__ import annotations

import asyncio
import concurrent.futures
import contextvars
import logging
import threading
from collections.abc import Callable, Mapping
from typing import Any

from jinja2 import BaseLoader, Environment, StrictUndefined, TemplateNotFound, Undefined

from ..exceptions import UnknownTemplateError
from ..ports.engine import Engine
from ..resolution import load_template_sync

logger = logging.getLogger(__name__)


class RegistryLoader(BaseLoader):
    """
    Jinja2 loader that resolves ``include``/``extends``/``import`` targets
    through the template registry of the current render.

    Jinja2 calls loaders synchronously, so this goes through the blocking
    resolution bridge. Sources are never reported as up to date.
    """

    def __init__(self, timeout: float | None = None) -> None:
        self.timeout = timeout

    def get_source(
        self, environment: Environment, template: str
    ) -> tuple[str, str | None, Callable[[], bool]]:
        try:
            code = load_template_sync(template, timeout=self.timeout)
        except UnknownTemplateError as e:
            raise TemplateNotFound(template) from e
        return code, None, lambda: False


class JinjaEngine(Engine):
    """
    Renders templates using the Jinja2 engine.

    Rendering runs on the engine's own worker threads so nested templates
    can be loaded through the blocking bridge while the event loop keeps
    serving the resolution. Renders beyond ``max_workers`` queue; they never
    occupy the loop's default executor, which file reads rely on.
    """

    def __init__(
        self,
        *,
        autoescape: bool = False,
        strict: bool = False,
        filters: Mapping[str, Callable[..., Any]] | None = None,
        load_timeout: float | None = None,
        max_workers: int | None = None,
    ) -> None:
        self._env = Environment(
            loader=RegistryLoader(timeout=load_timeout),
            autoescape=autoescape,
            undefined=StrictUndefined if strict else Undefined,
            cache_size=0,
        )
        if filters:
            self._env.filters.update(filters)
        self._max_workers = max_workers
        self._executor: concurrent.futures.ThreadPoolExecutor | None = None
        self._executor_lock = threading.Lock()

    @property
    def environment(self) -> Environment:
        return self._env

    def get_title(self) -> str:
        return "Jinja2"

    def get_description(self) -> str:
        return "A templating engine using Jinja2."

    async def render(self, code: str, args: Mapping[str, Any]) -> str:
        """Render template code using Jinja2."""
        try:
            template = self._env.from_string(code)
            loop = asyncio.get_running_loop()
            context = contextvars.copy_context()
            return await loop.run_in_executor(
                self._get_executor(), context.run, template.render, dict(args)
            )
        except Exception as e:
            logger.error(f"Jinja2 rendering failed: {e}")
            raise

    def _get_executor(self) -> concurrent.futures.ThreadPoolExecutor:
        with self._executor_lock:
            if self._executor is None:
                self._executor = concurrent.futures.ThreadPoolExecutor(
                    max_workers=self._max_workers,
                    thread_name_prefix="templating-jinja",
                )
            return self._executor

    def close(self) -> None:
        """Shut down the render threads; they are recreated on the next render."""
        with self._executor_lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=False, cancel_futures=True)
