"""Tests for the blocking resolution bridge used by synchronous loaders."""

import asyncio
import time

import pytest
from jinja2 import TemplateNotFound

from templating_core import (
    Engine,
    InlineCode,
    JinjaEngine,
    TemplateResolutionTimeoutError,
    Templating,
    TemplatingConfig,
    UnknownTemplateError,
    load_template_sync,
)


class ThreadedLoaderEngine(Engine):
    """Loads the named template from a worker thread, like a sync loader would."""

    async def render(self, code, args):
        return await asyncio.to_thread(load_template_sync, code)


def test_template_sync_without_event_loop(templating) -> None:
    templating.register("test", InlineCode("Hello"))

    assert templating.template_sync("test") == ("jinja", "Hello")


def test_template_sync_unknown_template(templating) -> None:
    with pytest.raises(UnknownTemplateError):
        templating.template_sync("missing")


def test_template_sync_times_out(templating) -> None:
    async def slow() -> str:
        await asyncio.sleep(0.5)
        return "late"

    templating.register("slow", slow)

    started = time.monotonic()
    with pytest.raises(TemplateResolutionTimeoutError) as exc_info:
        templating.template_sync("slow", timeout=0.05)

    assert time.monotonic() - started < 0.5
    assert exc_info.value.name == "slow"
    assert exc_info.value.timeout == 0.05
    assert not isinstance(exc_info.value, UnknownTemplateError)


def test_template_sync_uses_configured_timeout() -> None:
    templating = Templating(TemplatingConfig(sync_timeout=0.05))

    async def slow() -> str:
        await asyncio.sleep(0.5)
        return "late"

    templating.register("slow", slow)

    with pytest.raises(TemplateResolutionTimeoutError) as exc_info:
        templating.template_sync("slow")

    assert exc_info.value.timeout == 0.05
    templating.close()


def test_producer_timeout_error_is_not_reclassified(templating) -> None:
    def producer() -> str:
        raise TimeoutError("upstream timed out")

    templating.register("test", producer)

    with pytest.raises(TimeoutError, match="upstream timed out") as exc_info:
        templating.template_sync("test")

    assert not isinstance(exc_info.value, TemplateResolutionTimeoutError)


@pytest.mark.asyncio
async def test_template_sync_on_loop_thread_does_not_deadlock(templating) -> None:
    templating.register("test", InlineCode("Hello"))

    assert templating.template_sync("test", timeout=1.0) == ("jinja", "Hello")


@pytest.mark.asyncio
async def test_worker_thread_resolves_through_render_loop(templating) -> None:
    loop = asyncio.get_running_loop()
    seen_loops: list[asyncio.AbstractEventLoop] = []

    async def producer() -> str:
        seen_loops.append(asyncio.get_running_loop())
        return "resolved on the render loop"

    templating.register_engine("threaded", ThreadedLoaderEngine)
    templating.register("inner", producer)
    templating.register("outer", InlineCode("inner"), engine="threaded")

    assert await templating.render("outer") == "resolved on the render loop"
    assert seen_loops == [loop]


@pytest.mark.asyncio
async def test_nested_include_times_out(templating) -> None:
    async def never() -> str:
        await asyncio.Event().wait()
        return ""

    templating.register_engine("jinja-fast", JinjaEngine(load_timeout=0.05))
    templating.register("never", never)
    templating.register("outer", InlineCode('{% include "never" %}'), engine="jinja-fast")

    with pytest.raises(TemplateResolutionTimeoutError) as exc_info:
        await templating.render("outer")

    assert exc_info.value.name == "never"


@pytest.mark.asyncio
async def test_nested_include_of_unknown_template(templating) -> None:
    templating.register("outer", InlineCode('{% include "missing" %}'))
    templating.register("lenient", InlineCode('a{% include "missing" ignore missing %}b'))

    with pytest.raises(TemplateNotFound):
        await templating.render("outer")
    assert await templating.render("lenient") == "ab"


@pytest.mark.asyncio
async def test_nested_resolution_uses_rendering_instance(templating) -> None:
    other = Templating()
    other.register("inner", InlineCode("from other"))
    other.register("outer", InlineCode('{% include "inner" %}'))
    templating.register("inner", InlineCode("from fixture"))

    assert await other.render("outer") == "from other"
    other.close()


def test_timed_out_resolutions_do_not_block_later_ones(templating) -> None:
    async def never() -> str:
        await asyncio.Event().wait()
        return ""

    templating.register("never", never)
    templating.register("ok", InlineCode("fine"))

    for _ in range(6):
        with pytest.raises(TemplateResolutionTimeoutError):
            templating.template_sync("never", timeout=0.05)

    assert templating.template_sync("ok", timeout=1.0) == ("jinja", "fine")


def test_close_stops_resolver_thread_and_instance_stays_usable() -> None:
    templating = Templating()
    templating.register("ok", InlineCode("fine"))
    assert templating.template_sync("ok") == ("jinja", "fine")
    thread = templating._resolver_thread

    templating.close()

    assert thread is not None and not thread.is_alive()
    assert templating.template_sync("ok") == ("jinja", "fine")
    templating.close()
