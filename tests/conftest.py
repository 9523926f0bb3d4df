"""Test configuration for templating-core."""

from collections.abc import Iterator

import pytest

from templating_core import Engine, Templating, reset_templating

pytest_plugins = ["pytest_asyncio"]


class EchoEngine(Engine):
    """Identity engine that records what it was asked to render."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, object]]] = []

    def get_title(self) -> str:
        return "Echo"

    async def render(self, code, args):
        self.calls.append((code, dict(args)))
        return code


@pytest.fixture
def templating() -> Iterator[Templating]:
    """Isolated templating instance with the built-in engine and locals."""
    instance = Templating()
    yield instance
    instance.close()


@pytest.fixture
def echo_engine() -> EchoEngine:
    return EchoEngine()


@pytest.fixture
def template_file(tmp_path):
    """A template file on disk."""
    path = tmp_path / "greeting.j2"
    path.write_text("Hi {{ name }} from a file", encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _reset_default_templating() -> Iterator[None]:
    yield
    reset_templating()
