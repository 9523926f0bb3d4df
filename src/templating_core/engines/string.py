"""Zero-dependency string format engine."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from ..ports.engine import Engine

logger = logging.getLogger(__name__)


class StringFormatEngine(Engine):
    """
    Simple engine using Python's native string formatting.
    No external dependencies and no nested templates.
    """

    def get_title(self) -> str:
        return "str.format"

    def get_description(self) -> str:
        return "Renders {placeholders} with str.format_map()."

    async def render(self, code: str, args: Mapping[str, Any]) -> str:
        """Render template code using str.format_map()."""
        try:
            return code.format_map(args)
        except KeyError as e:
            logger.error(f"Missing template variable: {e}")
            raise
        except Exception as e:
            logger.error(f"Template rendering failed: {e}")
            raise
