"""Trusted markup strings and value formatting for templates."""

import html
from enum import Enum
from typing import Any


class SafeHtml(str):
    """
    A string known to be safe to embed as markup.

    Rendered templates are SafeHtml. Provider values that are already SafeHtml
    are embedded without escaping.
    """

    __slots__ = ()

    @classmethod
    def escape(cls, text: Any) -> "SafeHtml":
        """Escape tags, ampersands and quotes."""
        return cls(html.escape(str(text), quote=True))

    def __repr__(self) -> str:
        return f"SafeHtml({str.__repr__(self)})"


def format_value(value: Any) -> str:
    """Convert an annotation or provider value to template text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, type):
        return f"{value.__module__}.{value.__qualname__}"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)
