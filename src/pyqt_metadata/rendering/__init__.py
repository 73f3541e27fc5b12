"""
Template resolution and placeholder rendering.

No Qt dependencies: output is SafeHtml markup that widgets embed.
"""

from .safe_html import SafeHtml, format_value
from .providers import ProviderResolver
from .resolver import TemplateResolver
from .placeholders import PlaceholderRenderer, PlaceholderValueService, ValueSource

__all__ = [
    "SafeHtml",
    "format_value",
    "ProviderResolver",
    "TemplateResolver",
    "PlaceholderRenderer",
    "PlaceholderValueService",
    "ValueSource",
]
