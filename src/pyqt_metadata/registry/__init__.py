"""
Type descriptors, template rules and the immutable template registry.
"""

from .template_parser import Literal, Placeholder, parse_template
from .type_descriptor import TypeDescriptor
from .template_registry import TemplateRule, TemplateRegistry, TemplateRegistryBuilder

__all__ = [
    "Literal",
    "Placeholder",
    "parse_template",
    "TypeDescriptor",
    "TemplateRule",
    "TemplateRegistry",
    "TemplateRegistryBuilder",
]
