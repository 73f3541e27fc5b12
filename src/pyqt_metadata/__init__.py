"""
pyqt-metadata: annotation-driven display metadata and templates for PyQt6.

Types declare display metadata with class decorators (MetaData, custom
Annotation kinds). MetadataReader subclasses declare string templates
(SimpleTemplate) that are picked by specificity and rendered into safe
markup and a Qt widget.

Architecture:
- Tier 1 (Annotations): Annotation kinds and built-in metadata declarations
- Tier 2 (Protocols): MetadataProvider ABC and MetadataConfig
- Tier 3 (Registry): TypeDescriptor, TemplateRule, immutable TemplateRegistry
- Tier 4 (Rendering): TemplateResolver and PlaceholderRenderer
- Tier 5 (Reader/Widgets): MetadataReader and MetadataLabel

Key Features:
- annotated_with templates outrank of_type templates
- Closest ancestor wins among of_type templates, earliest template breaks ties
- Values are escaped unless explicitly marked safe
"""

__version__ = "0.1.0"

from .exceptions import (
    MetadataError,
    RegistryError,
    MissingFallbackTemplate,
    InvalidTemplate,
    NoTemplateMatch,
    UnresolvedPlaceholder,
    AmbiguousTemplate,
)
from .annotations import (
    Annotation,
    safe_attribute,
    MetaData,
    SimpleTemplate,
    SimpleTemplates,
    HasRuntimeMetadata,
    HasTypedRuntimeMetadata,
)
from .protocols import MetadataProvider, MetadataConfig, set_metadata_config, get_metadata_config
from .registry import TypeDescriptor, TemplateRule, TemplateRegistry, TemplateRegistryBuilder
from .rendering import SafeHtml, TemplateResolver, PlaceholderRenderer
from .reader import MetadataReader

__all__ = [
    "__version__",
    "MetadataError",
    "RegistryError",
    "MissingFallbackTemplate",
    "InvalidTemplate",
    "NoTemplateMatch",
    "UnresolvedPlaceholder",
    "AmbiguousTemplate",
    "Annotation",
    "safe_attribute",
    "MetaData",
    "SimpleTemplate",
    "SimpleTemplates",
    "HasRuntimeMetadata",
    "HasTypedRuntimeMetadata",
    "MetadataProvider",
    "MetadataConfig",
    "set_metadata_config",
    "get_metadata_config",
    "TypeDescriptor",
    "TemplateRule",
    "TemplateRegistry",
    "TemplateRegistryBuilder",
    "SafeHtml",
    "TemplateResolver",
    "PlaceholderRenderer",
    "MetadataReader",
]
