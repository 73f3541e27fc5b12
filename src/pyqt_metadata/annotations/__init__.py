"""
Annotation declarations.

Python stand-ins for type annotations: frozen dataclass kinds applied to
classes as decorators, plus the built-in metadata and template kinds.
"""

from .base import (
    ANNOTATION_KINDS,
    Annotation,
    AnnotationMeta,
    declared_annotations,
    find_annotation_kinds,
    get_annotation,
    is_annotation_present,
    safe_attribute,
)
from .builtin import (
    HasRuntimeMetadata,
    HasTypedRuntimeMetadata,
    MetaData,
    SimpleTemplate,
    SimpleTemplates,
)

__all__ = [
    "ANNOTATION_KINDS",
    "Annotation",
    "AnnotationMeta",
    "declared_annotations",
    "find_annotation_kinds",
    "get_annotation",
    "is_annotation_present",
    "safe_attribute",
    "HasRuntimeMetadata",
    "HasTypedRuntimeMetadata",
    "MetaData",
    "SimpleTemplate",
    "SimpleTemplates",
]
