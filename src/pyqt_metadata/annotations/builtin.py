"""
Built-in annotation kinds.

MetaData describes a type for display. SimpleTemplate and SimpleTemplates
decorate MetadataReader subclasses to declare their templates.
HasRuntimeMetadata and HasTypedRuntimeMetadata bind a type to a
MetadataProvider that supplies per-instance values.
"""

from typing import Optional, Tuple, Type

from .base import Annotation


class MetaData(Annotation):
    """
    Display metadata for a type.

    Example:
        @MetaData(name="Knight", description="Moves along roads",
                  icon=":/icons/knight.png", wiki_page="https://example.org/Knight")
        class Knight:
            ...
    """

    name: str
    localized_name: str = ""
    description: str = ""
    icon: Optional[str] = None
    wiki_page: str = ""


class SimpleTemplate(Annotation):
    """
    A string template used to describe objects.

    ``{}`` tokens hold a case-insensitive annotation simple or fully-qualified
    name, optionally followed by ``.attribute``. Without an attribute the
    annotation's ``value`` attribute is read. Tokens not matching an
    annotation are looked up in the instance's MetadataProvider data.

    Attributes:
        value: The template string
        of_type: Type (and subtypes) rendered with this template. The closest
            ancestor match wins; ties go to the earlier template.
        annotated_with: Annotation kind that must be declared directly on the
            type. Not inherited by subtypes, and always more specific than any
            of_type match.
    """

    value: str
    of_type: type = object
    annotated_with: Optional[Type[Annotation]] = None


class SimpleTemplates(Annotation):
    """Several SimpleTemplates on a single MetadataReader, in priority order."""

    value: Tuple[SimpleTemplate, ...] = ()


class HasRuntimeMetadata(Annotation):
    """
    Values may also come from the instance, through a MetadataProvider.

    ``value`` is the provider class. Not visible on subtypes. Types that
    implement MetadataProvider themselves need no annotation: an unbound
    instance that is a MetadataProvider supplies its own data.
    """

    value: type


class HasTypedRuntimeMetadata(Annotation, inherited=True):
    """Like HasRuntimeMetadata, but inherited by subtypes."""

    value: type
