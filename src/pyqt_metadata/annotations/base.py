"""
Annotation kinds with metaclass auto-registration.

Annotation kinds auto-register when their classes are defined, so templates
can be checked against known annotation names before anything is rendered.

Design:
- AnnotationMeta turns every kind into a frozen dataclass
- ANNOTATION_KINDS: global registry of kinds by lower-cased simple and
  fully-qualified name
- Annotation instances are class decorators that attach themselves to the
  decorated class's directly-declared annotations
- inherited=True class keyword makes a kind visible on subclasses
"""

import dataclasses
import logging
from abc import ABCMeta
from typing import Any, Dict, FrozenSet, List, Optional, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

# Attribute on decorated classes holding their directly-declared annotations
ANNOTATIONS_ATTR = "__metadata_annotations__"

# Dataclass field metadata key marking a pre-sanitized attribute
SAFE_MARKER = "safe_annotation_data"

# Global registry of annotation kinds
# Maps lower-cased simple or qualified name -> kinds declared under that name
ANNOTATION_KINDS: Dict[str, List[Type["Annotation"]]] = {}

T = TypeVar("T", bound=type)


def safe_attribute(default: Any = dataclasses.MISSING, **kwargs) -> Any:
    """
    Declare an annotation attribute whose value is already safe markup.

    Values of safe attributes are embedded into templates verbatim instead of
    being escaped.

    Example:
        class Badge(Annotation):
            html: str = safe_attribute()
            title: str = ""
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[SAFE_MARKER] = True
    return dataclasses.field(default=default, metadata=metadata, **kwargs)


class AnnotationMeta(ABCMeta):
    """
    Metaclass for annotation kinds.

    1. Applies dataclass(frozen=True) so annotation values are immutable
    2. Records whether the kind is inheritable (``inherited=`` class keyword)
    3. Auto-populates ANNOTATION_KINDS, warning on duplicate names

    Example:
        class Icon(Annotation):
            path: str
            width: int = 16
            height: int = 16

        class Category(Annotation, inherited=True):
            value: str
    """

    def __new__(mcs, name, bases, attrs, inherited: bool = False, **kwargs):
        new_class = super().__new__(mcs, name, bases, attrs, **kwargs)
        new_class.__inherited__ = inherited
        new_class = dataclasses.dataclass(frozen=True)(new_class)

        # The Annotation root itself is not a usable kind
        if not bases:
            return new_class

        for key in (name.lower(), _qualified_name(new_class).lower()):
            kinds = ANNOTATION_KINDS.setdefault(key, [])
            if any(_qualified_name(k) == _qualified_name(new_class) for k in kinds):
                logger.warning(
                    f"Annotation '{_qualified_name(new_class)}' already registered. "
                    f"Overwriting previous definition."
                )
                kinds[:] = [k for k in kinds if _qualified_name(k) != _qualified_name(new_class)]
            kinds.append(new_class)

        logger.debug(
            f"Registered annotation {name} (inherited={inherited}) with attributes: "
            f"{[f.name for f in dataclasses.fields(new_class)]}"
        )
        return new_class

    def __init__(cls, name, bases, attrs, inherited: bool = False, **kwargs):
        super().__init__(name, bases, attrs, **kwargs)


def _qualified_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


class Annotation(metaclass=AnnotationMeta):
    """
    Base class of every annotation kind.

    An annotation instance is applied to a class as a decorator. Stacked
    decorators run bottom-up, so each new annotation is prepended; the
    declared order always matches source order, top-most first.
    """

    def __call__(self, target: T) -> T:
        if not isinstance(target, type):
            raise TypeError(
                f"@{type(self).__name__} can only decorate classes, got {type(target).__name__}"
            )
        declared = vars(target).get(ANNOTATIONS_ATTR, ())
        setattr(target, ANNOTATIONS_ATTR, (self,) + tuple(declared))
        return target

    @classmethod
    def annotation_name(cls) -> str:
        return cls.__name__

    @classmethod
    def qualified_name(cls) -> str:
        return _qualified_name(cls)

    @classmethod
    def is_inherited(cls) -> bool:
        return cls.__inherited__

    @classmethod
    def matches_name(cls, name: str) -> bool:
        """Case-insensitive match against the simple or qualified name."""
        lowered = name.lower()
        return lowered in (cls.annotation_name().lower(), cls.qualified_name().lower())

    @classmethod
    def attribute_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in dataclasses.fields(cls))

    @classmethod
    def find_attribute(cls, name: str) -> Optional[str]:
        """Case-insensitive attribute lookup, returning the declared name."""
        lowered = name.lower()
        for attribute in cls.attribute_names():
            if attribute.lower() == lowered:
                return attribute
        return None

    @classmethod
    def safe_attributes(cls) -> FrozenSet[str]:
        return frozenset(
            f.name for f in dataclasses.fields(cls) if f.metadata.get(SAFE_MARKER, False)
        )

    def attributes(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in self.attribute_names()}


def declared_annotations(target: type) -> Tuple[Annotation, ...]:
    """Annotations declared directly on ``target``, in source order."""
    return vars(target).get(ANNOTATIONS_ATTR, ())


def get_annotation(target: type, kind: Type[Annotation]) -> Optional[Annotation]:
    """
    Get an annotation of the given kind from a class.

    Directly-declared annotations are searched first; inheritable kinds are
    then looked up along the MRO.

    Returns:
        The annotation instance, or None if the class does not carry it
    """
    search = target.__mro__ if kind.is_inherited() else (target,)
    for klass in search:
        for annotation in declared_annotations(klass):
            if type(annotation) is kind:
                return annotation
    return None


def is_annotation_present(target: type, kind: Type[Annotation]) -> bool:
    return get_annotation(target, kind) is not None


def find_annotation_kinds(name: str) -> List[Type[Annotation]]:
    """
    Find registered annotation kinds by simple or qualified name.

    Args:
        name: Annotation name, case-insensitive

    Returns:
        List of matching kinds (several kinds may share a simple name)
    """
    return list(ANNOTATION_KINDS.get(name.lower(), ()))
