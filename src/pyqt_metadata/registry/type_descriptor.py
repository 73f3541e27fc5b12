"""
Immutable type descriptors.

A TypeDescriptor captures what the resolver and renderer need to know about
a class: its directly-declared annotations and its supertype chain. Descriptors
are cached while in use without keeping their classes alive, and a class
annotated after its first lookup gets a fresh descriptor.
"""

import threading
import weakref
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple, Type

from pyqt_metadata.annotations import Annotation, declared_annotations


@dataclass(frozen=True)
class TypeDescriptor:
    """
    Annotation and inheritance view of a single class.

    Attributes:
        type: The described class
        annotations: Annotations declared directly on the class, source order
        chain: Supertype chain (MRO), most-derived first, ending with object
    """
    type: type
    annotations: Tuple[Annotation, ...]
    chain: Tuple[type, ...]

    @classmethod
    def of(cls, target: type) -> "TypeDescriptor":
        """Get the cached descriptor for a class."""
        if not isinstance(target, type):
            raise TypeError(f"Expected a class, got {type(target).__name__}")
        return _describe(target)

    @classmethod
    def of_instance(cls, instance: object) -> "TypeDescriptor":
        return _describe(type(instance))

    @property
    def name(self) -> str:
        return f"{self.type.__module__}.{self.type.__qualname__}"

    def distance_to(self, supertype: type) -> Optional[int]:
        """
        Steps up the chain from this type to ``supertype``.

        Returns:
            0 for the type itself, 1 for its closest base, ... or None if
            ``supertype`` is not an ancestor
        """
        try:
            return self.chain.index(supertype)
        except ValueError:
            return None

    def declares(self, kind: Type[Annotation]) -> bool:
        """Whether an annotation of ``kind`` is declared directly on the type."""
        return any(type(a) is kind for a in self.annotations)

    def inherited_annotations(self) -> Iterator[Annotation]:
        """Inheritable annotations declared on supertypes, closest first."""
        for klass in self.chain[1:]:
            for annotation in declared_annotations(klass):
                if annotation.is_inherited():
                    yield annotation

    def find_annotation(self, kind: Type[Annotation]) -> Optional[Annotation]:
        for annotation in self.annotations:
            if type(annotation) is kind:
                return annotation
        if kind.is_inherited():
            for annotation in self.inherited_annotations():
                if type(annotation) is kind:
                    return annotation
        return None

    def find_declared_by_name(self, name: str) -> Optional[Annotation]:
        for annotation in self.annotations:
            if annotation.matches_name(name):
                return annotation
        return None

    def find_inherited_by_name(self, name: str) -> Optional[Annotation]:
        for annotation in self.inherited_annotations():
            if annotation.matches_name(name):
                return annotation
        return None


# Descriptor cache. Both sides are weak: a descriptor refers back to its class
_DESCRIPTORS: "weakref.WeakKeyDictionary[type, weakref.ref]" = weakref.WeakKeyDictionary()
_DESCRIPTORS_LOCK = threading.Lock()


def _describe(target: type) -> TypeDescriptor:
    annotations = tuple(declared_annotations(target))
    with _DESCRIPTORS_LOCK:
        ref = _DESCRIPTORS.get(target)
        descriptor = ref() if ref is not None else None
        # Rebuilt when annotations were applied after the first lookup
        if descriptor is None or descriptor.annotations != annotations:
            descriptor = TypeDescriptor(
                type=target,
                annotations=annotations,
                chain=tuple(target.__mro__),
            )
            _DESCRIPTORS[target] = weakref.ref(descriptor)
    return descriptor
