"""Metadata provider contract for per-instance template data.

Allows types to supply placeholder values that cannot be expressed as
static annotations. A provider is bound to a type with HasRuntimeMetadata,
HasTypedRuntimeMetadata, or TemplateRegistryBuilder.bind_provider().
"""

from abc import ABC, abstractmethod
from typing import Any, ClassVar, FrozenSet, Generic, Mapping, TypeVar

T = TypeVar("T")


class MetadataProvider(ABC, Generic[T]):
    """Extracts string-keyed template data from an instance.

    Any provider class bound to a type is instantiated once with no
    arguments and reused. If the rendered instance is itself an instance of
    the bound provider class, or has no binding and is a MetadataProvider,
    the instance is used instead.

    Keys listed in ``safe_keys`` are embedded verbatim, without escaping.

    Example:
        class CityProvider(MetadataProvider["City"]):
            safe_keys = frozenset({"badge"})

            def get_data(self, city):
                return {"population": city.population, "badge": "<i>capital</i>"}
    """

    safe_keys: ClassVar[FrozenSet[str]] = frozenset()

    @abstractmethod
    def get_data(self, obj: T) -> Mapping[str, Any]:
        """Get template data for an instance.

        Args:
            obj: The instance being rendered

        Returns:
            Mapping from placeholder key to value
        """
        pass
