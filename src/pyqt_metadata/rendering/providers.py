"""
MetadataProvider lookup for rendered instances.

Lookup order:
1. HasRuntimeMetadata declared directly on the type
2. HasTypedRuntimeMetadata on the type or any supertype
3. Registry bindings, closest supertype first
4. The instance itself, if it implements MetadataProvider
"""

import logging
import threading
from typing import Any, Dict, Mapping, Optional

from pyqt_metadata.annotations import HasRuntimeMetadata, HasTypedRuntimeMetadata
from pyqt_metadata.protocols import MetadataProvider
from pyqt_metadata.registry import TypeDescriptor

logger = logging.getLogger(__name__)


class ProviderResolver:
    """Finds the MetadataProvider that supplies data for an instance."""

    def __init__(self, bindings: Optional[Mapping[type, Any]] = None):
        self._bindings = bindings or {}

    def binding_for(self, descriptor: TypeDescriptor) -> Optional[Any]:
        """Get the bound provider class or instance for a type, if any."""
        for kind in (HasRuntimeMetadata, HasTypedRuntimeMetadata):
            annotation = descriptor.find_annotation(kind)
            if annotation is not None:
                return annotation.value
        for klass in descriptor.chain:
            if klass in self._bindings:
                return self._bindings[klass]
        return None

    def provider_for(self, descriptor: TypeDescriptor, instance: Any) -> Optional[MetadataProvider]:
        """
        Get the provider for an instance.

        Returns:
            The instance itself if it is an instance of the bound provider
            class, or if it is unbound and implements MetadataProvider; a
            shared instance of the bound class; or None

        Raises:
            TypeError: If the binding does not implement MetadataProvider
        """
        binding = self.binding_for(descriptor)
        if binding is None:
            if isinstance(instance, MetadataProvider):
                return instance
            return None

        if isinstance(binding, type):
            if isinstance(instance, binding):
                provider = instance
            else:
                provider = _shared_provider(binding)
        else:
            provider = binding

        if not isinstance(provider, MetadataProvider):
            raise TypeError(
                f"Provider {type(provider).__name__} bound to {descriptor.name} does not "
                f"implement MetadataProvider ABC. Add MetadataProvider to its base classes "
                f"and implement get_data()."
            )
        return provider


# One shared instance per provider class
_SHARED_PROVIDERS: Dict[type, Any] = {}
_SHARED_PROVIDERS_LOCK = threading.Lock()


def _shared_provider(provider_class: type) -> Any:
    provider = _SHARED_PROVIDERS.get(provider_class)
    if provider is not None:
        return provider

    with _SHARED_PROVIDERS_LOCK:
        provider = _SHARED_PROVIDERS.get(provider_class)
        if provider is None:
            logger.debug(f"Instantiating metadata provider {provider_class.__name__}")
            provider = provider_class()
            _SHARED_PROVIDERS[provider_class] = provider
    return provider
