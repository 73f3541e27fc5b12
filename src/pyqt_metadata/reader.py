"""
MetadataReader: renders arbitrary objects from their declared metadata.

Data comes from the object's type and its annotations (including a possible
MetadataProvider); the templates come from SimpleTemplate annotations on
MetadataReader subclasses.

Annotations are matched by name. To read an attribute other than ``value``,
follow the annotation name with ``.attribute``:

    class Icon(Annotation):
        path: str
        width: int = 16
        height: int = 16

    @SimpleTemplate("<img src='{Icon.path}' width='{Icon.width}' height='{Icon.height}'/>",
                    annotated_with=Icon)
    @SimpleTemplate("{MetaData.name}")
    class IconReader(MetadataReader):
        pass

    widget = IconReader().render(knight)
"""

import logging
import threading
from typing import Any, Optional

from PyQt6.QtWidgets import QWidget

from pyqt_metadata.protocols import MetadataConfig, get_metadata_config
from pyqt_metadata.registry import TemplateRegistry, TemplateRegistryBuilder, TemplateRule, TypeDescriptor
from pyqt_metadata.rendering import PlaceholderRenderer, ProviderResolver, SafeHtml, TemplateResolver
from pyqt_metadata.widgets import MetadataLabel

logger = logging.getLogger(__name__)

# Guards one-time registry construction for all reader classes
_REGISTRY_LOCK = threading.Lock()


class MetadataReader:
    """
    Base class for template-driven metadata readers.

    Each subclass builds its registry from its own SimpleTemplate(s) once,
    on first use. Templates are not inherited from parent reader classes.
    The earliest, most precise template for an object is used.
    """

    def __init__(self, registry: Optional[TemplateRegistry] = None,
                 config: Optional[MetadataConfig] = None):
        self._config = config or get_metadata_config()
        self._registry = registry if registry is not None else type(self).registry(self._config)
        self._resolver = TemplateResolver(self._registry)
        self._renderer = PlaceholderRenderer(
            ProviderResolver(self._registry.provider_bindings),
            default_attribute=self._config.default_attribute,
        )

    @classmethod
    def registry(cls, config: Optional[MetadataConfig] = None) -> TemplateRegistry:
        """
        Get this reader class's template registry, building it on first call.

        The registry is published only after a successful build; a failed
        build leaves nothing behind and is retried on the next call.
        """
        registry = vars(cls).get("_template_registry")
        if registry is not None:
            return registry

        with _REGISTRY_LOCK:
            registry = vars(cls).get("_template_registry")
            if registry is None:
                registry = TemplateRegistryBuilder.from_annotations(cls, config).build()
                cls._template_registry = registry
                logger.debug(f"{cls.__name__}: built {registry!r}")
        return registry

    @property
    def template_registry(self) -> TemplateRegistry:
        return self._registry

    def resolve(self, target: type) -> TemplateRule:
        """Get the template used for instances of ``target``."""
        return self._resolver.resolve(TypeDescriptor.of(target))

    def render_html(self, data: Any) -> SafeHtml:
        """
        Render an object's metadata as markup.

        Raises:
            NoTemplateMatch: If no template applies to the object's type
            UnresolvedPlaceholder: If the chosen template references data the
                object does not have
        """
        descriptor = TypeDescriptor.of_instance(data)
        rule = self._resolver.resolve(descriptor)
        return self._renderer.render(rule, descriptor, data)

    def render(self, data: Any, parent: Optional[QWidget] = None) -> MetadataLabel:
        """
        Assemble a widget showing the available metadata for an object.

        Returns:
            A MetadataLabel suitable for displaying basic data for the object
        """
        return MetadataLabel(self.render_html(data), config=self._config, parent=parent)
