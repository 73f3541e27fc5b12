"""
Placeholder substitution.

Each ``{token}`` in a template is resolved against, in order:
1. Annotations declared directly on the type
2. Inheritable annotations declared on supertypes
3. Data returned by the instance's MetadataProvider

Values are escaped unless they come from a safe_attribute, a provider key in
``safe_keys``, or are already SafeHtml.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Tuple

from pyqt_metadata.annotations import Annotation
from pyqt_metadata.exceptions import UnresolvedPlaceholder
from pyqt_metadata.protocols import MetadataProvider, get_metadata_config
from pyqt_metadata.registry import Literal, Placeholder, TemplateRule, TypeDescriptor
from pyqt_metadata.services import EnumDispatchService

from .providers import ProviderResolver
from .safe_html import SafeHtml, format_value

logger = logging.getLogger(__name__)

_MISSING = object()


class ValueSource(Enum):
    """Where a placeholder value comes from."""
    DECLARED_ANNOTATION = "declared_annotation"
    INHERITED_ANNOTATION = "inherited_annotation"
    PROVIDER_DATA = "provider_data"
    UNRESOLVED = "unresolved"


class ProviderData:
    """Provider data for one render call, fetched on first use."""

    def __init__(self, provider: Optional[MetadataProvider], instance: Any):
        self._provider = provider
        self._instance = instance
        self._data: Optional[Mapping[str, Any]] = None

    @property
    def provider(self) -> Optional[MetadataProvider]:
        return self._provider

    def _load(self) -> Mapping[str, Any]:
        if self._data is None:
            if self._provider is None:
                self._data = {}
            else:
                self._data = self._provider.get_data(self._instance) or {}
        return self._data

    def lookup(self, key: str) -> Tuple[Optional[str], Any]:
        """
        Find a key, exact match first, then case-insensitive.

        Returns:
            (matched_key, value), or (None, _MISSING) if absent
        """
        data = self._load()
        if key in data:
            return key, data[key]
        lowered = key.lower()
        for candidate, value in data.items():
            if isinstance(candidate, str) and candidate.lower() == lowered:
                return candidate, value
        return None, _MISSING


@dataclass
class PlaceholderContext:
    """State for resolving one placeholder."""
    placeholder: Placeholder
    descriptor: TypeDescriptor
    data: ProviderData
    default_attribute: str
    annotation: Optional[Annotation] = None
    attribute: Optional[str] = None
    data_key: Optional[str] = None
    data_value: Any = None
    near_misses: list = field(default_factory=list)


class PlaceholderValueService(EnumDispatchService[ValueSource]):
    """Resolves a placeholder to its (possibly escaped) markup."""

    def __init__(self):
        super().__init__()
        self._register_handlers({
            ValueSource.DECLARED_ANNOTATION: self._from_annotation,
            ValueSource.INHERITED_ANNOTATION: self._from_annotation,
            ValueSource.PROVIDER_DATA: self._from_provider,
            ValueSource.UNRESOLVED: self._unresolved,
        })

    def resolve(self, context: PlaceholderContext) -> str:
        return self.dispatch(context)

    def _determine_strategy(self, context: PlaceholderContext) -> ValueSource:
        for find, source in (
            (context.descriptor.find_declared_by_name, ValueSource.DECLARED_ANNOTATION),
            (context.descriptor.find_inherited_by_name, ValueSource.INHERITED_ANNOTATION),
        ):
            for name, attribute in context.placeholder.candidates():
                annotation = find(name)
                if annotation is None:
                    continue
                wanted = attribute or context.default_attribute
                declared = annotation.find_attribute(wanted)
                if declared is not None:
                    context.annotation = annotation
                    context.attribute = declared
                    return source
                context.near_misses.append((annotation, wanted))

        key, value = context.data.lookup(context.placeholder.token)
        if key is not None:
            context.data_key = key
            context.data_value = value
            return ValueSource.PROVIDER_DATA
        return ValueSource.UNRESOLVED

    def _from_annotation(self, context: PlaceholderContext) -> str:
        value = getattr(context.annotation, context.attribute)
        safe = context.attribute in context.annotation.safe_attributes()
        return _embed(value, safe)

    def _from_provider(self, context: PlaceholderContext) -> str:
        provider = context.data.provider
        safe = provider is not None and context.data_key in getattr(provider, "safe_keys", ())
        return _embed(context.data_value, safe)

    def _unresolved(self, context: PlaceholderContext) -> str:
        token = context.placeholder.token
        if context.near_misses:
            annotation, wanted = context.near_misses[0]
            detail = (
                f"@{annotation.annotation_name()} has no attribute '{wanted}'. "
                f"Available attributes: {list(annotation.attribute_names())}"
            )
        else:
            names = [a.annotation_name() for a in context.descriptor.annotations]
            detail = f"Declared annotations: {names}"
        raise UnresolvedPlaceholder(
            token,
            f"Cannot resolve '{{{token}}}' for {context.descriptor.name}: no matching "
            f"annotation or provider data. {detail}",
        )


def _embed(value: Any, safe: bool) -> str:
    if safe or isinstance(value, SafeHtml):
        return format_value(value)
    return SafeHtml.escape(format_value(value))


class PlaceholderRenderer:
    """
    Renders a template rule for an instance.

    Stateless between calls; one renderer may be shared across threads.
    """

    def __init__(self, providers: Optional[ProviderResolver] = None,
                 default_attribute: Optional[str] = None):
        self._providers = providers or ProviderResolver()
        self._default_attribute = default_attribute or get_metadata_config().default_attribute
        self._values = PlaceholderValueService()

    def render(self, rule: TemplateRule, descriptor: TypeDescriptor, instance: Any) -> SafeHtml:
        """
        Substitute every placeholder of ``rule`` for ``instance``.

        Raises:
            UnresolvedPlaceholder: If a placeholder has no value source
        """
        data = ProviderData(self._providers.provider_for(descriptor, instance), instance)
        parts = []
        for segment in rule.segments:
            if isinstance(segment, Literal):
                parts.append(segment.text)
            else:
                parts.append(self._values.resolve(PlaceholderContext(
                    placeholder=segment,
                    descriptor=descriptor,
                    data=data,
                    default_attribute=self._default_attribute,
                )))
        return SafeHtml("".join(parts))
