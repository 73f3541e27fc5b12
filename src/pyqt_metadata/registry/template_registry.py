"""
Template rules and the immutable template registry.

Rules are registered through TemplateRegistryBuilder and frozen into a
TemplateRegistry by build(). build() runs every check before creating the
registry, so a registry is either complete or never observed at all.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Type

from pyqt_metadata.annotations import (
    Annotation,
    SimpleTemplate,
    SimpleTemplates,
    declared_annotations,
    find_annotation_kinds,
)
from pyqt_metadata.exceptions import (
    AmbiguousTemplate,
    MissingFallbackTemplate,
    RegistryError,
    UnresolvedPlaceholder,
)
from pyqt_metadata.protocols import MetadataConfig, MetadataProvider, get_metadata_config
from .template_parser import Segment, parse_template, placeholders_of

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TemplateRule:
    """
    One registered template.

    Attributes:
        template: Template string with ``{}`` placeholders
        index: Registration order, lower wins ties
        of_type: Matches this type and its subtypes
        annotated_with: Matches only types declaring this annotation directly
        segments: Parsed template, filled in on creation
    """
    template: str
    index: int
    of_type: type = object
    annotated_with: Optional[Type[Annotation]] = None
    segments: Tuple[Segment, ...] = field(default=(), init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "segments", parse_template(self.template))

    @property
    def is_annotation_targeted(self) -> bool:
        return self.annotated_with is not None

    @property
    def is_fallback(self) -> bool:
        return self.of_type is object and self.annotated_with is None

    def describe(self) -> str:
        target = (
            f"annotated_with={self.annotated_with.__name__}"
            if self.annotated_with is not None
            else f"of_type={self.of_type.__name__}"
        )
        return f"#{self.index} ({target}): {self.template!r}"


class TemplateRegistry:
    """
    Read-only, ordered set of template rules plus provider bindings.

    Safe to share between threads: nothing is mutated after construction.
    """

    def __init__(self, rules: Iterable[TemplateRule],
                 provider_bindings: Optional[Mapping[type, Any]] = None):
        ordered = tuple(sorted(rules, key=lambda r: r.index))
        seen: Dict[int, TemplateRule] = {}
        for rule in ordered:
            if rule.index in seen:
                raise AmbiguousTemplate(
                    f"Templates {seen[rule.index].describe()} and {rule.describe()} "
                    f"share registration index {rule.index}"
                )
            seen[rule.index] = rule

        self._rules = ordered
        self._annotation_rules = tuple(r for r in ordered if r.is_annotation_targeted)
        self._type_rules = tuple(r for r in ordered if not r.is_annotation_targeted)
        self._provider_bindings = MappingProxyType(dict(provider_bindings or {}))

    @property
    def rules(self) -> Tuple[TemplateRule, ...]:
        return self._rules

    @property
    def annotation_rules(self) -> Tuple[TemplateRule, ...]:
        return self._annotation_rules

    @property
    def type_rules(self) -> Tuple[TemplateRule, ...]:
        return self._type_rules

    @property
    def provider_bindings(self) -> Mapping[type, Any]:
        return self._provider_bindings

    @property
    def has_fallback(self) -> bool:
        return any(r.is_fallback for r in self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[TemplateRule]:
        return iter(self._rules)

    def __repr__(self) -> str:
        return f"TemplateRegistry({len(self._rules)} rules, {len(self._provider_bindings)} providers)"


class TemplateRegistryBuilder:
    """
    Collects templates and provider bindings, then builds a TemplateRegistry.

    Example:
        registry = (
            TemplateRegistryBuilder()
            .add("{MetaData.name}")
            .add("<b>{MetaData.name}</b>", of_type=Shape)
            .add("<img src='{Icon.path}'/>", annotated_with=Icon)
            .build()
        )
    """

    def __init__(self, config: Optional[MetadataConfig] = None):
        self._config = config or get_metadata_config()
        self._entries: List[Tuple[str, type, Optional[Type[Annotation]]]] = []
        self._bindings: Dict[type, Any] = {}

    @classmethod
    def from_annotations(cls, target: type,
                         config: Optional[MetadataConfig] = None) -> "TemplateRegistryBuilder":
        """Create a builder from the SimpleTemplate(s) declared on a class."""
        builder = cls(config)
        for annotation in declared_annotations(target):
            if isinstance(annotation, SimpleTemplate):
                builder.add_template(annotation)
            elif isinstance(annotation, SimpleTemplates):
                builder.add_templates(annotation.value)
        return builder

    def add(self, template: str, of_type: type = object,
            annotated_with: Optional[Type[Annotation]] = None) -> "TemplateRegistryBuilder":
        if not isinstance(of_type, type):
            raise RegistryError(f"of_type must be a class, got {of_type!r}")
        if annotated_with is not None and not (
            isinstance(annotated_with, type) and issubclass(annotated_with, Annotation)
        ):
            raise RegistryError(f"annotated_with must be an Annotation kind, got {annotated_with!r}")
        self._entries.append((template, of_type, annotated_with))
        return self

    def add_template(self, template: SimpleTemplate) -> "TemplateRegistryBuilder":
        return self.add(template.value, template.of_type, template.annotated_with)

    def add_templates(self, templates: Iterable[SimpleTemplate]) -> "TemplateRegistryBuilder":
        for template in templates:
            self.add_template(template)
        return self

    def bind_provider(self, target: type, provider: Any) -> "TemplateRegistryBuilder":
        """
        Bind a MetadataProvider to a type and its subtypes.

        Args:
            target: The class whose instances the provider describes
            provider: A MetadataProvider subclass or instance
        """
        is_provider_class = isinstance(provider, type) and issubclass(provider, MetadataProvider)
        if not (is_provider_class or isinstance(provider, MetadataProvider)):
            raise RegistryError(
                f"Provider for {target.__name__} must implement MetadataProvider, "
                f"got {provider!r}"
            )
        if target in self._bindings:
            logger.warning(
                f"Provider for '{target.__name__}' already bound to {self._bindings[target]!r}. "
                f"Overwriting with {provider!r}."
            )
        self._bindings[target] = provider
        return self

    def build(self) -> TemplateRegistry:
        """
        Parse, validate and freeze all registered templates.

        Raises:
            InvalidTemplate: If a template cannot be parsed
            UnresolvedPlaceholder: If a placeholder names the rule's
                annotated_with kind but none of its attributes
            MissingFallbackTemplate: If a fallback is required and absent
        """
        rules = [
            TemplateRule(template, index, of_type, annotated_with)
            for index, (template, of_type, annotated_with) in enumerate(self._entries)
        ]

        if self._config.validate_templates:
            for rule in rules:
                self._validate_placeholders(rule)

        if self._config.require_fallback and not any(r.is_fallback for r in rules):
            raise MissingFallbackTemplate(
                f"No universal template registered. Add a template with of_type=object "
                f"and no annotated_with. Registered: {[r.describe() for r in rules]}"
            )

        registry = TemplateRegistry(rules, self._bindings)
        logger.debug(f"Built {registry!r}")
        return registry

    def _validate_placeholders(self, rule: TemplateRule) -> None:
        """
        Check placeholders against the rule's annotated_with kind.

        Only that kind is guaranteed on every matching type. Placeholders
        naming other known kinds may still come from provider data, so a
        missing attribute there is only logged.
        """
        default_attribute = self._config.default_attribute
        for placeholder in placeholders_of(rule.segments):
            target_misses = []
            other_kinds = []
            for name, attribute in placeholder.candidates():
                wanted = attribute or default_attribute
                if rule.annotated_with is not None and rule.annotated_with.matches_name(name):
                    if rule.annotated_with.find_attribute(wanted) is not None:
                        break
                    target_misses.append(rule.annotated_with)
                    continue
                kinds = find_annotation_kinds(name)
                if any(kind.find_attribute(wanted) is not None for kind in kinds):
                    break
                other_kinds.extend(kinds)
            else:
                if target_misses:
                    kind = target_misses[0]
                    raise UnresolvedPlaceholder(
                        placeholder.token,
                        f"Template {rule.describe()} references '{{{placeholder.token}}}', "
                        f"but @{kind.annotation_name()} has no such attribute. "
                        f"Available attributes: {list(kind.attribute_names())}",
                    )
                if other_kinds:
                    available = {k.annotation_name(): list(k.attribute_names()) for k in other_kinds}
                    logger.warning(
                        f"Template {rule.describe()} references '{{{placeholder.token}}}', which "
                        f"matches no attribute of {available}. It must come from provider data."
                    )
