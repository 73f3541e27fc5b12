"""
Template resolution by specificity.

Ranking:
- annotated_with rules beat every of_type rule, regardless of order
- among of_type rules, the closest ancestor in the supertype chain wins
- remaining ties go to the earliest-registered rule
"""

import logging
from typing import List, Sequence

from pyqt_metadata.exceptions import AmbiguousTemplate, NoTemplateMatch
from pyqt_metadata.registry import TemplateRegistry, TemplateRule, TypeDescriptor

logger = logging.getLogger(__name__)


class TemplateResolver:
    """
    Selects the single best template for a type.

    Pure and read-only over an immutable registry, so safe to call from
    several threads at once.
    """

    def __init__(self, registry: TemplateRegistry):
        self._registry = registry

    @property
    def registry(self) -> TemplateRegistry:
        return self._registry

    def resolve(self, descriptor: TypeDescriptor) -> TemplateRule:
        """
        Resolve the template for a type.

        Args:
            descriptor: The type being rendered

        Returns:
            The winning TemplateRule

        Raises:
            NoTemplateMatch: If no rule applies to the type
            AmbiguousTemplate: If the winners share a registration index
        """
        annotated = [
            rule for rule in self._registry.annotation_rules
            if descriptor.declares(rule.annotated_with)
            and descriptor.distance_to(rule.of_type) is not None
        ]
        if annotated:
            rule = _earliest(annotated, descriptor)
            logger.debug(f"Resolved {descriptor.name} to annotated template {rule.describe()}")
            return rule

        closest: List[TemplateRule] = []
        best_distance = None
        for rule in self._registry.type_rules:
            distance = descriptor.distance_to(rule.of_type)
            if distance is None:
                continue
            if best_distance is None or distance < best_distance:
                best_distance = distance
                closest = [rule]
            elif distance == best_distance:
                closest.append(rule)

        if not closest:
            raise NoTemplateMatch(
                f"No template applies to {descriptor.name}. Register a template with "
                f"of_type=object as a fallback. Registered: "
                f"{[r.describe() for r in self._registry.rules]}"
            )

        rule = _earliest(closest, descriptor)
        logger.debug(
            f"Resolved {descriptor.name} to template {rule.describe()} "
            f"({best_distance} steps up the chain)"
        )
        return rule


def _earliest(rules: Sequence[TemplateRule], descriptor: TypeDescriptor) -> TemplateRule:
    lowest = min(rule.index for rule in rules)
    winners = [rule for rule in rules if rule.index == lowest]
    if len(winners) > 1:
        raise AmbiguousTemplate(
            f"Templates {[r.describe() for r in winners]} tie for {descriptor.name}"
        )
    return winners[0]
