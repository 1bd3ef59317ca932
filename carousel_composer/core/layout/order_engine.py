"""
Composition Order Engine
=======================

Computes the final module order from a base order plus an ordered list of
spatial rules. Rules compose: each one operates on the output of the previous
rule. A rule that cannot be applied is skipped and logged; resolution itself
never fails.
"""

from typing import Iterable, List, Optional, Sequence

from carousel_composer.config.logging import get_logger
from carousel_composer.models.schemas import (
    OrderResolution,
    SpatialRule,
    SpatialRuleType,
    WrapperConfig,
)

logger = get_logger(__name__)


class CompositionOrderEngine:
    """
    Apply spatial rules to a render order.

    ``between`` with references in reverse order is permissive: the target is
    inserted immediately after ``reference`` and the references are never
    reordered.
    """

    def __init__(self):
        self.logger = logger.bind(component="order_engine")

    def resolve(self, base_order: Sequence[str], rules: Iterable[SpatialRule]) -> List[str]:
        """
        Resolve the final order.

        Args:
            base_order: Starting order of module ids
            rules: Spatial rules, applied in sequence

        Returns:
            New list with the resolved order; ``base_order`` is not modified
        """
        return self.resolve_with_marks(base_order, rules).order

    def resolve_with_marks(
        self, base_order: Sequence[str], rules: Iterable[SpatialRule]
    ) -> OrderResolution:
        """Resolve the order and collect wrap marks and skipped rules."""
        order = list(base_order)
        wrapped = {}
        skipped = []

        for rule in rules:
            errors = self.validate_rule(rule)
            if errors:
                self.logger.warning("Skipping invalid spatial rule", rule_id=rule.id, errors=errors)
                skipped.append(rule.id)
                continue

            missing = [ref for ref in self._rule_refs(rule) if ref not in order]
            if missing:
                self.logger.warning(
                    "Skipping spatial rule with unknown module", rule_id=rule.id, missing=missing
                )
                skipped.append(rule.id)
                continue

            if rule.type == SpatialRuleType.WRAP:
                wrapped[rule.target] = rule.wrapper or WrapperConfig()
                continue

            order = self._apply(order, rule)
            self.logger.debug("Applied spatial rule", rule_id=rule.id, type=rule.type.value)

        return OrderResolution(order=order, wrapped=wrapped, skipped=skipped)

    @staticmethod
    def _rule_refs(rule: SpatialRule) -> List[str]:
        refs = [rule.target]
        if rule.type != SpatialRuleType.WRAP:
            refs.append(rule.reference)
        if rule.type == SpatialRuleType.BETWEEN:
            refs.append(rule.reference2)
        return refs

    @staticmethod
    def _apply(order: List[str], rule: SpatialRule) -> List[str]:
        result = [module_id for module_id in order if module_id != rule.target]
        ref_index = result.index(rule.reference)
        if rule.type == SpatialRuleType.BEFORE:
            result.insert(ref_index, rule.target)
        else:
            # after and between both land immediately after the first reference
            result.insert(ref_index + 1, rule.target)
        return result

    def validate_rule(self, rule: SpatialRule) -> List[str]:
        """
        Validate a single rule.

        Returns:
            List of error messages; empty when the rule is well formed
        """
        errors = []
        if not rule.target:
            errors.append("Target module is required")

        if rule.type in (SpatialRuleType.BEFORE, SpatialRuleType.AFTER):
            if not rule.reference:
                errors.append(f"{rule.type.value.upper()} rule requires reference")
        elif rule.type == SpatialRuleType.BETWEEN:
            if not rule.reference or not rule.reference2:
                errors.append("BETWEEN rule requires reference and reference2")

        refs = [ref for ref in (rule.target, rule.reference, rule.reference2) if ref]
        if rule.type != SpatialRuleType.WRAP and len(set(refs)) != len(refs):
            errors.append("Target and references must be distinct modules")
        return errors

    def detect_conflicts(self, rules: Sequence[SpatialRule]) -> List[str]:
        """
        Report pairs of rules that interfere with each other.

        Two rules repositioning the same target conflict, as do two ``before``
        rules placing modules before each other.
        """
        conflicts = []
        rules = list(rules)
        for i, first in enumerate(rules):
            for second in rules[i + 1:]:
                if (
                    first.target == second.target
                    and first.type != SpatialRuleType.WRAP
                    and second.type != SpatialRuleType.WRAP
                ):
                    conflicts.append(
                        f"Rules {first.id} and {second.id} both move module: {first.target}"
                    )
                if (
                    first.type == second.type
                    and first.type in (SpatialRuleType.BEFORE, SpatialRuleType.AFTER)
                    and first.target == second.reference
                    and first.reference == second.target
                ):
                    conflicts.append(
                        f"Rules {first.id} and {second.id} form a circular placement"
                    )
        return conflicts


# Shared engine instance
_engine: Optional[CompositionOrderEngine] = None


def get_order_engine() -> CompositionOrderEngine:
    """Get the shared order engine."""
    global _engine
    if _engine is None:
        _engine = CompositionOrderEngine()
    return _engine
