"""
CareCheck Rule Registry

Maps rule ids to rule descriptors and predicates, and framework versions to
rule sets.

Key components:
- RulePredicate: Pure function CheckContext -> RuleOutcome
- RuleRegistry: Descriptor + predicate lookup, rule sets per framework version

Rule sets are keyed by (framework type, version). A lookup for a version
with no dedicated rule set falls back to the type's version-independent set
(registered with version None). Unknown framework types have no rules.

Example:
    >>> registry = RuleRegistry()
    >>> @registry.rule("demo_rule", "Demo", "Always passes",
    ...                CheckCategory.COMPLETENESS, Severity.LOW)
    ... def demo_rule(ctx):
    ...     return RuleOutcome.ok("ok")
    >>> registry.define_rule_set(FrameworkType.VV8, None, ["demo_rule"])
"""
from __future__ import annotations

from typing import Callable, Iterable, Optional

from ..exceptions import RuleRegistrationError, UnknownRuleError
from ..models import CheckCategory, CheckContext, CheckRule, FrameworkType, RuleOutcome, Severity


RulePredicate = Callable[[CheckContext], RuleOutcome]


class RuleRegistry:
    """Registry of check rules and framework rule sets."""

    def __init__(self) -> None:
        self._rules: dict[str, CheckRule] = {}
        self._predicates: dict[str, RulePredicate] = {}
        self._rule_sets: dict[tuple[FrameworkType, Optional[str]], tuple[str, ...]] = {}

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def register(self, rule: CheckRule, predicate: Optional[RulePredicate] = None) -> None:
        """
        Register a rule descriptor and (optionally) its predicate.

        A descriptor without a predicate is allowed; evaluating it yields
        a fail result.

        Raises:
            RuleRegistrationError: If the id is empty or already registered
        """
        if not rule.id:
            raise RuleRegistrationError(message="Rule id cannot be empty")
        if rule.id in self._rules:
            raise RuleRegistrationError(
                message=f"Rule '{rule.id}' is already registered",
                details={"rule_id": rule.id},
            )
        self._rules[rule.id] = rule
        if predicate is not None:
            self._predicates[rule.id] = predicate

    def rule(
        self,
        rule_id: str,
        name: str,
        description: str,
        category: CheckCategory,
        severity: Severity,
    ) -> Callable[[RulePredicate], RulePredicate]:
        """Decorator registering a predicate together with its descriptor."""
        def decorator(predicate: RulePredicate) -> RulePredicate:
            self.register(
                CheckRule(
                    id=rule_id,
                    name=name,
                    description=description,
                    category=category,
                    severity=severity,
                ),
                predicate,
            )
            return predicate
        return decorator

    def define_rule_set(
        self,
        framework_type: FrameworkType,
        version: Optional[str],
        rule_ids: Iterable[str],
    ) -> None:
        """
        Define the ordered rule set of a framework version.

        Raises:
            UnknownRuleError: If a rule id is not registered
        """
        ids = tuple(rule_ids)
        unknown = [rid for rid in ids if rid not in self._rules]
        if unknown:
            raise UnknownRuleError(
                message=f"Unknown rule ids in rule set: {', '.join(unknown)}",
                details={
                    "framework_type": framework_type.value,
                    "version": version,
                    "unknown_rule_ids": unknown,
                },
            )
        self._rule_sets[(framework_type, version)] = ids

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def get_rule(self, rule_id: str) -> Optional[CheckRule]:
        return self._rules.get(rule_id)

    def get_predicate(self, rule_id: str) -> Optional[RulePredicate]:
        return self._predicates.get(rule_id)

    def has_rule(self, rule_id: str) -> bool:
        return rule_id in self._rules

    def list_rules(self) -> list[CheckRule]:
        return list(self._rules.values())

    def rule_ids_for(self, framework_type: FrameworkType, version: Optional[str]) -> tuple[str, ...]:
        """Rule ids for a framework version, falling back to the type's default set."""
        ids = self._rule_sets.get((framework_type, version))
        if ids is None:
            ids = self._rule_sets.get((framework_type, None), ())
        return ids

    def rules_for(self, framework_type: FrameworkType, version: Optional[str]) -> list[CheckRule]:
        """Rule descriptors for a framework version."""
        return [self._rules[rid] for rid in self.rule_ids_for(framework_type, version)]

    def unknown_rule_ids(self, rule_ids: Iterable[str]) -> list[str]:
        """Ids from the input that are not registered."""
        return [rid for rid in rule_ids if rid not in self._rules]

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._rules

    def __len__(self) -> int:
        return len(self._rules)
