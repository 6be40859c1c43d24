"""
CareCheck Normative Check Engine

Evaluates a framework version's rules against a check context.

Key features:
- Rules default to the registry's rule set for the framework version
- Every rule yields exactly one result, in rule order
- A predicate that raises, or a rule without predicate, becomes a failed
  result instead of an exception
- Optional bounded thread pool for rule evaluation
- Summary with per-severity counts and blocking issues

Usage:
    engine = NormativeCheckEngine(create_default_registry())
    results = engine.evaluate(context, FrameworkRef(FrameworkType.MEERZORG, "2026"))
    summary = summarize(results)
"""
from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Optional

from ..models import (
    CheckCategory,
    CheckContext,
    CheckResult,
    CheckRule,
    CheckStatus,
    CheckSummary,
    FrameworkRef,
    RuleOutcome,
    Severity,
)
from .builtin_rules import create_default_registry
from .rule_registry import RuleRegistry


logger = logging.getLogger(__name__)


ERROR_SEVERITY = Severity.MEDIUM
ERROR_CATEGORY = CheckCategory.CONSISTENCY


class NormativeCheckEngine:
    """
    Runs normative check rules.

    Args:
        registry: Rule descriptors, predicates and rule sets
        max_workers: Worker threads; 1 evaluates rules inline
    """

    def __init__(self, registry: Optional[RuleRegistry] = None, max_workers: int = 1):
        self.registry = registry if registry is not None else create_default_registry()
        self.max_workers = max(1, max_workers)

    def resolve_rules(self, framework: FrameworkRef) -> list[CheckRule]:
        """Explicit rules of the reference, or the registry's rule set."""
        if framework.rules is not None:
            return list(framework.rules)
        return self.registry.rules_for(framework.type, framework.version)

    def evaluate(self, context: CheckContext, framework: FrameworkRef) -> list[CheckResult]:
        """
        Evaluate all rules of a framework version.

        Returns:
            One CheckResult per rule, in rule order
        """
        rules = self.resolve_rules(framework)
        started = time.perf_counter()

        if self.max_workers > 1 and len(rules) > 1:
            with ThreadPoolExecutor(max_workers=min(self.max_workers, len(rules))) as pool:
                results = list(pool.map(lambda r: self.run_rule(r, context), rules))
        else:
            results = [self.run_rule(rule, context) for rule in rules]

        logger.info(
            "Evaluated %d rules (%d failed)",
            len(results),
            sum(1 for r in results if r.status == CheckStatus.FAIL),
            extra={
                "client_id": context.client.client_id,
                "framework_type": framework.type.value,
                "framework_version": framework.version,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            },
        )
        return results

    def run_rule(self, rule: CheckRule, context: CheckContext) -> CheckResult:
        """Evaluate one rule; never raises."""
        checked_at = datetime.now(timezone.utc)
        predicate = self.registry.get_predicate(rule.id)

        try:
            if predicate is None:
                raise LookupError(f"no predicate registered for rule '{rule.id}'")
            outcome = predicate(context)
            if not isinstance(outcome, RuleOutcome):
                raise TypeError(
                    f"predicate returned {type(outcome).__name__}, expected RuleOutcome"
                )
        except Exception as e:
            logger.warning(
                "Rule %s raised: %s", rule.id, e,
                extra={"client_id": context.client.client_id, "rule_id": rule.id},
            )
            return CheckResult(
                rule_id=rule.id,
                status=CheckStatus.FAIL,
                message=f"Check execution error: {e}",
                severity=ERROR_SEVERITY,
                category=ERROR_CATEGORY,
                client_id=context.client.client_id,
                checked_at=checked_at,
                application_id=context.application_id,
            )

        return CheckResult(
            rule_id=rule.id,
            status=outcome.status,
            message=outcome.message,
            severity=rule.severity,
            category=rule.category,
            client_id=context.client.client_id,
            checked_at=checked_at,
            application_id=context.application_id,
            details=outcome.details,
        )


# =============================================================================
# Summaries and Records
# =============================================================================

def summarize(results: list[CheckResult]) -> CheckSummary:
    """
    Aggregate check results.

    Blocking issues are critical failures; the application is ready for
    submission when there are none.
    """
    summary = CheckSummary(total=len(results))
    for result in results:
        counts = summary.by_severity[result.severity]
        if result.status == CheckStatus.PASS:
            summary.passed += 1
            counts.passed += 1
        elif result.status == CheckStatus.FAIL:
            summary.failed += 1
            counts.failed += 1
        else:
            summary.warnings += 1
            counts.warnings += 1
        if result.is_blocking:
            summary.blocking_issues.append(result)
    return summary


def to_records(results: list[CheckResult]) -> list[dict[str, Any]]:
    """Flatten results into plain dicts for an external store."""
    return [
        {
            "application_id": r.application_id,
            "client_id": r.client_id,
            "check_type": r.category.value,
            "rule_id": r.rule_id,
            "status": r.status.value,
            "message": r.message,
            "severity": r.severity.value,
            "checked_at": r.checked_at.isoformat(),
        }
        for r in results
    ]


# =============================================================================
# Convenience Functions
# =============================================================================

_default_engine: Optional[NormativeCheckEngine] = None


def get_default_engine() -> NormativeCheckEngine:
    """Shared engine over the built-in rules."""
    global _default_engine
    if _default_engine is None:
        _default_engine = NormativeCheckEngine()
    return _default_engine


def execute_normative_checks(
    context: CheckContext,
    framework: FrameworkRef,
    engine: Optional[NormativeCheckEngine] = None,
) -> list[CheckResult]:
    """Evaluate a framework version's rules with the given or default engine."""
    return (engine or get_default_engine()).evaluate(context, framework)
