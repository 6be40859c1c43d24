"""
CareCheck Normative Check Models

Rule descriptors, evaluation context, and check results.

Key components:
- CheckRule: Declarative description of a compliance rule
- RuleOutcome: What a rule predicate returns
- CheckContext: Everything a predicate may read
- CheckResult: The recorded outcome of one rule
- CheckSummary: Aggregated counts and blocking issues
- FrameworkRef: Which framework version (and optionally which rules) to run

Rule behaviour is not stored on the descriptor; predicates are looked up by
rule id in the rule registry.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Optional

from .dossier import Client, Incident, Measure, Note
from .enums import CheckCategory, CheckStatus, FrameworkType, Severity


# =============================================================================
# Rule Descriptor
# =============================================================================

@dataclass(frozen=True)
class CheckRule:
    """
    Descriptor of a normative check rule.

    Attributes:
        id: Unique rule identifier (e.g., "meerzorg_adl_assessment")
        name: Human-readable name
        description: What the rule verifies
        category: Rule category
        severity: Severity when the rule fails
    """
    id: str
    name: str
    description: str
    category: CheckCategory
    severity: Severity

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category.value,
            "severity": self.severity.value,
        }


@dataclass(frozen=True)
class RuleOutcome:
    """Result of a rule predicate before it is stamped into a CheckResult."""
    status: CheckStatus
    message: str
    details: Optional[dict[str, Any]] = None

    @classmethod
    def ok(cls, message: str, details: Optional[dict[str, Any]] = None) -> RuleOutcome:
        return cls(CheckStatus.PASS, message, details)

    @classmethod
    def failed(cls, message: str, details: Optional[dict[str, Any]] = None) -> RuleOutcome:
        return cls(CheckStatus.FAIL, message, details)

    @classmethod
    def warn(cls, message: str, details: Optional[dict[str, Any]] = None) -> RuleOutcome:
        return cls(CheckStatus.WARNING, message, details)


# =============================================================================
# Evaluation Context
# =============================================================================

@dataclass
class CheckContext:
    """
    Input for rule predicates.

    form_data holds the application form as submitted; values are kept as
    given (strings or numbers). as_of pins "today" for recency rules.
    """
    client: Client
    notes: list[Note] = field(default_factory=list)
    measures: list[Measure] = field(default_factory=list)
    incidents: list[Incident] = field(default_factory=list)
    form_data: dict[str, Any] = field(default_factory=dict)
    application_id: Optional[str] = None
    as_of: Optional[date] = None

    @property
    def reference_date(self) -> date:
        return self.as_of or date.today()


@dataclass(frozen=True)
class FrameworkRef:
    """
    Framework selection for a check run.

    When rules is None the registry's rule set for (type, version) is used.
    """
    type: FrameworkType
    version: Optional[str] = None
    rules: Optional[tuple[CheckRule, ...]] = None


# =============================================================================
# Results
# =============================================================================

@dataclass
class CheckResult:
    """The recorded outcome of one rule for one client."""
    rule_id: str
    status: CheckStatus
    message: str
    severity: Severity
    category: CheckCategory
    client_id: str
    checked_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    application_id: Optional[str] = None
    details: Optional[dict[str, Any]] = None

    @property
    def is_blocking(self) -> bool:
        """Critical failures block submission."""
        return self.severity == Severity.CRITICAL and self.status == CheckStatus.FAIL

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        result: dict[str, Any] = {
            "rule_id": self.rule_id,
            "status": self.status.value,
            "message": self.message,
            "severity": self.severity.value,
            "category": self.category.value,
            "client_id": self.client_id,
            "checked_at": self.checked_at.isoformat(),
        }
        if self.application_id:
            result["application_id"] = self.application_id
        if self.details:
            result["details"] = self.details
        return result


@dataclass
class SeverityCounts:
    passed: int = 0
    failed: int = 0
    warnings: int = 0


@dataclass
class CheckSummary:
    """Aggregated view over a list of check results."""
    total: int = 0
    passed: int = 0
    failed: int = 0
    warnings: int = 0
    by_severity: dict[Severity, SeverityCounts] = field(
        default_factory=lambda: {sev: SeverityCounts() for sev in Severity}
    )
    blocking_issues: list[CheckResult] = field(default_factory=list)

    @property
    def ready_for_submission(self) -> bool:
        return len(self.blocking_issues) == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "warnings": self.warnings,
            "by_severity": {
                sev.value: {
                    "passed": counts.passed,
                    "failed": counts.failed,
                    "warnings": counts.warnings,
                }
                for sev, counts in self.by_severity.items()
            },
            "blocking_issues": [r.rule_id for r in self.blocking_issues],
            "ready_for_submission": self.ready_for_submission,
        }
