"""
CareCheck Framework Models

Versioned regulatory frameworks and the results of version-aware validation.

Key components:
- VersionLimits: Hour limits and assessment recency window
- FrameworkVersion: One version of a framework with its validity interval
- VersionConfig: Resolved configuration (possibly the conservative default)
- VersionValidation / MigrationResult: Validation and migration outcomes
- VersionChange / VersionTransition / VersionComparison: Version diffs
- VersionTimeline: Chronological view of a framework's versions

Framework versions are loaded from framework packs at runtime, not hardcoded.
Validity intervals are half-open: [effective_from, effective_to).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional

from ..canon import content_hash_short
from .enums import ChangeImpact, ChangeType, FrameworkType, IssueSeverity, IssueType


# =============================================================================
# Feature Flags
# =============================================================================

FEATURE_SUSTAINABILITY_REQUIRED = "sustainability_required"
FEATURE_OBSERVATION_PERIOD = "observation_period"
FEATURE_ENHANCED_BPSD_ASSESSMENT = "enhanced_bpsd_assessment"
FEATURE_DIGITAL_SUBMISSION = "digital_submission"
FEATURE_TREND_MONITORING = "trend_monitoring"
FEATURE_RISK_FLAGGING = "risk_flagging"

KNOWN_FEATURES = (
    FEATURE_SUSTAINABILITY_REQUIRED,
    FEATURE_OBSERVATION_PERIOD,
    FEATURE_ENHANCED_BPSD_ASSESSMENT,
    FEATURE_DIGITAL_SUBMISSION,
    FEATURE_TREND_MONITORING,
    FEATURE_RISK_FLAGGING,
)

# Form field that becomes mandatory when sustainability_required is set
SUSTAINABILITY_FIELD = "duurzaamheid_onderbouwing"
OBSERVATION_FIELD = "observatie_periode"


# =============================================================================
# Limits
# =============================================================================

@dataclass(frozen=True)
class VersionLimits:
    """
    Numeric limits of a framework version.

    Hour limits are per day. min_assessment_recency_days is the maximum age
    of the most recent assessment.
    """
    max_day_care_hours: float
    max_night_care_hours: float
    max_one_on_one_hours: float
    min_assessment_recency_days: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "max_day_care_hours": self.max_day_care_hours,
            "max_night_care_hours": self.max_night_care_hours,
            "max_one_on_one_hours": self.max_one_on_one_hours,
            "min_assessment_recency_days": self.min_assessment_recency_days,
        }


# =============================================================================
# Framework Version
# =============================================================================

@dataclass(frozen=True)
class FrameworkVersion:
    """
    One version of a regulatory framework.

    Attributes:
        framework_type: Framework this version belongs to
        version: Version label (e.g., "2026")
        effective_from: First day the version applies
        effective_to: First day the version no longer applies (None = open)
        rule_ids: Ids of the rules in this version's rule set
        limits: Numeric limits
        features: Feature flags (flag -> enabled)
        name: Human-readable name
        description: Optional notes
    """
    framework_type: FrameworkType
    version: str
    effective_from: date
    limits: VersionLimits
    effective_to: Optional[date] = None
    rule_ids: tuple[str, ...] = ()
    features: dict[str, bool] = field(default_factory=dict)
    name: str = ""
    description: Optional[str] = None

    def is_effective_on(self, check_date: date) -> bool:
        """Check if the version applies on a date (half-open interval)."""
        if check_date < self.effective_from:
            return False
        if self.effective_to is not None and check_date >= self.effective_to:
            return False
        return True

    def overlaps(self, other: FrameworkVersion) -> bool:
        """Check if two validity intervals share at least one day."""
        if self.framework_type != other.framework_type:
            return False
        self_end = self.effective_to or date.max
        other_end = other.effective_to or date.max
        return self.effective_from < other_end and other.effective_from < self_end

    def has_feature(self, flag: str) -> bool:
        return bool(self.features.get(flag, False))


# =============================================================================
# Resolved Configuration
# =============================================================================

@dataclass(frozen=True)
class VersionConfig:
    """
    Configuration resolved for a (framework type, version) pair.

    is_default is True when the version was unknown and the conservative
    default limits were substituted.
    """
    framework_type: FrameworkType
    version: str
    limits: VersionLimits
    features: dict[str, bool] = field(default_factory=dict)
    rule_ids: tuple[str, ...] = ()
    effective_from: Optional[date] = None
    effective_to: Optional[date] = None
    is_default: bool = False

    def has_feature(self, flag: str) -> bool:
        return bool(self.features.get(flag, False))

    @property
    def required_fields(self) -> tuple[str, ...]:
        """Form fields this version makes mandatory."""
        if self.has_feature(FEATURE_SUSTAINABILITY_REQUIRED):
            return (SUSTAINABILITY_FIELD,)
        return ()

    @property
    def optional_fields(self) -> tuple[str, ...]:
        if self.has_feature(FEATURE_OBSERVATION_PERIOD):
            return (OBSERVATION_FIELD,)
        return ()

    @property
    def config_hash(self) -> str:
        """Short content hash identifying this configuration."""
        return content_hash_short(self.to_dict())

    def to_dict(self) -> dict[str, Any]:
        return {
            "framework_type": self.framework_type.value,
            "version": self.version,
            "limits": self.limits.to_dict(),
            "features": dict(sorted(self.features.items())),
            "rule_ids": list(self.rule_ids),
            "effective_from": self.effective_from.isoformat() if self.effective_from else None,
            "effective_to": self.effective_to.isoformat() if self.effective_to else None,
            "is_default": self.is_default,
        }


# =============================================================================
# Validation and Migration
# =============================================================================

@dataclass(frozen=True)
class VersionIssue:
    """A single problem found while validating form data against a version."""
    type: IssueType
    message: str
    severity: IssueSeverity
    field: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "type": self.type.value,
            "message": self.message,
            "severity": self.severity.value,
        }
        if self.field:
            result["field"] = self.field
        return result


@dataclass
class VersionValidation:
    """Validation verdict. valid iff no issue has severity error."""
    version: str
    issues: list[VersionIssue] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not any(i.severity == IssueSeverity.ERROR for i in self.issues)

    @property
    def errors(self) -> list[VersionIssue]:
        return [i for i in self.issues if i.severity == IssueSeverity.ERROR]

    @property
    def warnings(self) -> list[VersionIssue]:
        return [i for i in self.issues if i.severity == IssueSeverity.WARNING]

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "version": self.version,
            "issues": [i.to_dict() for i in self.issues],
        }


@dataclass
class MigrationResult:
    """
    Outcome of migrating form data between versions.

    migrated_fields is a new mapping; the input is never mutated.
    """
    success: bool
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    migrated_fields: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "warnings": list(self.warnings),
            "errors": list(self.errors),
            "migrated_fields": dict(self.migrated_fields),
        }


# =============================================================================
# Version Diffs
# =============================================================================

@dataclass(frozen=True)
class VersionChange:
    """One difference between two framework versions."""
    type: ChangeType
    description: str
    impact: ChangeImpact
    field: Optional[str] = None
    old_value: Any = None
    new_value: Any = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "type": self.type.value,
            "description": self.description,
            "impact": self.impact.value,
        }
        if self.field:
            result["field"] = self.field
        if self.old_value is not None or self.new_value is not None:
            result["old_value"] = self.old_value
            result["new_value"] = self.new_value
        return result


@dataclass
class VersionTransition:
    """A pending move from the version an application uses to the active one."""
    from_version: str
    to_version: str
    effective_date: Optional[date]
    changes: list[VersionChange] = field(default_factory=list)

    @property
    def migration_required(self) -> bool:
        return any(c.impact == ChangeImpact.HIGH for c in self.changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "needed": True,
            "from_version": self.from_version,
            "to_version": self.to_version,
            "effective_date": self.effective_date.isoformat() if self.effective_date else None,
            "changes": [c.to_dict() for c in self.changes],
            "migration_required": self.migration_required,
        }


@dataclass
class VersionComparison:
    """Structural diff of two versions' configurations."""
    version1: str
    version2: str
    fields_added: list[str] = field(default_factory=list)
    fields_removed: list[str] = field(default_factory=list)
    rules_added: list[str] = field(default_factory=list)
    rules_removed: list[str] = field(default_factory=list)
    limits: dict[str, tuple[Any, Any]] = field(default_factory=dict)
    features: dict[str, tuple[bool, bool]] = field(default_factory=dict)

    @property
    def is_identical(self) -> bool:
        return not (
            self.fields_added or self.fields_removed
            or self.rules_added or self.rules_removed
            or self.limits or self.features
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "version1": self.version1,
            "version2": self.version2,
            "fields": {"added": self.fields_added, "removed": self.fields_removed},
            "rules": {"added": self.rules_added, "removed": self.rules_removed},
            "limits": {k: {"old": old, "new": new} for k, (old, new) in self.limits.items()},
            "features": {k: {"old": old, "new": new} for k, (old, new) in self.features.items()},
        }


@dataclass(frozen=True)
class TimelineEntry:
    version: str
    effective_from: date
    effective_to: Optional[date]
    is_current: bool
    is_upcoming: bool


@dataclass
class VersionTimeline:
    """Versions of one framework type in chronological order."""
    framework_type: FrameworkType
    versions: list[TimelineEntry] = field(default_factory=list)

    @property
    def current(self) -> Optional[TimelineEntry]:
        return next((v for v in self.versions if v.is_current), None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "framework_type": self.framework_type.value,
            "versions": [
                {
                    "version": v.version,
                    "effective_from": v.effective_from.isoformat(),
                    "effective_to": v.effective_to.isoformat() if v.effective_to else None,
                    "is_current": v.is_current,
                    "is_upcoming": v.is_upcoming,
                }
                for v in self.versions
            ],
        }
