"""
CareCheck Version Manager

Version-aware configuration, validation and migration for framework versions.

Key features:
- Active version lookup by date (half-open validity intervals)
- Configuration resolution: framework store, then the built-in table, then
  conservative defaults flagged as such
- Version comparison and transition detection
- Additive migration of form data between versions
- Validation of form data against a version's limits and required fields

Validation and migration report problems as data; they do not raise.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Mapping, Optional

from ..exceptions import FrameworkNotFoundError, FrameworkOverlapError
from ..models import (
    FEATURE_DIGITAL_SUBMISSION,
    FEATURE_ENHANCED_BPSD_ASSESSMENT,
    FEATURE_OBSERVATION_PERIOD,
    FEATURE_RISK_FLAGGING,
    FEATURE_SUSTAINABILITY_REQUIRED,
    FEATURE_TREND_MONITORING,
    OBSERVATION_FIELD,
    SUSTAINABILITY_FIELD,
    ChangeImpact,
    ChangeType,
    FrameworkRef,
    FrameworkType,
    FrameworkVersion,
    IssueSeverity,
    IssueType,
    MigrationResult,
    TimelineEntry,
    VersionChange,
    VersionComparison,
    VersionConfig,
    VersionIssue,
    VersionLimits,
    VersionTimeline,
    VersionTransition,
    VersionValidation,
    coerce_date,
    days_old,
)
from ..store import FrameworkVersionStore, InMemoryFrameworkStore
from .builtin_rules import create_default_registry
from .rule_registry import RuleRegistry


logger = logging.getLogger(__name__)


# =============================================================================
# Built-in Version Table
# =============================================================================

DEFAULT_LIMITS = VersionLimits(
    max_day_care_hours=16,
    max_night_care_hours=12,
    max_one_on_one_hours=8,
    min_assessment_recency_days=90,
)

DEFAULT_FEATURES: dict[str, bool] = {
    FEATURE_SUSTAINABILITY_REQUIRED: False,
    FEATURE_OBSERVATION_PERIOD: False,
    FEATURE_ENHANCED_BPSD_ASSESSMENT: False,
    FEATURE_DIGITAL_SUBMISSION: True,
}

BUILTIN_VERSIONS: dict[tuple[FrameworkType, str], tuple[VersionLimits, dict[str, bool]]] = {
    (FrameworkType.MEERZORG, "2025"): (
        VersionLimits(
            max_day_care_hours=18,
            max_night_care_hours=14,
            max_one_on_one_hours=10,
            min_assessment_recency_days=180,
        ),
        {
            FEATURE_SUSTAINABILITY_REQUIRED: False,
            FEATURE_OBSERVATION_PERIOD: False,
            FEATURE_ENHANCED_BPSD_ASSESSMENT: False,
            FEATURE_DIGITAL_SUBMISSION: True,
            FEATURE_TREND_MONITORING: False,
            FEATURE_RISK_FLAGGING: False,
        },
    ),
    (FrameworkType.MEERZORG, "2026"): (
        VersionLimits(
            max_day_care_hours=16,
            max_night_care_hours=12,
            max_one_on_one_hours=8,
            min_assessment_recency_days=90,
        ),
        {
            FEATURE_SUSTAINABILITY_REQUIRED: True,
            FEATURE_OBSERVATION_PERIOD: True,
            FEATURE_ENHANCED_BPSD_ASSESSMENT: True,
            FEATURE_DIGITAL_SUBMISSION: True,
            FEATURE_TREND_MONITORING: True,
            FEATURE_RISK_FLAGGING: True,
        },
    ),
}

FALLBACK_APPLICATION_VERSION = "2026"

# (form field, label, limit attribute)
HOUR_FIELDS = (
    ("dagzorg_uren", "Dagzorg", "max_day_care_hours"),
    ("nachtzorg_uren", "Nachtzorg", "max_night_care_hours"),
    ("een_op_een_uren", "Een-op-een", "max_one_on_one_hours"),
)

ASSESSMENT_DATE_FIELD = "laatste_meting_datum"

LIMIT_LABELS = {
    "max_day_care_hours": "Dagzorg maximum",
    "max_night_care_hours": "Nachtzorg maximum",
    "max_one_on_one_hours": "Een-op-een maximum",
}

REQUIRED_FIELD_LABELS = {
    SUSTAINABILITY_FIELD: "Duurzaamheid onderbouwing",
    OBSERVATION_FIELD: "Observatieperiode",
}


def _fmt(value: float) -> str:
    """Render 20.0 as "20" and 7.5 as "7.5"."""
    return str(int(value)) if float(value).is_integer() else str(value)


def _parse_number(raw: Any) -> Optional[float]:
    """Parse an hours value; None when absent, ValueError when not numeric."""
    if raw is None or raw == "":
        return None
    if isinstance(raw, bool):
        raise ValueError(raw)
    try:
        value = float(raw)
    except OverflowError as e:
        raise ValueError(raw) from e
    if not math.isfinite(value):
        raise ValueError(raw)
    return value


# =============================================================================
# Version Manager
# =============================================================================

@dataclass
class VersionManager:
    """
    Resolves framework versions and validates form data against them.

    Usage:
        manager = VersionManager(store)
        version = manager.determine_application_version(FrameworkType.MEERZORG)
        validation = manager.validate_against_version(form, FrameworkType.MEERZORG, version)
    """
    store: FrameworkVersionStore = field(default_factory=InMemoryFrameworkStore)
    registry: RuleRegistry = field(default_factory=create_default_registry)

    # -------------------------------------------------------------------------
    # Version Lookup
    # -------------------------------------------------------------------------

    def active_version(
        self, framework_type: FrameworkType, on: Optional[date] = None
    ) -> Optional[FrameworkVersion]:
        """
        Version effective on a date, or None when no version covers it.

        Raises:
            FrameworkOverlapError: If the store holds more than one version
                effective on the date
        """
        check_date = on or date.today()
        matches = [
            version for version in self.store.list_versions(framework_type)
            if version.is_effective_on(check_date)
        ]
        if len(matches) > 1:
            raise FrameworkOverlapError(
                message=(
                    f"{framework_type.value} has {len(matches)} versions effective "
                    f"on {check_date.isoformat()}"
                ),
                details={
                    "framework_type": framework_type.value,
                    "date": check_date.isoformat(),
                    "versions": [v.version for v in matches],
                },
            )
        return matches[0] if matches else None

    def get_version(self, framework_type: FrameworkType, version: str) -> FrameworkVersion:
        """
        A registered framework version.

        Raises:
            FrameworkNotFoundError: If the version is not registered
        """
        found = self.store.get_version(framework_type, version)
        if found is None:
            raise FrameworkNotFoundError(
                message=f"Framework version {framework_type.value} {version} not found",
                details={"framework_type": framework_type.value, "version": version},
            )
        return found

    def framework_ref(self, framework_type: FrameworkType, version: str) -> FrameworkRef:
        """Reference carrying the resolved rule set of a version."""
        config = self.resolve_config(framework_type, version)
        rules = tuple(
            rule
            for rule in (self.registry.get_rule(rule_id) for rule_id in config.rule_ids)
            if rule is not None
        )
        return FrameworkRef(type=framework_type, version=version, rules=rules)

    def determine_application_version(
        self, framework_type: FrameworkType, submission_date: Optional[date] = None
    ) -> str:
        """
        Version a new application should use.

        The active version on the submission date, else the most recent
        version, else "2026".
        """
        active = self.active_version(framework_type, submission_date)
        if active is not None:
            return active.version

        versions = self.store.list_versions(framework_type)
        if versions:
            latest = max(versions, key=lambda v: v.effective_from)
            return latest.version

        return FALLBACK_APPLICATION_VERSION

    def resolve_config(self, framework_type: FrameworkType, version: str) -> VersionConfig:
        """
        Configuration for a framework version.

        Unknown versions resolve to the conservative defaults with
        is_default=True.
        """
        stored = self.store.get_version(framework_type, version)
        if stored is not None:
            return VersionConfig(
                framework_type=framework_type,
                version=version,
                limits=stored.limits,
                features=dict(stored.features),
                rule_ids=stored.rule_ids or self.registry.rule_ids_for(framework_type, version),
                effective_from=stored.effective_from,
                effective_to=stored.effective_to,
            )

        builtin = BUILTIN_VERSIONS.get((framework_type, version))
        if builtin is not None:
            limits, features = builtin
            return VersionConfig(
                framework_type=framework_type,
                version=version,
                limits=limits,
                features=dict(features),
                rule_ids=self.registry.rule_ids_for(framework_type, version),
            )

        logger.warning(
            "Unknown framework version %s %s; using default limits",
            framework_type.value, version,
            extra={"framework_type": framework_type.value, "framework_version": version},
        )
        return VersionConfig(
            framework_type=framework_type,
            version=version,
            limits=DEFAULT_LIMITS,
            features=dict(DEFAULT_FEATURES),
            rule_ids=self.registry.rule_ids_for(framework_type, version),
            is_default=True,
        )

    # -------------------------------------------------------------------------
    # Comparison and Transitions
    # -------------------------------------------------------------------------

    def compare_versions(
        self, framework_type: FrameworkType, version1: str, version2: str
    ) -> VersionComparison:
        """Structural differences going from version1 to version2."""
        c1 = self.resolve_config(framework_type, version1)
        c2 = self.resolve_config(framework_type, version2)

        fields1 = set(c1.required_fields) | set(c1.optional_fields)
        fields2 = set(c2.required_fields) | set(c2.optional_fields)

        limits1 = c1.limits.to_dict()
        limits2 = c2.limits.to_dict()

        feature_names = sorted(set(c1.features) | set(c2.features))

        return VersionComparison(
            version1=version1,
            version2=version2,
            fields_added=sorted(fields2 - fields1),
            fields_removed=sorted(fields1 - fields2),
            rules_added=[rid for rid in c2.rule_ids if rid not in c1.rule_ids],
            rules_removed=[rid for rid in c1.rule_ids if rid not in c2.rule_ids],
            limits={
                key: (limits1[key], value)
                for key, value in limits2.items()
                if limits1[key] != value
            },
            features={
                name: (c1.has_feature(name), c2.has_feature(name))
                for name in feature_names
                if c1.has_feature(name) != c2.has_feature(name)
            },
        )

    def version_changes(
        self, framework_type: FrameworkType, from_version: str, to_version: str
    ) -> list[VersionChange]:
        """Describe the differences between two versions for reviewers."""
        comparison = self.compare_versions(framework_type, from_version, to_version)
        target = self.resolve_config(framework_type, to_version)
        changes: list[VersionChange] = []

        for name in comparison.fields_added:
            if name in target.required_fields:
                changes.append(VersionChange(
                    type=ChangeType.FIELD_ADDED,
                    field=name,
                    description=f"Nieuw verplicht veld: {name}",
                    impact=ChangeImpact.HIGH,
                ))
            else:
                changes.append(VersionChange(
                    type=ChangeType.FIELD_ADDED,
                    field=name,
                    description=f"Nieuw optioneel veld: {name}",
                    impact=ChangeImpact.LOW,
                ))

        for name in comparison.fields_removed:
            changes.append(VersionChange(
                type=ChangeType.FIELD_REMOVED,
                field=name,
                description=f"Veld vervallen: {name}",
                impact=ChangeImpact.MEDIUM,
            ))

        for rule_id in comparison.rules_added:
            rule = self.registry.get_rule(rule_id)
            changes.append(VersionChange(
                type=ChangeType.RULE_ADDED,
                description=f"Nieuwe validatieregel: {rule.name if rule else rule_id}",
                impact=ChangeImpact.MEDIUM,
                new_value=rule_id,
            ))

        for rule_id in comparison.rules_removed:
            rule = self.registry.get_rule(rule_id)
            changes.append(VersionChange(
                type=ChangeType.RULE_REMOVED,
                description=f"Validatieregel vervallen: {rule.name if rule else rule_id}",
                impact=ChangeImpact.LOW,
                old_value=rule_id,
            ))

        for key, (old, new) in comparison.limits.items():
            changes.append(VersionChange(
                type=ChangeType.LIMIT_CHANGED,
                field=key,
                description=_describe_limit_change(key, old, new),
                impact=ChangeImpact.MEDIUM,
                old_value=old,
                new_value=new,
            ))

        for name, (old, new) in comparison.features.items():
            changes.append(VersionChange(
                type=ChangeType.FEATURE_CHANGED,
                field=name,
                description=f"Functie {name} {'ingeschakeld' if new else 'uitgeschakeld'}",
                impact=ChangeImpact.LOW,
                old_value=old,
                new_value=new,
            ))

        return changes

    def check_version_transition(
        self,
        framework_type: FrameworkType,
        current_version: str,
        target_date: Optional[date] = None,
    ) -> Optional[VersionTransition]:
        """
        Pending transition to the version active on target_date.

        Returns None when no version is active or the current one is.
        """
        active = self.active_version(framework_type, target_date)
        if active is None or active.version == current_version:
            return None

        return VersionTransition(
            from_version=current_version,
            to_version=active.version,
            effective_date=active.effective_from,
            changes=self.version_changes(framework_type, current_version, active.version),
        )

    def version_timeline(
        self, framework_type: FrameworkType, today: Optional[date] = None
    ) -> VersionTimeline:
        """All registered versions in chronological order."""
        reference = today or date.today()
        versions = sorted(
            self.store.list_versions(framework_type),
            key=lambda v: v.effective_from,
        )
        return VersionTimeline(
            framework_type=framework_type,
            versions=[
                TimelineEntry(
                    version=v.version,
                    effective_from=v.effective_from,
                    effective_to=v.effective_to,
                    is_current=v.is_effective_on(reference),
                    is_upcoming=v.effective_from > reference,
                )
                for v in versions
            ],
        )

    # -------------------------------------------------------------------------
    # Migration
    # -------------------------------------------------------------------------

    def migrate(
        self,
        form_data: Any,
        from_version: str,
        to_version: str,
        framework_type: FrameworkType,
        as_of: Optional[date] = None,
    ) -> MigrationResult:
        """
        Carry form data over to another version.

        Migration is additive: existing values are kept, newly required
        fields get an empty placeholder. Values that violate the target
        version are reported as warnings for manual follow-up.
        """
        if not isinstance(form_data, Mapping):
            return MigrationResult(
                success=False,
                errors=["Formuliergegevens moeten een mapping zijn"],
            )

        warnings: list[str] = []
        errors: list[str] = []
        migrated: dict[str, Any] = dict(form_data)

        source = self.resolve_config(framework_type, from_version)
        target = self.resolve_config(framework_type, to_version)

        if target.is_default:
            warnings.append(
                f"Framework versie {to_version} onbekend; standaardlimieten gebruikt."
            )

        for key, label, limit_attr in HOUR_FIELDS:
            raw = form_data.get(key)
            try:
                hours = _parse_number(raw)
            except (TypeError, ValueError):
                errors.append(f"{label} uren ({raw!r}) is geen geldig getal")
                continue
            limit = getattr(target.limits, limit_attr)
            if hours is not None and hours > limit:
                warnings.append(
                    f"{label} uren ({_fmt(hours)}) overschrijdt nieuwe maximum "
                    f"({_fmt(limit)}). Handmatige aanpassing vereist."
                )

        for name in target.required_fields:
            if name in source.required_fields or form_data.get(name):
                continue
            migrated[name] = ""
            warnings.append(f'Nieuwe verplicht veld "{name}" moet worden ingevuld.')

        raw_date = form_data.get(ASSESSMENT_DATE_FIELD)
        if raw_date:
            try:
                assessed = coerce_date(raw_date)
            except (TypeError, ValueError):
                errors.append(f"Ongeldige datum voor {ASSESSMENT_DATE_FIELD}: {raw_date!r}")
            else:
                window = target.limits.min_assessment_recency_days
                if days_old(assessed, as_of) > window:
                    warnings.append(
                        f"Laatste beoordeling is ouder dan {round(window / 30)} maanden. "
                        f"Nieuwe beoordeling vereist voor {to_version} framework."
                    )

        logger.info(
            "Migrated form data %s -> %s (%d warnings, %d errors)",
            from_version, to_version, len(warnings), len(errors),
            extra={"framework_type": framework_type.value, "framework_version": to_version},
        )
        return MigrationResult(
            success=not errors,
            warnings=warnings,
            errors=errors,
            migrated_fields=migrated,
        )

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate_against_version(
        self,
        form_data: Any,
        framework_type: FrameworkType,
        version: str,
        as_of: Optional[date] = None,
    ) -> VersionValidation:
        """
        Validate form data against a version's limits and requirements.

        Issues:
            limit_exceeded (error)       hours above the version's maximum
            invalid_value (error)        non-numeric hours or dates
            missing_field (error)        required field empty
            outdated_assessment (warning) last assessment outside the window
            unknown_version (warning)    version unknown, defaults used
        """
        if not isinstance(form_data, Mapping):
            return VersionValidation(
                version=version,
                issues=[VersionIssue(
                    type=IssueType.INVALID_VALUE,
                    message="Formuliergegevens moeten een mapping zijn",
                    severity=IssueSeverity.ERROR,
                )],
            )

        config = self.resolve_config(framework_type, version)
        issues: list[VersionIssue] = []

        if config.is_default:
            issues.append(VersionIssue(
                type=IssueType.UNKNOWN_VERSION,
                message=f"Framework versie {version} onbekend; standaardlimieten gebruikt",
                severity=IssueSeverity.WARNING,
            ))

        for key, label, limit_attr in HOUR_FIELDS:
            raw = form_data.get(key)
            try:
                hours = _parse_number(raw)
            except (TypeError, ValueError):
                issues.append(VersionIssue(
                    type=IssueType.INVALID_VALUE,
                    field=key,
                    message=f"{label} uren ({raw!r}) is geen geldig getal",
                    severity=IssueSeverity.ERROR,
                ))
                continue
            limit = getattr(config.limits, limit_attr)
            if hours is not None and hours > limit:
                issues.append(VersionIssue(
                    type=IssueType.LIMIT_EXCEEDED,
                    field=key,
                    message=f"{label} uren ({_fmt(hours)}) overschrijdt maximum ({_fmt(limit)})",
                    severity=IssueSeverity.ERROR,
                ))

        for name in config.required_fields:
            if not form_data.get(name):
                label = REQUIRED_FIELD_LABELS.get(name, name)
                issues.append(VersionIssue(
                    type=IssueType.MISSING_FIELD,
                    field=name,
                    message=f"{label} is verplicht voor versie {version}",
                    severity=IssueSeverity.ERROR,
                ))

        raw_date = form_data.get(ASSESSMENT_DATE_FIELD)
        if raw_date:
            try:
                assessed = coerce_date(raw_date)
            except (TypeError, ValueError):
                issues.append(VersionIssue(
                    type=IssueType.INVALID_VALUE,
                    field=ASSESSMENT_DATE_FIELD,
                    message=f"Ongeldige datum voor {ASSESSMENT_DATE_FIELD}: {raw_date!r}",
                    severity=IssueSeverity.ERROR,
                ))
            else:
                age = days_old(assessed, as_of)
                window = config.limits.min_assessment_recency_days
                if age > window:
                    issues.append(VersionIssue(
                        type=IssueType.OUTDATED_ASSESSMENT,
                        field=ASSESSMENT_DATE_FIELD,
                        message=f"Laatste beoordeling is {age} dagen oud (maximum {window} dagen)",
                        severity=IssueSeverity.WARNING,
                    ))

        return VersionValidation(version=version, issues=issues)


def _describe_limit_change(key: str, old: Any, new: Any) -> str:
    if key == "min_assessment_recency_days":
        strictness = "Strengere" if new < old else "Soepelere"
        return (
            f"{strictness} eisen aan recentheid van metingen "
            f"({_fmt(old)} dagen -> {_fmt(new)} dagen)"
        )
    direction = "verlaagd" if new < old else "verhoogd"
    return f"{LIMIT_LABELS.get(key, key)} {direction} van {_fmt(old)} naar {_fmt(new)} uur"


# =============================================================================
# Module-level Manager Instance
# =============================================================================

_default_manager: Optional[VersionManager] = None


def get_default_manager() -> VersionManager:
    """Get or create the default version manager instance."""
    global _default_manager
    if _default_manager is None:
        _default_manager = VersionManager()
    return _default_manager


def set_default_manager(manager: Optional[VersionManager]) -> None:
    global _default_manager
    _default_manager = manager


def resolve_version_config(framework_type: FrameworkType, version: str) -> VersionConfig:
    """Resolve a version configuration with the default manager."""
    return get_default_manager().resolve_config(framework_type, version)


def validate_against_version(
    form_data: Any,
    framework_type: FrameworkType,
    version: str,
    as_of: Optional[date] = None,
) -> VersionValidation:
    """Validate form data with the default manager."""
    return get_default_manager().validate_against_version(form_data, framework_type, version, as_of)


def migrate(
    form_data: Any,
    from_version: str,
    to_version: str,
    framework_type: FrameworkType,
    as_of: Optional[date] = None,
) -> MigrationResult:
    """Migrate form data with the default manager."""
    return get_default_manager().migrate(form_data, from_version, to_version, framework_type, as_of)
