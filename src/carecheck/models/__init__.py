"""
CareCheck Models

All domain models for the CareCheck evidence-linking and normative-validation
engine.

Exports all models organized by category for convenient imports:

    from carecheck.models import (
        # Enums
        SourceType, FrameworkType, CriterionStatus,
        # Dossier
        Client, Note, Measure, Incident, LinkingContext,
        # Evidence
        EvidenceLink, EvidenceChain,
        # Checks
        CheckRule, CheckContext, CheckResult, FrameworkRef,
        # Framework
        FrameworkVersion, VersionConfig, VersionValidation,
        # Criteria
        CriterionDefinition, Criterion, VV8_CRITERIA_2026,
    )
"""
from __future__ import annotations

# =============================================================================
# Enums
# =============================================================================
from .enums import (
    ChangeImpact,
    ChangeType,
    CheckCategory,
    CheckStatus,
    CriterionStatus,
    EvaluationSource,
    FrameworkType,
    IssueSeverity,
    IssueType,
    Severity,
    SourceType,
)

# =============================================================================
# Dossier
# =============================================================================
from .dossier import (
    Client,
    DossierRecord,
    Incident,
    LinkingContext,
    Measure,
    Note,
    coerce_date,
    days_old,
)

# =============================================================================
# Evidence
# =============================================================================
from .evidence import (
    ChainItem,
    EvidenceChain,
    EvidenceLink,
    EvidenceQuality,
    EvidenceSource,
    MatchResult,
)

# =============================================================================
# Checks
# =============================================================================
from .checks import (
    CheckContext,
    CheckResult,
    CheckRule,
    CheckSummary,
    FrameworkRef,
    RuleOutcome,
    SeverityCounts,
)

# =============================================================================
# Framework
# =============================================================================
from .framework import (
    FEATURE_DIGITAL_SUBMISSION,
    FEATURE_ENHANCED_BPSD_ASSESSMENT,
    FEATURE_OBSERVATION_PERIOD,
    FEATURE_RISK_FLAGGING,
    FEATURE_SUSTAINABILITY_REQUIRED,
    FEATURE_TREND_MONITORING,
    KNOWN_FEATURES,
    OBSERVATION_FIELD,
    SUSTAINABILITY_FIELD,
    FrameworkVersion,
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
)

# =============================================================================
# Criteria
# =============================================================================
from .criteria import (
    CRITERION_QUERIES,
    VV8_CRITERIA_2026,
    AdvisoryOpinion,
    Criterion,
    CriterionDefinition,
    Period,
    get_criterion_definition,
    search_query_for,
)


__all__ = [
    # Enums
    "ChangeImpact",
    "ChangeType",
    "CheckCategory",
    "CheckStatus",
    "CriterionStatus",
    "EvaluationSource",
    "FrameworkType",
    "IssueSeverity",
    "IssueType",
    "Severity",
    "SourceType",
    # Dossier
    "Client",
    "DossierRecord",
    "Incident",
    "LinkingContext",
    "Measure",
    "Note",
    "coerce_date",
    "days_old",
    # Evidence
    "ChainItem",
    "EvidenceChain",
    "EvidenceLink",
    "EvidenceQuality",
    "EvidenceSource",
    "MatchResult",
    # Checks
    "CheckContext",
    "CheckResult",
    "CheckRule",
    "CheckSummary",
    "FrameworkRef",
    "RuleOutcome",
    "SeverityCounts",
    # Framework
    "FEATURE_DIGITAL_SUBMISSION",
    "FEATURE_ENHANCED_BPSD_ASSESSMENT",
    "FEATURE_OBSERVATION_PERIOD",
    "FEATURE_RISK_FLAGGING",
    "FEATURE_SUSTAINABILITY_REQUIRED",
    "FEATURE_TREND_MONITORING",
    "KNOWN_FEATURES",
    "OBSERVATION_FIELD",
    "SUSTAINABILITY_FIELD",
    "FrameworkVersion",
    "MigrationResult",
    "TimelineEntry",
    "VersionChange",
    "VersionComparison",
    "VersionConfig",
    "VersionIssue",
    "VersionLimits",
    "VersionTimeline",
    "VersionTransition",
    "VersionValidation",
    # Criteria
    "CRITERION_QUERIES",
    "VV8_CRITERIA_2026",
    "AdvisoryOpinion",
    "Criterion",
    "CriterionDefinition",
    "Period",
    "get_criterion_definition",
    "search_query_for",
]
