"""
CareCheck - Evidence Linking and Normative Validation for Long-term Care

CareCheck backs care-funding applications (meerzorg) and reassessments
(herindicatie, VV8) with evidence from the client dossier and checks them
against the versioned regulatory framework.

Core Principle: "Every claim points at the dossier records that support it."

Key Features:
- Evidence linking: keyword relevance x source confidence, ranked links
- Evidence chains with gap reporting for reviewers
- Normative checks as versioned, registry-backed rule sets
- Version-aware validation and migration of application forms
- Criterion evaluation with an advisory service and heuristic fallback

Quick Start:
    from carecheck.models import Client, Note, LinkingContext
    from carecheck.engine import link_evidence, build_evidence_chain

    context = LinkingContext(client=Client("C-001"), notes=notes,
                             field_name="adl_score", value="volledig afhankelijk")
    links = link_evidence(context, "meerzorg.adl_score")
    chain = build_evidence_chain("meerzorg.adl_score", "ADL afhankelijk", links, context)

Version: 0.1.0
"""
from __future__ import annotations

__version__ = "0.1.0"
__author__ = "CareCheck Team"

# =============================================================================
# Core Models (Re-exported for convenience)
# =============================================================================
from .models import (
    CheckContext,
    CheckResult,
    CheckStatus,
    CheckSummary,
    Client,
    Criterion,
    CriterionDefinition,
    CriterionStatus,
    EvidenceChain,
    EvidenceLink,
    FrameworkRef,
    FrameworkType,
    FrameworkVersion,
    Incident,
    LinkingContext,
    Measure,
    MigrationResult,
    Note,
    Period,
    Severity,
    SourceType,
    VersionConfig,
    VersionValidation,
    VV8_CRITERIA_2026,
)

# =============================================================================
# Engine Entry Points
# =============================================================================
from .engine import (
    CriterionEvaluator,
    NormativeCheckEngine,
    RuleRegistry,
    VersionManager,
    build_evidence_chain,
    create_default_registry,
    evaluate_criterion,
    execute_normative_checks,
    link_evidence,
    migrate,
    resolve_version_config,
    summarize,
    validate_against_version,
)

# =============================================================================
# Exceptions
# =============================================================================
from .exceptions import (
    AdvisoryError,
    CareCheckError,
    DossierError,
    FrameworkLoadError,
    FrameworkOverlapError,
    FrameworkValidationError,
)

__all__ = [
    "__version__",
    # Models
    "CheckContext",
    "CheckResult",
    "CheckStatus",
    "CheckSummary",
    "Client",
    "Criterion",
    "CriterionDefinition",
    "CriterionStatus",
    "EvidenceChain",
    "EvidenceLink",
    "FrameworkRef",
    "FrameworkType",
    "FrameworkVersion",
    "Incident",
    "LinkingContext",
    "Measure",
    "MigrationResult",
    "Note",
    "Period",
    "Severity",
    "SourceType",
    "VersionConfig",
    "VersionValidation",
    "VV8_CRITERIA_2026",
    # Engine
    "CriterionEvaluator",
    "NormativeCheckEngine",
    "RuleRegistry",
    "VersionManager",
    "build_evidence_chain",
    "create_default_registry",
    "evaluate_criterion",
    "execute_normative_checks",
    "link_evidence",
    "migrate",
    "resolve_version_config",
    "summarize",
    "validate_against_version",
    # Exceptions
    "AdvisoryError",
    "CareCheckError",
    "DossierError",
    "FrameworkLoadError",
    "FrameworkOverlapError",
    "FrameworkValidationError",
]
