"""
CareCheck Engine

Evidence linking and normative validation services.

Services:
- Matcher / Scorer: Keyword relevance and source confidence
- Linker / ChainBuilder: Ranked evidence links and auditable evidence chains
- RuleRegistry / NormativeCheckEngine: Versioned normative checks
- VersionManager: Version-aware configuration, validation and migration
- CriterionEvaluator: Criterion evaluation with advisory fallback

Usage:
    from carecheck.engine import (
        link_evidence,
        build_evidence_chain,
        execute_normative_checks,
        summarize,
        validate_against_version,
        migrate,
        evaluate_criterion,
    )
"""
from __future__ import annotations

# Evidence linking
from .matcher import (
    RELEVANCE_THRESHOLD,
    extract_keywords,
    extract_snippet,
    is_relevant,
    keywords_from_query,
    match_measure,
    match_text,
)
from .scorer import (
    is_professional_author,
    score_confidence,
    score_incident,
    score_measure,
    score_note,
)
from .linker import (
    link_check_to_evidence,
    link_evidence,
    link_form_fields,
    validate_evidence_quality,
)
from .chain_builder import (
    build_evidence_chain,
    identify_gaps,
    to_evidence_source,
)

# Normative checks
from .rule_registry import (
    RulePredicate,
    RuleRegistry,
)
from .builtin_rules import (
    create_default_registry,
    register_builtin_rules,
)
from .check_engine import (
    NormativeCheckEngine,
    execute_normative_checks,
    get_default_engine,
    summarize,
    to_records,
)

# Framework versions
from .version_manager import (
    VersionManager,
    get_default_manager,
    migrate,
    resolve_version_config,
    set_default_manager,
    validate_against_version,
)

# Criteria
from .criterion_evaluator import (
    CriterionEvaluator,
    evaluate_criterion,
    heuristic_criterion,
)

__all__ = [
    # Evidence linking
    "RELEVANCE_THRESHOLD",
    "extract_keywords",
    "extract_snippet",
    "is_relevant",
    "keywords_from_query",
    "match_measure",
    "match_text",
    "is_professional_author",
    "score_confidence",
    "score_incident",
    "score_measure",
    "score_note",
    "link_check_to_evidence",
    "link_evidence",
    "link_form_fields",
    "validate_evidence_quality",
    "build_evidence_chain",
    "identify_gaps",
    "to_evidence_source",
    # Normative checks
    "RulePredicate",
    "RuleRegistry",
    "create_default_registry",
    "register_builtin_rules",
    "NormativeCheckEngine",
    "execute_normative_checks",
    "get_default_engine",
    "summarize",
    "to_records",
    # Framework versions
    "VersionManager",
    "get_default_manager",
    "migrate",
    "resolve_version_config",
    "set_default_manager",
    "validate_against_version",
    # Criteria
    "CriterionEvaluator",
    "evaluate_criterion",
    "heuristic_criterion",
]
