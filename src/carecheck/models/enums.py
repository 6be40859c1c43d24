"""
CareCheck Enumerations

All enumeration types used throughout the CareCheck engine.
Organized by domain area for clarity.

All enums inherit from (str, Enum) for JSON serialization compatibility.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional


# =============================================================================
# Dossier Sources
# =============================================================================

class SourceType(str, Enum):
    """Kind of dossier record an evidence link points at."""
    NOTE = "note"
    MEASURE = "measure"
    INCIDENT = "incident"


# =============================================================================
# Frameworks
# =============================================================================

class FrameworkType(str, Enum):
    """Regulatory frameworks with versioned rule sets."""
    TOETSINGSKADER = "toetsingskader"
    VV8 = "vv8"          # Herindicatie criteria
    MEERZORG = "meerzorg"  # Additional care hours application


# =============================================================================
# Normative Checks
# =============================================================================

class CheckCategory(str, Enum):
    """Category of a normative check rule."""
    REQUIRED_FIELD = "required_field"
    TOETSINGSKADER_RULE = "toetsingskader_rule"  # Policy rule
    COMPLETENESS = "completeness"
    CONSISTENCY = "consistency"


class Severity(str, Enum):
    """Severity of a check rule."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class CheckStatus(str, Enum):
    """Outcome of evaluating one rule."""
    PASS = "pass"
    FAIL = "fail"
    WARNING = "warning"


# =============================================================================
# Criterion Evaluation
# =============================================================================

class CriterionStatus(str, Enum):
    """
    Status of a criterion after evaluation.

    UNKNOWN is the canonical spelling; the Dutch literal "onbekend" found in
    older payloads is accepted by parse() and mapped onto it.
    """
    UNKNOWN = "unknown"
    VOLDOET = "voldoet"                          # Met
    NIET_VOLDOET = "niet_voldoet"                # Not met
    ONVOLDOENDE_BEWIJS = "onvoldoende_bewijs"    # Insufficient evidence
    TOEGENOMEN_BEHOEFTE = "toegenomen_behoefte"  # Increased need
    VERSLECHTERD = "verslechterd"                # Deteriorated

    @classmethod
    def parse(cls, value: object) -> Optional[CriterionStatus]:
        """Parse a status literal, returning None when unrecognized."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        normalized = value.strip().lower()
        if normalized == "onbekend":
            return cls.UNKNOWN
        try:
            return cls(normalized)
        except ValueError:
            return None


class EvaluationSource(str, Enum):
    """Which path resolved a criterion."""
    ADVISORY = "advisory"
    HEURISTIC = "heuristic"
    NO_EVIDENCE = "no_evidence"


# =============================================================================
# Version Validation and Migration
# =============================================================================

class IssueType(str, Enum):
    """Type of a version validation issue."""
    MISSING_FIELD = "missing_field"
    INVALID_VALUE = "invalid_value"
    OUTDATED_ASSESSMENT = "outdated_assessment"
    LIMIT_EXCEEDED = "limit_exceeded"
    UNKNOWN_VERSION = "unknown_version"


class IssueSeverity(str, Enum):
    """Severity of a version validation issue."""
    ERROR = "error"
    WARNING = "warning"


class ChangeType(str, Enum):
    """Kind of change between two framework versions."""
    FIELD_ADDED = "field_added"
    FIELD_REMOVED = "field_removed"
    FIELD_MODIFIED = "field_modified"
    RULE_ADDED = "rule_added"
    RULE_REMOVED = "rule_removed"
    LIMIT_CHANGED = "limit_changed"
    FEATURE_CHANGED = "feature_changed"


class ChangeImpact(str, Enum):
    """Impact of a version change on existing applications."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
