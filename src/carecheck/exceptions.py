"""
CareCheck Exception Hierarchy

Domain-specific exceptions for the evidence-linking and normative-validation
engine. All exceptions include error codes for tracking and logging.

Exception codes follow the pattern: CC_<CATEGORY>_<SPECIFIC>

These exceptions are raised while loading framework packs, registering rules
and talking to the advisory service. The evaluation entry points convert them
into data (fallbacks, fail results, validation issues) so that none of them
reaches a caller of an evaluation function.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class CareCheckError(Exception):
    """
    Base exception for all CareCheck errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (CC_*)
        details: Additional context about the error
        client_id: Associated client ID if applicable
    """
    message: str
    code: str = "CC_INTERNAL_ERROR"
    details: dict[str, Any] = field(default_factory=dict)
    client_id: Optional[str] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        parts = [f"[{self.code}] {self.message}"]
        if self.client_id:
            parts.append(f"(client: {self.client_id})")
        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Serialize exception for logging/API responses."""
        result: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.client_id:
            result["client_id"] = self.client_id
        return result


# =============================================================================
# Framework Pack Errors
# =============================================================================

@dataclass
class FrameworkLoadError(CareCheckError):
    """Failed to load a framework pack from file."""
    code: str = "CC_FRAMEWORK_LOAD_ERROR"


@dataclass
class FrameworkValidationError(CareCheckError):
    """Framework pack schema or reference validation failed."""
    code: str = "CC_FRAMEWORK_VALIDATION_ERROR"


@dataclass
class FrameworkVersionMismatch(CareCheckError):
    """Framework pack schema version is not supported."""
    code: str = "CC_FRAMEWORK_SCHEMA_MISMATCH"


@dataclass
class FrameworkOverlapError(CareCheckError):
    """Two versions of one framework type have overlapping validity."""
    code: str = "CC_FRAMEWORK_OVERLAP"


@dataclass
class FrameworkNotFoundError(CareCheckError):
    """Requested framework version is not registered."""
    code: str = "CC_FRAMEWORK_NOT_FOUND"


# =============================================================================
# Rule Registry Errors
# =============================================================================

@dataclass
class RuleRegistrationError(CareCheckError):
    """Rule descriptor or predicate could not be registered."""
    code: str = "CC_RULE_REGISTRATION_ERROR"


@dataclass
class UnknownRuleError(CareCheckError):
    """Rule id has no registered predicate."""
    code: str = "CC_UNKNOWN_RULE"


# =============================================================================
# Advisory Errors
# =============================================================================

@dataclass
class AdvisoryError(CareCheckError):
    """Advisory service call failed."""
    code: str = "CC_ADVISORY_ERROR"


@dataclass
class AdvisoryResponseError(AdvisoryError):
    """Advisory service returned a malformed opinion."""
    code: str = "CC_ADVISORY_BAD_RESPONSE"


# =============================================================================
# Dossier Errors
# =============================================================================

@dataclass
class DossierError(CareCheckError):
    """Dossier record is invalid or cannot be stored."""
    code: str = "CC_DOSSIER_ERROR"
