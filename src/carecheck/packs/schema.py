"""
CareCheck Framework Pack Schemas

Pydantic models for validating framework pack YAML/JSON files.

A framework pack describes one version of a regulatory framework: its
validity interval, numeric limits, feature flags and rule set. Packs map to
carecheck.models.FrameworkVersion.

Schema versioning:
- schema_version field tracks breaking changes
- Loaders should check version compatibility
"""
from __future__ import annotations

from datetime import date
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ..models import KNOWN_FEATURES


# =============================================================================
# Schema Version
# =============================================================================

SCHEMA_VERSION = "1.0.0"


# =============================================================================
# Enums as Literals (for YAML validation)
# =============================================================================

FrameworkTypeValue = Literal["toetsingskader", "vv8", "meerzorg"]


# =============================================================================
# Pack Schemas
# =============================================================================

class LimitsSchema(BaseModel):
    """Schema for a framework version's numeric limits."""
    max_day_care_hours: float = Field(..., ge=0, description="Maximum day care hours")
    max_night_care_hours: float = Field(..., ge=0, description="Maximum night care hours")
    max_one_on_one_hours: float = Field(..., ge=0, description="Maximum one-on-one hours")
    min_assessment_recency_days: int = Field(
        ..., gt=0, description="Maximum age of the last assessment in days"
    )

    model_config = {
        "extra": "forbid",
    }


class FrameworkPackSchema(BaseModel):
    """
    Top-level schema for a framework pack YAML/JSON file.

    effective_to is exclusive: the version stops applying on that day.
    """
    # Metadata
    schema_version: str = Field(SCHEMA_VERSION, description="Schema version for compatibility")
    framework_type: FrameworkTypeValue = Field(..., description="Framework this pack versions")
    version: str = Field(..., min_length=1, description="Version label (e.g., '2026')")
    name: str = Field("", description="Human-readable name")
    description: Optional[str] = None

    # Validity
    effective_from: date = Field(..., description="First day the version applies")
    effective_to: Optional[date] = Field(None, description="First day it no longer applies")

    # Content
    limits: LimitsSchema
    features: dict[str, bool] = Field(default_factory=dict, description="Feature flags")
    rule_ids: list[str] = Field(
        default_factory=list,
        description="Rule set; empty means the registry's set for this version",
    )

    @field_validator("version", mode="before")
    @classmethod
    def coerce_version(cls, v: Any) -> Any:
        """YAML reads `version: 2026` as an int."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("features")
    @classmethod
    def validate_features(cls, v: dict[str, bool]) -> dict[str, bool]:
        unknown = sorted(set(v) - set(KNOWN_FEATURES))
        if unknown:
            raise ValueError(f"Unknown feature flags: {', '.join(unknown)}")
        return v

    @model_validator(mode="after")
    def validate_interval(self) -> "FrameworkPackSchema":
        if self.effective_to is not None and self.effective_to <= self.effective_from:
            raise ValueError("effective_to must be after effective_from")
        if len(set(self.rule_ids)) != len(self.rule_ids):
            raise ValueError("rule_ids contains duplicates")
        return self

    model_config = {
        "extra": "forbid",  # Reject unknown fields
    }


# =============================================================================
# Validation Helpers
# =============================================================================

def validate_framework_pack(data: dict[str, Any]) -> FrameworkPackSchema:
    """
    Validate a framework pack dictionary against the schema.

    Raises:
        pydantic.ValidationError: If validation fails
    """
    return FrameworkPackSchema.model_validate(data)


def check_schema_version(data: dict[str, Any]) -> bool:
    """True when the pack's schema major version matches ours."""
    pack_version = str(data.get("schema_version", SCHEMA_VERSION))
    return pack_version.split(".")[0] == SCHEMA_VERSION.split(".")[0]
