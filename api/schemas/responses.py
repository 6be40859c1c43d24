"""Response schemas for the API."""

from typing import Any, Optional

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Service health."""
    healthy: bool
    version: str
    frameworks_loaded: int
    rules_registered: int
    advisory_enabled: bool


class FrameworkVersionSummary(BaseModel):
    """A registered framework version."""
    framework_type: str
    version: str
    name: str
    effective_from: str
    effective_to: Optional[str] = None
    is_current: bool
    is_upcoming: bool
    rule_count: int
    framework_hash: str


class FrameworkListResponse(BaseModel):
    """Versions of one framework type, oldest first."""
    framework_type: str
    versions: list[FrameworkVersionSummary]
    current_version: Optional[str] = None


class VersionConfigResponse(BaseModel):
    """Resolved configuration of a framework version."""
    framework_type: str
    version: str
    limits: dict[str, Any]
    features: dict[str, bool]
    rule_ids: list[str]
    required_fields: list[str]
    optional_fields: list[str]
    effective_from: Optional[str] = None
    effective_to: Optional[str] = None
    is_default: bool
    config_hash: str


class ActiveVersionResponse(BaseModel):
    """Version a new application should use."""
    framework_type: str
    on: str
    version: str
    transition: Optional[dict[str, Any]] = None


class CheckResponse(BaseModel):
    """Normative check results with their summary."""
    framework_type: str
    version: Optional[str] = None
    results: list[dict[str, Any]]
    summary: dict[str, Any]


class EvidenceQualityResponse(BaseModel):
    """Whether the best link supports the claim well enough."""
    sufficient: bool
    score: float
    issues: list[str]
    recommendations: list[str]


class LinkResponse(BaseModel):
    """Ranked evidence links for a claim."""
    target_path: str
    links: list[dict[str, Any]]
    quality: EvidenceQualityResponse


class ChainResponse(BaseModel):
    """Evidence chain for a claim."""
    chain: dict[str, Any]
    fingerprint: str


class CriteriaResponse(BaseModel):
    """Evaluated criteria."""
    client_id: str
    period: str
    criteria: list[dict[str, Any]]
