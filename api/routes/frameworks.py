"""Framework version endpoints."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, HTTPException

from api.schemas.requests import MigrateRequest, ValidateRequest
from api.schemas.responses import (
    ActiveVersionResponse,
    FrameworkListResponse,
    FrameworkVersionSummary,
    VersionConfigResponse,
)
from carecheck.canon import compute_framework_hash
from carecheck.engine import VersionManager
from carecheck.models import FrameworkType

router = APIRouter(prefix="/frameworks", tags=["Frameworks"])

# Shared version manager (set by main.py)
manager: VersionManager = None


def set_manager(m: VersionManager):
    global manager
    manager = m


def parse_framework_type(value: str) -> FrameworkType:
    try:
        return FrameworkType(value.lower())
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Framework type '{value}' not found")


@router.get("/{framework_type}", response_model=FrameworkListResponse)
async def list_versions(framework_type: str, on: Optional[date] = None):
    """List the registered versions of a framework type, oldest first."""
    ftype = parse_framework_type(framework_type)
    timeline = manager.version_timeline(ftype, on)

    summaries = []
    for entry in timeline.versions:
        version = manager.get_version(ftype, entry.version)
        summaries.append(FrameworkVersionSummary(
            framework_type=ftype.value,
            version=version.version,
            name=version.name,
            effective_from=entry.effective_from.isoformat(),
            effective_to=entry.effective_to.isoformat() if entry.effective_to else None,
            is_current=entry.is_current,
            is_upcoming=entry.is_upcoming,
            rule_count=len(manager.resolve_config(ftype, version.version).rule_ids),
            framework_hash=compute_framework_hash(version),
        ))

    current = timeline.current
    return FrameworkListResponse(
        framework_type=ftype.value,
        versions=summaries,
        current_version=current.version if current else None,
    )


@router.get("/{framework_type}/active", response_model=ActiveVersionResponse)
async def active_version(
    framework_type: str,
    on: Optional[date] = None,
    current_version: Optional[str] = None,
):
    """
    Version a new application should use on a date (default: today).

    With current_version, also reports the pending transition to that
    version, if any.
    """
    ftype = parse_framework_type(framework_type)
    check_date = on or date.today()
    version = manager.determine_application_version(ftype, check_date)

    transition = None
    if current_version:
        pending = manager.check_version_transition(ftype, current_version, check_date)
        transition = pending.to_dict() if pending else None

    return ActiveVersionResponse(
        framework_type=ftype.value,
        on=check_date.isoformat(),
        version=version,
        transition=transition,
    )


@router.get("/{framework_type}/{version}", response_model=VersionConfigResponse)
async def get_version_config(framework_type: str, version: str):
    """Resolved configuration of a version (defaults when the version is unknown)."""
    ftype = parse_framework_type(framework_type)
    config = manager.resolve_config(ftype, version)
    return VersionConfigResponse(
        framework_type=ftype.value,
        version=config.version,
        limits=config.limits.to_dict(),
        features=config.features,
        rule_ids=list(config.rule_ids),
        required_fields=list(config.required_fields),
        optional_fields=list(config.optional_fields),
        effective_from=config.effective_from.isoformat() if config.effective_from else None,
        effective_to=config.effective_to.isoformat() if config.effective_to else None,
        is_default=config.is_default,
        config_hash=config.config_hash,
    )


@router.post("/{framework_type}/{version}/validate")
async def validate_form(framework_type: str, version: str, request: ValidateRequest):
    """Validate application form data against a version."""
    ftype = parse_framework_type(framework_type)
    validation = manager.validate_against_version(request.form_data, ftype, version, request.as_of)
    return validation.to_dict()


@router.post("/{framework_type}/migrate")
async def migrate_form(framework_type: str, request: MigrateRequest):
    """Migrate application form data from one version to another."""
    ftype = parse_framework_type(framework_type)
    result = manager.migrate(
        request.form_data,
        request.from_version,
        request.to_version,
        ftype,
        request.as_of,
    )
    return result.to_dict()
