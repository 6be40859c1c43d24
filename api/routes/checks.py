"""Normative check endpoints."""

from fastapi import APIRouter

from api.routes.frameworks import parse_framework_type
from api.schemas.requests import CheckRequest
from api.schemas.responses import CheckResponse
from carecheck.engine import NormativeCheckEngine, VersionManager, summarize
from carecheck.models import CheckContext

router = APIRouter(prefix="/checks", tags=["Checks"])

# Shared services (set by main.py)
engine: NormativeCheckEngine = None
manager: VersionManager = None


def set_services(e: NormativeCheckEngine, m: VersionManager):
    global engine, manager
    engine = e
    manager = m


@router.post("", response_model=CheckResponse)
async def run_checks(request: CheckRequest):
    """
    Run the normative checks of a framework version.

    Without a version, the version active on as_of (default: today) is used.
    Checks never fail the request: a rule that errors is reported as a
    failed check.
    """
    ftype = parse_framework_type(request.framework_type)
    version = request.version or manager.determine_application_version(ftype, request.as_of)

    # Unknown versions are a client error here
    manager.get_version(ftype, version)
    framework = manager.framework_ref(ftype, version)

    client, notes, measures, incidents = request.dossier.records()
    context = CheckContext(
        client=client,
        notes=notes,
        measures=measures,
        incidents=incidents,
        form_data=request.form_data,
        application_id=request.application_id,
        as_of=request.as_of,
    )

    results = engine.evaluate(context, framework)
    return CheckResponse(
        framework_type=ftype.value,
        version=version,
        results=[r.to_dict() for r in results],
        summary=summarize(results).to_dict(),
    )
