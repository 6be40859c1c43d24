"""Criterion evaluation endpoints."""

from fastapi import APIRouter, HTTPException

from api.schemas.requests import CriteriaRequest
from api.schemas.responses import CriteriaResponse
from carecheck.engine import CriterionEvaluator
from carecheck.models import VV8_CRITERIA_2026, Period, get_criterion_definition
from carecheck.store import InMemoryDossierStore

router = APIRouter(prefix="/criteria", tags=["Criteria"])

# Shared evaluator over the service's dossier store (set by main.py)
evaluator: CriterionEvaluator = None
default_max_evidence: int = 5


def set_evaluator(e: CriterionEvaluator, max_evidence: int = 5):
    global evaluator, default_max_evidence
    evaluator = e
    default_max_evidence = max_evidence


def _inline_store(request: CriteriaRequest) -> InMemoryDossierStore:
    client, notes, measures, incidents = request.dossier.records()
    store = InMemoryDossierStore()
    store.add_client(client)
    for note in notes:
        store.add_note(note)
    for measure in measures:
        store.add_measure(measure)
    for incident in incidents:
        store.add_incident(incident)
    return store


@router.post("/evaluate", response_model=CriteriaResponse)
async def evaluate(request: CriteriaRequest):
    """
    Evaluate reassessment criteria for a client over a period.

    Criteria are evaluated concurrently. Each criterion falls back to the
    keyword heuristic when the advisory service is disabled or fails.
    """
    if request.period_to < request.period_from:
        raise HTTPException(status_code=400, detail="period_to is before period_from")

    if request.criteria:
        definitions = []
        for criterion_id in request.criteria:
            definition = get_criterion_definition(criterion_id)
            if definition is None:
                raise HTTPException(status_code=404, detail=f"Criterion '{criterion_id}' not found")
            definitions.append(definition)
    else:
        definitions = list(VV8_CRITERIA_2026)

    if request.dossier is not None:
        if request.dossier.client.client_id != request.client_id:
            raise HTTPException(status_code=400, detail="Dossier belongs to another client")
        dossier = _inline_store(request)
    else:
        dossier = evaluator.dossier
        if dossier.get_client(request.client_id) is None:
            raise HTTPException(status_code=404, detail=f"Client '{request.client_id}' not found")

    scoped = CriterionEvaluator(
        dossier,
        advisory=evaluator.advisory,
        advisory_timeout=evaluator.advisory_timeout,
        as_of=request.as_of or evaluator.as_of,
    )
    period = Period(request.period_from, request.period_to)
    max_evidence = request.max_evidence or default_max_evidence
    results = await scoped.evaluate_all(request.client_id, period, definitions, max_evidence)

    return CriteriaResponse(
        client_id=request.client_id,
        period=period.describe(),
        criteria=[c.to_dict() for c in results],
    )
