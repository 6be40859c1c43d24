"""Evidence linking endpoints."""

from fastapi import APIRouter

from api.schemas.requests import ChainRequest, LinkRequest
from api.schemas.responses import ChainResponse, EvidenceQualityResponse, LinkResponse
from carecheck.canon import compute_chain_fingerprint
from carecheck.engine import build_evidence_chain, link_evidence, validate_evidence_quality
from carecheck.engine.linker import resolve_target_path
from carecheck.models import LinkingContext

router = APIRouter(prefix="/evidence", tags=["Evidence"])


def _linking_context(request: LinkRequest) -> LinkingContext:
    client, notes, measures, incidents = request.dossier.records()
    return LinkingContext(
        client=client,
        notes=notes,
        measures=measures,
        incidents=incidents,
        field_name=request.field_name,
        value=request.value,
        keywords=request.keywords,
        as_of=request.as_of,
    )


@router.post("/link", response_model=LinkResponse)
async def link(request: LinkRequest):
    """Rank the dossier records supporting a claim."""
    context = _linking_context(request)
    target_path = request.target_path or resolve_target_path(request.field_name)
    links = link_evidence(context, target_path)
    quality = validate_evidence_quality(links)

    return LinkResponse(
        target_path=target_path,
        links=[l.to_dict() for l in links],
        quality=EvidenceQualityResponse(
            sufficient=quality.sufficient,
            score=quality.score,
            issues=quality.issues,
            recommendations=quality.recommendations,
        ),
    )


@router.post("/chain", response_model=ChainResponse)
async def chain(request: ChainRequest):
    """Build the evidence chain for a claim, with its gaps."""
    context = _linking_context(request)
    target_path = request.target_path or resolve_target_path(request.field_name)
    links = link_evidence(context, target_path)
    evidence_chain = build_evidence_chain(target_path, request.claim, links, context)

    return ChainResponse(
        chain=evidence_chain.to_dict(),
        fingerprint=compute_chain_fingerprint(evidence_chain),
    )
