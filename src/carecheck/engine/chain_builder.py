"""
CareCheck Evidence Chain Builder

Turns ranked evidence links into an auditable evidence chain.

Key features:
- Resolves each link to its dossier record (unresolved links are dropped)
- Numbers the chain by rank, best evidence at level 1
- Computes overall confidence from the best item
- Reports gaps: missing, weak, stale, single-source or non-professional
  evidence for clinical claims
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Optional, assert_never

from ..models import (
    ChainItem,
    DossierRecord,
    EvidenceChain,
    EvidenceLink,
    EvidenceSource,
    Incident,
    LinkingContext,
    Measure,
    Note,
    SourceType,
    days_old,
)
from .scorer import is_professional_author


logger = logging.getLogger(__name__)


# =============================================================================
# Gap Messages
# =============================================================================

GAP_NO_EVIDENCE = "Geen ondersteunend bewijs gevonden"
GAP_LOW_CONFIDENCE = "Bewijs heeft lage betrouwbaarheid"
GAP_STALE = "Recentste bewijs is ouder dan 6 maanden"
GAP_SINGLE_SOURCE = "Slechts één bron van bewijs gevonden"
GAP_NO_PROFESSIONAL = "Geen professionele beoordeling gevonden voor klinische claim"

LOW_CONFIDENCE_THRESHOLD = 0.5
STALE_AFTER_DAYS = 180

CLINICAL_TARGETS = ("adl", "bpsd", "medisch", "diagnose", "specialist")

# Roles that count as a professional assessment of a clinical claim
ASSESSOR_ROLES = (
    "arts", "specialist", "psycholoog", "dr.", "geriater", "psychiater", "dokter",
)


# =============================================================================
# Source Resolution
# =============================================================================

def to_evidence_source(record: DossierRecord) -> EvidenceSource:
    """Project a dossier record onto the chain's source shape."""
    if isinstance(record, Note):
        return EvidenceSource(
            type=record.source_type,
            id=record.id,
            date=record.date,
            text=record.text,
            metadata={"author": record.author, "section": record.section},
        )
    elif isinstance(record, Measure):
        return EvidenceSource(
            type=record.source_type,
            id=record.id,
            date=record.date,
            text=f"{record.type}: {record.score}",
            metadata={"type": record.type, "score": record.score},
        )
    elif isinstance(record, Incident):
        return EvidenceSource(
            type=record.source_type,
            id=record.id,
            date=record.date,
            text=record.description,
            metadata={"type": record.type, "severity": record.severity},
        )
    else:
        assert_never(record)


# =============================================================================
# Chain Builder
# =============================================================================

def build_evidence_chain(
    target: str,
    claim: str,
    links: list[EvidenceLink],
    context: LinkingContext,
    as_of: Optional[date] = None,
) -> EvidenceChain:
    """
    Build an evidence chain for one claim.

    Args:
        target: Claim address (e.g., "meerzorg.adl_score")
        claim: The claim as shown to reviewers
        links: Evidence links, in any order
        context: Dossier slice used to resolve the links
        as_of: Reference date for recency (defaults to context.as_of, then today)

    Returns:
        EvidenceChain with items ordered by relevance x confidence
    """
    reference = as_of or context.as_of

    resolved: list[tuple[EvidenceLink, EvidenceSource]] = []
    for link in links:
        record = context.find_record(link.source_type, link.source_id)
        if record is None:
            logger.debug(
                "Dropping unresolved link %s for %s",
                link.source_ref, target,
                extra={"client_id": context.client.client_id},
            )
            continue
        resolved.append((link, to_evidence_source(record)))

    resolved.sort(key=lambda pair: pair[0].quality, reverse=True)

    items = [
        ChainItem(
            level=index,
            source=source,
            relevance=link.relevance,
            confidence=link.confidence,
            snippet=link.snippet,
        )
        for index, (link, source) in enumerate(resolved, start=1)
    ]

    overall = max((item.quality for item in items), default=0.0)

    return EvidenceChain(
        target=target,
        claim=claim,
        evidence=items,
        overall_confidence=overall,
        gaps=identify_gaps(target, items, reference),
    )


def identify_gaps(target: str, items: list[ChainItem], as_of: Optional[date] = None) -> list[str]:
    """
    List what is missing from a chain, in a fixed order.

    An empty chain reports only the missing-evidence gap.
    """
    if not items:
        return [GAP_NO_EVIDENCE]

    gaps: list[str] = []

    if max(item.confidence for item in items) < LOW_CONFIDENCE_THRESHOLD:
        gaps.append(GAP_LOW_CONFIDENCE)

    most_recent = max(item.source.date for item in items)
    if days_old(most_recent, as_of) > STALE_AFTER_DAYS:
        gaps.append(GAP_STALE)

    if len(items) == 1:
        gaps.append(GAP_SINGLE_SOURCE)

    target_lower = target.lower()
    if any(t in target_lower for t in CLINICAL_TARGETS) and not _has_professional_source(items):
        gaps.append(GAP_NO_PROFESSIONAL)

    return gaps


def _has_professional_source(items: list[ChainItem]) -> bool:
    for item in items:
        if item.source.type == SourceType.MEASURE:
            return True
        if item.source.type == SourceType.NOTE:
            author = str(item.source.metadata.get("author") or "")
            if is_professional_author(author, ASSESSOR_ROLES):
                return True
    return False
