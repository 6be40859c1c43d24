"""
CareCheck Evidence Linker

Links claims (form fields, check results, criteria) to dossier records.

Key features:
- link_evidence: Scored, ranked links for one claim
- link_form_fields: Links for every field of an application form
- link_check_to_evidence: Links supporting a normative check result
- validate_evidence_quality: Whether the best link is good enough

Notes and incidents are matched on their text; measures on their type and
score. Every link carries the record's confidence from the scorer.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from ..models import (
    CheckResult,
    EvidenceLink,
    EvidenceQuality,
    LinkingContext,
    SourceType,
)
from .matcher import (
    extract_keywords,
    extract_snippet,
    format_measure_snippet,
    is_relevant,
    match_measure,
    match_text,
)
from .scorer import score_confidence


logger = logging.getLogger(__name__)


FORM_TARGET_PREFIX = "meerzorg"
CHECK_TARGET_PREFIX = "normative_check"


def link_evidence(context: LinkingContext, target_path: str) -> list[EvidenceLink]:
    """
    Find dossier records supporting the claim in a linking context.

    Uses context.keywords when given, otherwise keywords derived from
    context.field_name and context.value.

    Args:
        context: Dossier slice and claim
        target_path: Address of the claim (e.g., "meerzorg.adl_score")

    Returns:
        Links sorted by relevance x confidence, best first. Ties keep
        notes before measures before incidents, each in dossier order.
    """
    keywords = context.keywords
    if keywords is None:
        keywords = extract_keywords(context.field_name or "", context.value)

    links: list[EvidenceLink] = []

    for note in context.notes:
        match = match_text(note.text, keywords)
        if is_relevant(match):
            links.append(EvidenceLink(
                source_type=SourceType.NOTE,
                source_id=note.id,
                snippet=extract_snippet(note.text, keywords),
                relevance=match.score,
                confidence=score_confidence(note, context.as_of),
                reason=match.reason,
                target_path=target_path,
            ))

    for measure in context.measures:
        match = match_measure(measure, context.field_name, context.value)
        if is_relevant(match):
            links.append(EvidenceLink(
                source_type=SourceType.MEASURE,
                source_id=measure.id,
                snippet=format_measure_snippet(measure),
                relevance=match.score,
                confidence=score_confidence(measure, context.as_of),
                reason=match.reason,
                target_path=target_path,
            ))

    for incident in context.incidents:
        match = match_text(incident.description, keywords)
        if is_relevant(match):
            links.append(EvidenceLink(
                source_type=SourceType.INCIDENT,
                source_id=incident.id,
                snippet=extract_snippet(incident.description, keywords),
                relevance=match.score,
                confidence=score_confidence(incident, context.as_of),
                reason=match.reason,
                target_path=target_path,
            ))

    # sorted() is stable
    links = sorted(links, key=lambda link: link.quality, reverse=True)

    logger.debug(
        "Linked %d records to %s",
        len(links), target_path,
        extra={"client_id": context.client.client_id},
    )
    return links


def link_form_fields(
    fields: Mapping[str, Any],
    context: LinkingContext,
    prefix: str = FORM_TARGET_PREFIX,
) -> dict[str, list[EvidenceLink]]:
    """
    Link every field of an application form.

    Returns:
        Mapping of field name to its links, in the input field order
    """
    return {
        name: link_evidence(
            context.with_claim(field_name=name, value=value),
            f"{prefix}.{name}",
        )
        for name, value in fields.items()
    }


def link_check_to_evidence(check: CheckResult, context: LinkingContext) -> list[EvidenceLink]:
    """Find records relevant to a check result, keyed on its rule id and message."""
    keywords = extract_keywords(check.rule_id, check.message)
    return link_evidence(
        context.with_claim(keywords=keywords),
        f"{CHECK_TARGET_PREFIX}.{check.rule_id}",
    )


def validate_evidence_quality(
    links: list[EvidenceLink],
    required_confidence: float = 0.7,
    required_relevance: float = 0.6,
) -> EvidenceQuality:
    """
    Judge whether the best link supports a claim well enough.

    The best link is the first one (links are expected in ranked order).
    Sufficient means its quality reaches required_confidence x
    required_relevance and neither threshold is missed individually.
    """
    if not links:
        return EvidenceQuality(
            sufficient=False,
            score=0.0,
            issues=["Geen bewijs gevonden"],
            recommendations=[
                "Voeg notities, metingen of incidentmeldingen toe die deze claim ondersteunen",
            ],
        )

    issues: list[str] = []
    recommendations: list[str] = []
    best = links[0]

    if best.confidence < required_confidence:
        issues.append(
            f"Betrouwbaarheid van beste bewijs is te laag ({_percent(best.confidence)}%)"
        )
        recommendations.append("Voeg recentere of meer gedetailleerde documentatie toe")

    if best.relevance < required_relevance:
        issues.append(
            f"Relevantie van beste bewijs is te laag ({_percent(best.relevance)}%)"
        )
        recommendations.append("Zorg dat documentatie specifiek ingaat op deze claim")

    source_types = {link.source_type for link in links}
    if len(source_types) == 1 and len(links) < 3:
        recommendations.append(
            "Overweeg meerdere soorten bronnen toe te voegen (notities + metingen + incidenten)"
        )

    sufficient = best.quality >= required_confidence * required_relevance and not issues
    return EvidenceQuality(
        sufficient=sufficient,
        score=best.quality,
        issues=issues,
        recommendations=recommendations,
    )


def _percent(value: float) -> int:
    return int(round(value * 100))


def resolve_target_path(field_name: Optional[str], prefix: str = FORM_TARGET_PREFIX) -> str:
    return f"{prefix}.{field_name}" if field_name else prefix
