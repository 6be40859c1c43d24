"""
CareCheck Confidence Scorer

Reliability score of a dossier record, independent of any claim.

Each record kind starts from a base confidence and receives additive
adjustments for recency, author or instrument, and section or severity.
The sum is clamped to [0, 1].

    Note      0.80  recency +0.15/+0.10/+0.05/-0.20, professional +0.10,
                    clinical section +0.05
    Measure   0.90  recency +0.10/+0.05, age -0.30/-0.10,
                    standardized instrument +0.05
    Incident  0.85  recency +0.10/+0.05/-0.20, severe +0.05
"""
from __future__ import annotations

from datetime import date
from typing import Optional, assert_never

from ..models import DossierRecord, Incident, Measure, Note, days_old


PROFESSIONAL_ROLES = (
    "arts", "verpleegkundige", "psycholoog", "specialist",
    "geriater", "psychiater", "dokter", "dr.",
)

CLINICAL_SECTIONS = ("medisch", "zorgplan", "beoordeling", "observatie")

STANDARDIZED_INSTRUMENTS = ("katz", "adl", "barthel", "mmse", "npi", "cmai")

SEVERE_INCIDENT_LEVELS = frozenset({"high", "severe", "hoog", "ernstig"})


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return min(high, max(low, value))


def is_professional_author(author: str, roles: tuple[str, ...] = PROFESSIONAL_ROLES) -> bool:
    """Check if an author string mentions a professional role."""
    author_lower = (author or "").lower()
    return any(role in author_lower for role in roles)


# =============================================================================
# Per-Kind Scoring
# =============================================================================

def score_note(note: Note, as_of: Optional[date] = None) -> float:
    confidence = 0.80

    age = days_old(note.date, as_of)
    if age <= 30:
        confidence += 0.15
    elif age <= 90:
        confidence += 0.10
    elif age <= 180:
        confidence += 0.05
    elif age > 365:
        confidence -= 0.20

    if is_professional_author(note.author):
        confidence += 0.10

    section_lower = (note.section or "").lower()
    if any(s in section_lower for s in CLINICAL_SECTIONS):
        confidence += 0.05

    return clamp(confidence)


def score_measure(measure: Measure, as_of: Optional[date] = None) -> float:
    confidence = 0.90

    age = days_old(measure.date, as_of)
    if age <= 30:
        confidence += 0.10
    elif age <= 90:
        confidence += 0.05
    elif age > 365:
        confidence -= 0.30
    elif age > 180:
        confidence -= 0.10

    type_lower = (measure.type or "").lower()
    if any(t in type_lower for t in STANDARDIZED_INSTRUMENTS):
        confidence += 0.05

    return clamp(confidence)


def score_incident(incident: Incident, as_of: Optional[date] = None) -> float:
    confidence = 0.85

    age = days_old(incident.date, as_of)
    if age <= 30:
        confidence += 0.10
    elif age <= 90:
        confidence += 0.05
    elif age > 365:
        confidence -= 0.20

    if (incident.severity or "").strip().lower() in SEVERE_INCIDENT_LEVELS:
        confidence += 0.05

    return clamp(confidence)


def score_confidence(record: DossierRecord, as_of: Optional[date] = None) -> float:
    """
    Confidence in a dossier record.

    Args:
        record: Note, Measure or Incident
        as_of: Reference date for recency (defaults to today)

    Returns:
        Confidence in [0, 1]
    """
    if isinstance(record, Note):
        return score_note(record, as_of)
    elif isinstance(record, Measure):
        return score_measure(record, as_of)
    elif isinstance(record, Incident):
        return score_incident(record, as_of)
    else:
        assert_never(record)
