"""
CareCheck Criterion Models

Domain criteria for reassessment (herindicatie) and their evaluation results.

Key components:
- CriterionDefinition: id, label and description of a criterion
- Period: Inclusive date range evidence is drawn from
- AdvisoryOpinion: What the external advisory service answered
- Criterion: Evaluated criterion with status, argument and evidence
- VV8_CRITERIA_2026: The eight VV8 criteria
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional

from .enums import CriterionStatus, EvaluationSource
from .evidence import EvidenceLink


@dataclass(frozen=True)
class CriterionDefinition:
    """A domain criterion to evaluate."""
    id: str
    label: str
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "label": self.label, "description": self.description}


@dataclass(frozen=True)
class Period:
    """Inclusive date range."""
    date_from: date
    date_to: date

    def contains(self, check_date: date) -> bool:
        return self.date_from <= check_date <= self.date_to

    def describe(self) -> str:
        return f"{self.date_from.isoformat()} to {self.date_to.isoformat()}"


@dataclass(frozen=True)
class AdvisoryOpinion:
    """
    Raw opinion returned by an advisory service.

    status is kept as the literal received; the evaluator decides whether
    the opinion is usable.
    """
    status: Any
    argument: str
    confidence: Any


@dataclass
class Criterion:
    """
    An evaluated criterion.

    Attributes:
        id: Criterion id (e.g., "ADL")
        label: Human-readable label
        status: Evaluation status
        argument: Explanation of the status
        evidence: Links the status is based on
        confidence: Confidence in the status (0-1)
        uncertainty: Note on what limited the evaluation
        source: Path that produced the status
    """
    id: str
    label: str
    status: CriterionStatus
    argument: str
    evidence: list[EvidenceLink] = field(default_factory=list)
    confidence: float = 0.0
    uncertainty: Optional[str] = None
    source: EvaluationSource = EvaluationSource.NO_EVIDENCE

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "id": self.id,
            "label": self.label,
            "status": self.status.value,
            "argument": self.argument,
            "evidence": [link.to_dict() for link in self.evidence],
            "confidence": self.confidence,
            "source": self.source.value,
        }
        if self.uncertainty:
            result["uncertainty"] = self.uncertainty
        return result


# =============================================================================
# VV8 Criteria (2026)
# =============================================================================

VV8_CRITERIA_2026: tuple[CriterionDefinition, ...] = (
    CriterionDefinition(
        id="ADL",
        label="ADL-afhankelijkheid",
        description="Beoordeel de mate van ADL-afhankelijkheid op basis van Katz-scores en observaties",
    ),
    CriterionDefinition(
        id="NACHT_TOEZICHT",
        label="Nachtelijk toezicht",
        description="Beoordeel de behoefte aan nachtzorg op basis van nachtelijke onrust, valgevaar en dwalen",
    ),
    CriterionDefinition(
        id="GEDRAG",
        label="Gedragsproblematiek",
        description="Beoordeel gedragsproblemen zoals agressie, onrust, of onbegrepen gedrag",
    ),
    CriterionDefinition(
        id="COMMUNICATIE",
        label="Communicatie",
        description="Beoordeel communicatieve beperkingen en ondersteuningsbehoefte",
    ),
    CriterionDefinition(
        id="MOBILITEIT",
        label="Mobiliteit",
        description="Beoordeel mobiliteit, valrisico en ondersteuning bij verplaatsing",
    ),
    CriterionDefinition(
        id="PSYCHISCH",
        label="Psychisch welbevinden",
        description="Beoordeel psychische klachten, depressie, angst en welbevinden",
    ),
    CriterionDefinition(
        id="SOCIAAL",
        label="Sociaal functioneren",
        description="Beoordeel sociale contacten, participatie en isolatie",
    ),
    CriterionDefinition(
        id="ZELFSTANDIGHEID",
        label="Zelfstandigheid",
        description="Beoordeel mate van zelfstandigheid in dagelijkse activiteiten",
    ),
)

# Search query per criterion; unknown criteria search on their label
CRITERION_QUERIES: dict[str, str] = {
    "ADL": "ADL Katz wassen aankleden eten",
    "NACHT_TOEZICHT": "nacht toezicht slapen dwalen onrust",
    "GEDRAG": "gedrag agressie onrust schreeuwen",
    "COMMUNICATIE": "communicatie praten begrijpen taal",
    "MOBILITEIT": "mobiliteit lopen vallen rollator rolstoel",
    "PSYCHISCH": "depressie angst somber psychisch stemming",
    "SOCIAAL": "sociaal contact bezoek isolatie eenzaam",
    "ZELFSTANDIGHEID": "zelfstandig hulp ondersteuning begeleiding",
}


def get_criterion_definition(criterion_id: str) -> Optional[CriterionDefinition]:
    """Look up a VV8 criterion by id."""
    for definition in VV8_CRITERIA_2026:
        if definition.id == criterion_id:
            return definition
    return None


def search_query_for(criterion: CriterionDefinition) -> str:
    return CRITERION_QUERIES.get(criterion.id, criterion.label)
