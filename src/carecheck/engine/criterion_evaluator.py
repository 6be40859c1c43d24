"""
CareCheck Criterion Evaluator

Evaluates reassessment criteria (VV8 2026) for a client over a period.

Key features:
- Evidence search with a criterion-specific query, limited to the period
- One advisory call per criterion, bounded by a timeout
- Keyword heuristic whenever the advisory path fails or is not configured
- Criteria without evidence resolve to onvoldoende_bewijs without any call

A criterion with at least one evidence item never ends up with status
unknown.
"""
from __future__ import annotations

import asyncio
import logging
import time
from datetime import date
from typing import Any, Iterable, Optional

from ..advisory.protocol import AdvisoryService
from ..models import (
    VV8_CRITERIA_2026,
    AdvisoryOpinion,
    Client,
    Criterion,
    CriterionDefinition,
    CriterionStatus,
    EvaluationSource,
    EvidenceLink,
    LinkingContext,
    Period,
    search_query_for,
)
from ..store import DossierAccessor
from .linker import link_evidence
from .matcher import keywords_from_query


logger = logging.getLogger(__name__)


CRITERION_TARGET_PREFIX = "criterion"

INCREASE_KEYWORDS = ("toegenomen", "verslechterd", "meer", "vaker")
DECREASE_KEYWORDS = ("afgenomen", "verbeterd", "stabiel")

UNCERTAINTY_NO_EVIDENCE = "Geen evidence gevonden in de periode"
UNCERTAINTY_HEURISTIC = "AI-evaluatie niet beschikbaar, heuristiek gebruikt"

ARGUMENT_SNIPPETS = 2


class CriterionEvaluator:
    """
    Evaluates criteria against a client's dossier.

    Args:
        dossier: Read access to clients and their records
        advisory: External advisory service; None always uses the heuristic
        advisory_timeout: Seconds to wait for one advisory answer
        as_of: Reference date for recency scoring (defaults to today)
    """

    def __init__(
        self,
        dossier: DossierAccessor,
        advisory: Optional[AdvisoryService] = None,
        advisory_timeout: float = 20.0,
        as_of: Optional[date] = None,
    ):
        self.dossier = dossier
        self.advisory = advisory
        self.advisory_timeout = advisory_timeout
        self.as_of = as_of

    # -------------------------------------------------------------------------
    # Evidence Search
    # -------------------------------------------------------------------------

    def find_evidence(
        self,
        client_id: str,
        criterion: CriterionDefinition,
        period: Period,
        max_evidence: int = 5,
    ) -> list[EvidenceLink]:
        """Best evidence for a criterion among the records inside the period."""
        client = self.dossier.get_client(client_id) or Client(client_id=client_id)
        context = LinkingContext(
            client=client,
            notes=[n for n in self.dossier.get_notes(client_id) if period.contains(n.date)],
            measures=[m for m in self.dossier.get_measures(client_id) if period.contains(m.date)],
            incidents=[i for i in self.dossier.get_incidents(client_id) if period.contains(i.date)],
            field_name=criterion.id,
            keywords=keywords_from_query(search_query_for(criterion)),
            as_of=self.as_of,
        )
        links = link_evidence(context, f"{CRITERION_TARGET_PREFIX}.{criterion.id}")
        return links[:max(0, max_evidence)]

    # -------------------------------------------------------------------------
    # Evaluation
    # -------------------------------------------------------------------------

    async def evaluate(
        self,
        client_id: str,
        criterion: CriterionDefinition,
        period: Period,
        max_evidence: int = 5,
    ) -> Criterion:
        """
        Evaluate one criterion.

        Advisory problems (timeout, error, malformed answer) never reach the
        caller; they switch the evaluation to the heuristic.
        """
        evidence = self.find_evidence(client_id, criterion, period, max_evidence)

        if not evidence:
            return Criterion(
                id=criterion.id,
                label=criterion.label,
                status=CriterionStatus.ONVOLDOENDE_BEWIJS,
                argument=f"Geen recente observaties gevonden voor {criterion.label}.",
                evidence=[],
                confidence=0.0,
                uncertainty=UNCERTAINTY_NO_EVIDENCE,
                source=EvaluationSource.NO_EVIDENCE,
            )

        advised = await self._consult_advisory(client_id, criterion, period, evidence)
        if advised is not None:
            return advised

        return heuristic_criterion(criterion, evidence)

    async def evaluate_all(
        self,
        client_id: str,
        period: Period,
        criteria: Optional[Iterable[CriterionDefinition]] = None,
        max_evidence: int = 5,
    ) -> list[Criterion]:
        """Evaluate several criteria concurrently (default: the VV8 2026 set)."""
        definitions = list(criteria) if criteria is not None else list(VV8_CRITERIA_2026)
        results = await asyncio.gather(*(
            self.evaluate(client_id, definition, period, max_evidence)
            for definition in definitions
        ))
        return list(results)

    async def _consult_advisory(
        self,
        client_id: str,
        criterion: CriterionDefinition,
        period: Period,
        evidence: list[EvidenceLink],
    ) -> Optional[Criterion]:
        """Ask the advisory service once; None means use the heuristic."""
        log_extra = {"client_id": client_id, "criterion_id": criterion.id}

        if self.advisory is None:
            logger.debug("No advisory service configured", extra=log_extra)
            return None

        context_text = f"Client ID: {client_id}, Period: {period.describe()}"
        started = time.perf_counter()
        try:
            opinion = await asyncio.wait_for(
                self.advisory.evaluate(criterion, evidence, context_text),
                timeout=self.advisory_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Advisory timed out after %.1fs; using heuristic", self.advisory_timeout,
                extra=log_extra,
            )
            return None
        except Exception as e:
            logger.warning("Advisory failed (%s); using heuristic", e, extra=log_extra)
            return None

        if not isinstance(opinion, AdvisoryOpinion):
            logger.warning(
                "Advisory returned %s instead of an opinion; using heuristic",
                type(opinion).__name__,
                extra=log_extra,
            )
            return None

        status = CriterionStatus.parse(opinion.status)
        confidence = _valid_confidence(opinion.confidence)
        if status is None or status == CriterionStatus.UNKNOWN or confidence is None:
            logger.warning(
                "Advisory returned a malformed opinion (status=%r, confidence=%r); using heuristic",
                opinion.status, opinion.confidence,
                extra=log_extra,
            )
            return None

        logger.info(
            "Criterion %s evaluated by advisory: %s", criterion.id, status.value,
            extra={**log_extra, "duration_ms": round((time.perf_counter() - started) * 1000, 2)},
        )
        return Criterion(
            id=criterion.id,
            label=criterion.label,
            status=status,
            argument=opinion.argument,
            evidence=evidence,
            confidence=confidence,
            source=EvaluationSource.ADVISORY,
        )


def _valid_confidence(value: Any) -> Optional[float]:
    """Confidence as float when it is a number in [0, 1], else None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not 0.0 <= value <= 1.0:
        return None
    return float(value)


# =============================================================================
# Heuristic Fallback
# =============================================================================

def heuristic_status(evidence: list[EvidenceLink]) -> CriterionStatus:
    """
    Keyword heuristic over the evidence snippets.

    Only increase words -> toegenomen_behoefte; only decrease words ->
    voldoet; otherwise verslechterd. Empty evidence -> onvoldoende_bewijs.
    """
    if not evidence:
        return CriterionStatus.ONVOLDOENDE_BEWIJS

    text = " ".join(link.snippet.lower() for link in evidence)
    has_increase = any(kw in text for kw in INCREASE_KEYWORDS)
    has_decrease = any(kw in text for kw in DECREASE_KEYWORDS)

    if has_increase and not has_decrease:
        return CriterionStatus.TOEGENOMEN_BEHOEFTE
    if has_decrease and not has_increase:
        return CriterionStatus.VOLDOET
    return CriterionStatus.VERSLECHTERD


def heuristic_confidence(evidence_count: int) -> float:
    if evidence_count <= 0:
        return 0.0
    if evidence_count == 1:
        return 0.5
    if evidence_count >= 3:
        return 0.75
    return 0.65


def heuristic_argument(criterion: CriterionDefinition, evidence: list[EvidenceLink]) -> str:
    if not evidence:
        return f"Geen recente observaties gevonden voor {criterion.label}."
    snippets = ". ".join(link.snippet for link in evidence[:ARGUMENT_SNIPPETS])
    return (
        f"Op basis van recente observaties: {snippets}. "
        "Dit wijst op een verhoogde zorgbehoefte op dit gebied."
    )


def heuristic_criterion(criterion: CriterionDefinition, evidence: list[EvidenceLink]) -> Criterion:
    """Evaluate a criterion without the advisory service."""
    return Criterion(
        id=criterion.id,
        label=criterion.label,
        status=heuristic_status(evidence),
        argument=heuristic_argument(criterion, evidence),
        evidence=evidence,
        confidence=heuristic_confidence(len(evidence)),
        uncertainty=UNCERTAINTY_HEURISTIC if evidence else UNCERTAINTY_NO_EVIDENCE,
        source=EvaluationSource.HEURISTIC if evidence else EvaluationSource.NO_EVIDENCE,
    )


# =============================================================================
# Convenience Functions
# =============================================================================

async def evaluate_criterion(
    dossier: DossierAccessor,
    client_id: str,
    criterion: CriterionDefinition,
    period: Period,
    max_evidence: int = 5,
    advisory: Optional[AdvisoryService] = None,
    advisory_timeout: float = 20.0,
    as_of: Optional[date] = None,
) -> Criterion:
    """Evaluate one criterion with a throwaway evaluator."""
    evaluator = CriterionEvaluator(dossier, advisory, advisory_timeout, as_of)
    return await evaluator.evaluate(client_id, criterion, period, max_evidence)
