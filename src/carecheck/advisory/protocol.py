"""
CareCheck Advisory Protocol

The external service asked for an opinion on a criterion given its evidence.

Implementations may be slow or fail; the criterion evaluator bounds every call
with a timeout and falls back to a heuristic on any failure, so adapters are
free to raise.
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..models import AdvisoryOpinion, CriterionDefinition, EvidenceLink


@runtime_checkable
class AdvisoryService(Protocol):
    """
    Protocol for advisory services.

    An opinion carries a status literal, an argument and a confidence. The
    evaluator validates all three before using it.
    """

    async def evaluate(
        self,
        criterion: CriterionDefinition,
        evidence: list[EvidenceLink],
        context_text: str,
    ) -> AdvisoryOpinion:
        """
        Give an opinion on one criterion.

        Args:
            criterion: The criterion to evaluate
            evidence: Ranked evidence links (never empty)
            context_text: Client and period description

        Returns:
            The raw opinion as received

        Raises:
            AdvisoryError: When the service cannot produce an opinion
        """
        ...
