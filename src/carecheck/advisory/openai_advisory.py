"""
CareCheck OpenAI Advisory Service

AdvisoryService backed by an OpenAI-compatible chat completions endpoint.

The model is asked for a JSON object {"status", "argument", "confidence"}.
The adapter only checks that the answer is a JSON object; whether the
status and confidence are usable is decided by the criterion evaluator.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Iterable, Optional

from openai import AsyncOpenAI, OpenAIError

from ..cache import ContextCache
from ..exceptions import AdvisoryError, AdvisoryResponseError
from ..models import (
    VV8_CRITERIA_2026,
    AdvisoryOpinion,
    CriterionDefinition,
    CriterionStatus,
    EvidenceLink,
)


logger = logging.getLogger(__name__)


SYSTEM_PROMPT = """Je bent een ervaren indicatiesteller voor de Wet langdurige zorg (Wlz).
Beoordeel het opgegeven criterium uitsluitend op basis van het aangeleverde bewijs.

Mogelijke statussen: {statuses}

Geef je antwoord in JSON formaat:
{{
  "status": "<een van de statussen>",
  "argument": "korte onderbouwing in het Nederlands",
  "confidence": 0.0-1.0
}}"""

MAX_EVIDENCE_CHARS = 500


def _status_list() -> str:
    return ", ".join(s.value for s in CriterionStatus if s != CriterionStatus.UNKNOWN)


def build_reference_text(criteria: Iterable[CriterionDefinition] = VV8_CRITERIA_2026) -> str:
    """Reference framework text listing the criteria and what each assesses."""
    return "\n".join(f"- {c.label} ({c.id}): {c.description}" for c in criteria)


class OpenAIAdvisoryService:
    """
    Advisory service calling an OpenAI chat model.

    Args:
        model: Chat model name
        client: AsyncOpenAI client; created on first use when omitted
        reference: Cache with shared reference text added to the system prompt
        temperature: Sampling temperature
        max_tokens: Completion token limit
    """

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        client: Optional[Any] = None,
        reference: Optional[ContextCache[str]] = None,
        temperature: float = 0.2,
        max_tokens: int = 800,
    ):
        self.model = model
        self._client = client
        self.reference = reference
        self.temperature = temperature
        self.max_tokens = max_tokens

    @property
    def client(self) -> Any:
        if self._client is None:
            try:
                self._client = AsyncOpenAI()
            except OpenAIError as e:
                raise AdvisoryError(message=f"OpenAI client unavailable: {e}") from e
        return self._client

    def build_messages(
        self,
        criterion: CriterionDefinition,
        evidence: list[EvidenceLink],
        context_text: str,
    ) -> list[dict[str, str]]:
        system = SYSTEM_PROMPT.format(statuses=_status_list())
        reference_text = self.reference.get() if self.reference else None
        if reference_text:
            system = f"{system}\n\nReferentiekader:\n{reference_text}"

        lines = [
            f"Criterium: {criterion.label} ({criterion.id})",
            f"Omschrijving: {criterion.description}",
            context_text,
            "",
            "Bewijs:",
        ]
        for index, link in enumerate(evidence, start=1):
            lines.append(
                f"{index}. [{link.source_ref}] {link.snippet[:MAX_EVIDENCE_CHARS]}"
            )

        return [
            {"role": "system", "content": system},
            {"role": "user", "content": "\n".join(lines)},
        ]

    async def evaluate(
        self,
        criterion: CriterionDefinition,
        evidence: list[EvidenceLink],
        context_text: str,
    ) -> AdvisoryOpinion:
        messages = self.build_messages(criterion, evidence, context_text)

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                response_format={"type": "json_object"},
            )
        except OpenAIError as e:
            raise AdvisoryError(
                message=f"Advisory request failed: {e}",
                details={"criterion_id": criterion.id, "model": self.model},
            ) from e

        content = response.choices[0].message.content or ""
        return parse_opinion(content, criterion.id)


def parse_opinion(content: str, criterion_id: str = "") -> AdvisoryOpinion:
    """
    Parse a JSON completion into an opinion.

    Raises:
        AdvisoryResponseError: If the content is not a JSON object
    """
    try:
        payload = json.loads(content)
    except json.JSONDecodeError as e:
        raise AdvisoryResponseError(
            message=f"Advisory response is not valid JSON: {e}",
            details={"criterion_id": criterion_id},
        ) from e

    if not isinstance(payload, dict):
        raise AdvisoryResponseError(
            message="Advisory response is not a JSON object",
            details={"criterion_id": criterion_id},
        )

    logger.debug("Advisory opinion for %s: %s", criterion_id, payload.get("status"),
                 extra={"criterion_id": criterion_id})
    return AdvisoryOpinion(
        status=payload.get("status"),
        argument=str(payload.get("argument") or ""),
        confidence=payload.get("confidence"),
    )
