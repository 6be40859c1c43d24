"""
CareCheck Evidence Models

Models for evidence links and evidence chains.

Key components:
- MatchResult: Relevance of one record to a claim
- EvidenceLink: A scored pointer from a claim to a dossier record
- EvidenceChain: Ranked, gap-annotated evidence for a single claim
- EvidenceQuality: Sufficiency verdict for a set of links

Links are produced per evaluation request and never persisted by the engine.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional

from .enums import SourceType


@dataclass(frozen=True)
class MatchResult:
    """Relevance score in [0, 1] with an optional explanation."""
    score: float
    reason: Optional[str] = None


@dataclass
class EvidenceLink:
    """
    A scored link from a claim to a dossier record.

    Attributes:
        source_type: Discriminator of the linked record
        source_id: ID of the linked record
        snippet: Excerpt shown to reviewers
        relevance: How well the record matches the claim (0-1)
        confidence: How reliable the record is (0-1)
        reason: Why the record matched
        target_path: Claim address (e.g., "meerzorg.dagzorg_uren")
    """
    source_type: SourceType
    source_id: str
    snippet: str
    relevance: float
    confidence: float
    reason: Optional[str] = None
    target_path: str = ""

    @property
    def quality(self) -> float:
        """Ranking key: relevance weighted by confidence."""
        return self.relevance * self.confidence

    @property
    def source_ref(self) -> str:
        """Stable reference string, e.g. "note:n-12"."""
        return f"{self.source_type.value}:{self.source_id}"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        result: dict[str, Any] = {
            "source_type": self.source_type.value,
            "source_id": self.source_id,
            "snippet": self.snippet,
            "relevance": self.relevance,
            "confidence": self.confidence,
        }
        if self.reason:
            result["reason"] = self.reason
        if self.target_path:
            result["target_path"] = self.target_path
        return result


@dataclass(frozen=True)
class EvidenceSource:
    """A resolved dossier record as it appears in an evidence chain."""
    type: SourceType
    id: str
    date: date
    text: str
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class ChainItem:
    """One ranked entry of an evidence chain."""
    level: int
    source: EvidenceSource
    relevance: float
    confidence: float
    snippet: str

    @property
    def quality(self) -> float:
        return self.relevance * self.confidence


@dataclass
class EvidenceChain:
    """
    Ranked, target-addressed evidence for one claim.

    overall_confidence is the best relevance x confidence among the items,
    or 0.0 for an empty chain. gaps lists what is missing, in a fixed order.
    """
    target: str
    claim: str
    evidence: list[ChainItem] = field(default_factory=list)
    overall_confidence: float = 0.0
    gaps: list[str] = field(default_factory=list)

    @property
    def has_gaps(self) -> bool:
        return len(self.gaps) > 0

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "target": self.target,
            "claim": self.claim,
            "evidence": [
                {
                    "level": item.level,
                    "source": {
                        "type": item.source.type.value,
                        "id": item.source.id,
                        "date": item.source.date.isoformat(),
                        "text": item.source.text,
                        "metadata": item.source.metadata,
                    },
                    "relevance": item.relevance,
                    "confidence": item.confidence,
                    "snippet": item.snippet,
                }
                for item in self.evidence
            ],
            "overall_confidence": self.overall_confidence,
            "gaps": list(self.gaps),
        }


@dataclass
class EvidenceQuality:
    """Whether the best available evidence is good enough for a claim."""
    sufficient: bool
    score: float
    issues: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)
