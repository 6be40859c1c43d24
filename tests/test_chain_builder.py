"""
Tests for evidence chain construction and gap detection.
"""
from __future__ import annotations

import pytest

from carecheck.engine.chain_builder import (
    GAP_LOW_CONFIDENCE,
    GAP_NO_EVIDENCE,
    GAP_NO_PROFESSIONAL,
    GAP_SINGLE_SOURCE,
    GAP_STALE,
    build_evidence_chain,
    to_evidence_source,
)
from carecheck.engine.linker import link_evidence
from carecheck.models import EvidenceLink, SourceType

from tests.conftest import make_context, make_incident, make_measure, make_note


def _link(source_type: SourceType, source_id: str, relevance: float, confidence: float) -> EvidenceLink:
    return EvidenceLink(
        source_type=source_type,
        source_id=source_id,
        snippet=f"snippet {source_id}",
        relevance=relevance,
        confidence=confidence,
    )


class TestBuildEvidenceChain:

    def test_empty_evidence_reports_missing_evidence_only(self) -> None:
        chain = build_evidence_chain("meerzorg.adl_score", "ADL score F", [], make_context())
        assert chain.evidence == []
        assert chain.overall_confidence == 0.0
        assert chain.gaps == [GAP_NO_EVIDENCE]
        assert chain.has_gaps

    def test_single_item_confidence_is_its_quality(self) -> None:
        context = make_context(notes=[make_note("Hulp bij wassen", id="n-1", author="Dr. Jansen")])
        chain = build_evidence_chain(
            "meerzorg.zorgbehoefte", "Hulp bij wassen",
            [_link(SourceType.NOTE, "n-1", 0.8, 0.9)], context,
        )
        assert chain.overall_confidence == pytest.approx(0.72)
        assert chain.gaps == [GAP_SINGLE_SOURCE]

    def test_items_ranked_and_numbered(self) -> None:
        context = make_context(
            notes=[make_note("a", id="n-1"), make_note("b", id="n-2")],
            measures=[make_measure(id="m-1")],
        )
        links = [
            _link(SourceType.NOTE, "n-1", 0.5, 0.9),
            _link(SourceType.MEASURE, "m-1", 0.9, 1.0),
            _link(SourceType.NOTE, "n-2", 0.7, 0.9),
        ]
        chain = build_evidence_chain("meerzorg.adl_score", "ADL score F", links, context)
        assert [item.source.id for item in chain.evidence] == ["m-1", "n-2", "n-1"]
        assert [item.level for item in chain.evidence] == [1, 2, 3]
        assert chain.overall_confidence == pytest.approx(0.9)
        assert chain.gaps == []

    def test_unresolved_links_are_dropped(self) -> None:
        context = make_context(notes=[make_note("a", id="n-1")])
        links = [
            _link(SourceType.NOTE, "n-1", 0.8, 0.9),
            _link(SourceType.INCIDENT, "i-missing", 0.9, 0.9),
        ]
        chain = build_evidence_chain("meerzorg.gedrag", "claim", links, context)
        assert [item.source.id for item in chain.evidence] == ["n-1"]

    def test_chain_from_linker(self) -> None:
        context = make_context(
            notes=[make_note("Hulp bij wassen en aankleden, ADL afhankelijk", id="n-1")],
            measures=[make_measure(type="Katz-ADL", score="F", id="m-1")],
            field_name="adl_score",
            value="F",
        )
        links = link_evidence(context, "meerzorg.adl_score")
        chain = build_evidence_chain("meerzorg.adl_score", "ADL score F", links, context)
        assert len(chain.evidence) == len(links)
        assert chain.evidence[0].source.type == SourceType.MEASURE
        assert chain.to_dict()["evidence"][0]["source"]["type"] == "measure"


class TestGaps:

    def test_low_confidence_gap(self) -> None:
        context = make_context(notes=[make_note("a", id="n-1"), make_note("b", id="n-2")])
        links = [
            _link(SourceType.NOTE, "n-1", 0.9, 0.4),
            _link(SourceType.NOTE, "n-2", 0.9, 0.3),
        ]
        chain = build_evidence_chain("meerzorg.zorgbehoefte", "claim", links, context)
        assert chain.gaps == [GAP_LOW_CONFIDENCE]

    def test_stale_gap(self) -> None:
        context = make_context(notes=[
            make_note("a", id="n-1", age_days=200),
            make_note("b", id="n-2", age_days=250),
        ])
        links = [
            _link(SourceType.NOTE, "n-1", 0.9, 0.8),
            _link(SourceType.NOTE, "n-2", 0.9, 0.8),
        ]
        chain = build_evidence_chain("meerzorg.zorgbehoefte", "claim", links, context)
        assert chain.gaps == [GAP_STALE]

    def test_clinical_claim_without_professional(self) -> None:
        context = make_context(notes=[
            make_note("a", id="n-1", author="Verzorgende"),
            make_note("b", id="n-2", author="A. de Boer, verpleegkundige"),
        ])
        links = [
            _link(SourceType.NOTE, "n-1", 0.9, 0.9),
            _link(SourceType.NOTE, "n-2", 0.9, 0.9),
        ]
        chain = build_evidence_chain("meerzorg.bpsd_ernst", "claim", links, context)
        assert chain.gaps == [GAP_NO_PROFESSIONAL]

    def test_measure_counts_as_professional_assessment(self) -> None:
        context = make_context(
            notes=[make_note("a", id="n-1")],
            measures=[make_measure(id="m-1")],
        )
        links = [
            _link(SourceType.NOTE, "n-1", 0.9, 0.9),
            _link(SourceType.MEASURE, "m-1", 0.9, 0.9),
        ]
        chain = build_evidence_chain("meerzorg.adl_score", "claim", links, context)
        assert GAP_NO_PROFESSIONAL not in chain.gaps

    def test_gaps_in_fixed_order(self) -> None:
        context = make_context(notes=[make_note("a", id="n-1", age_days=400)])
        chain = build_evidence_chain(
            "meerzorg.adl_score", "claim",
            [_link(SourceType.NOTE, "n-1", 0.9, 0.3)], context,
        )
        assert chain.gaps == [
            GAP_LOW_CONFIDENCE,
            GAP_STALE,
            GAP_SINGLE_SOURCE,
            GAP_NO_PROFESSIONAL,
        ]


class TestEvidenceSource:

    def test_note_source(self) -> None:
        note = make_note("Tekst", id="n-1", author="Dr. Jansen", section="Medisch")
        source = to_evidence_source(note)
        assert source.type == SourceType.NOTE
        assert source.text == "Tekst"
        assert source.metadata == {"author": "Dr. Jansen", "section": "Medisch"}

    def test_measure_source(self) -> None:
        source = to_evidence_source(make_measure(type="NPI", score=24, id="m-9"))
        assert source.text == "NPI: 24"
        assert source.metadata == {"type": "NPI", "score": 24}

    def test_incident_source(self) -> None:
        source = to_evidence_source(make_incident("Val", id="i-2", severity="Hoog"))
        assert source.type == SourceType.INCIDENT
        assert source.metadata == {"type": "Val", "severity": "Hoog"}
