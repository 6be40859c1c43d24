"""
Tests for criterion evaluation: evidence search, the advisory path and the
keyword heuristic fallback.
"""
from __future__ import annotations

import asyncio
from datetime import date

import pytest

from carecheck.engine.criterion_evaluator import (
    UNCERTAINTY_HEURISTIC,
    UNCERTAINTY_NO_EVIDENCE,
    CriterionEvaluator,
    evaluate_criterion,
    heuristic_argument,
    heuristic_confidence,
    heuristic_criterion,
    heuristic_status,
)
from carecheck.models import (
    VV8_CRITERIA_2026,
    AdvisoryOpinion,
    CriterionStatus,
    EvaluationSource,
    EvidenceLink,
    Period,
    SourceType,
    get_criterion_definition,
)
from carecheck.store import InMemoryDossierStore

from tests.conftest import AS_OF, CLIENT_ID, make_client, make_measure, make_note


ADL = get_criterion_definition("ADL")
GEDRAG = get_criterion_definition("GEDRAG")
PERIOD = Period(date(2026, 1, 1), AS_OF)


# =============================================================================
# Fakes
# =============================================================================

class FixedAdvisory:
    """Returns the same opinion for every criterion."""

    def __init__(self, status, confidence=0.9, argument="Advies"):
        self.opinion = AdvisoryOpinion(status=status, argument=argument, confidence=confidence)
        self.calls = []

    async def evaluate(self, criterion, evidence, context_text):
        self.calls.append((criterion.id, len(evidence), context_text))
        return self.opinion


class FailingAdvisory:

    def __init__(self):
        self.calls = 0

    async def evaluate(self, criterion, evidence, context_text):
        self.calls += 1
        raise RuntimeError("service unavailable")


class SlowAdvisory:

    async def evaluate(self, criterion, evidence, context_text):
        await asyncio.sleep(5)
        return AdvisoryOpinion(status="voldoet", argument="te laat", confidence=0.9)


class RawAdvisory:
    """Returns an arbitrary value instead of an AdvisoryOpinion."""

    def __init__(self, value):
        self.value = value

    async def evaluate(self, criterion, evidence, context_text):
        return self.value


@pytest.fixture
def dossier() -> InMemoryDossierStore:
    store = InMemoryDossierStore()
    store.add_client(make_client())
    store.add_note(make_note(
        "Meer hulp nodig bij wassen en aankleden, ADL toegenomen",
        id="n-1", age_days=10,
    ))
    store.add_note(make_note(
        "Hulp bij wassen en aankleden, ADL zorg",
        id="n-old", age_days=200,
    ))
    store.add_measure(make_measure(type="Katz-ADL", score="F", id="m-1", age_days=20))
    return store


def _evaluate(evaluator: CriterionEvaluator, criterion=ADL):
    return asyncio.run(evaluator.evaluate(CLIENT_ID, criterion, PERIOD))


# =============================================================================
# Evidence Search
# =============================================================================

class TestFindEvidence:

    def test_only_records_in_period(self, dossier) -> None:
        evaluator = CriterionEvaluator(dossier, as_of=AS_OF)
        links = evaluator.find_evidence(CLIENT_ID, ADL, PERIOD)
        assert {link.source_ref for link in links} == {"note:n-1", "measure:m-1"}

    def test_links_addressed_to_criterion(self, dossier) -> None:
        links = CriterionEvaluator(dossier, as_of=AS_OF).find_evidence(CLIENT_ID, ADL, PERIOD)
        assert all(link.target_path == "criterion.ADL" for link in links)

    def test_max_evidence(self, dossier) -> None:
        links = CriterionEvaluator(dossier, as_of=AS_OF).find_evidence(CLIENT_ID, ADL, PERIOD, 1)
        assert len(links) == 1

    def test_unknown_client_has_no_evidence(self, dossier) -> None:
        evaluator = CriterionEvaluator(dossier, as_of=AS_OF)
        assert evaluator.find_evidence("C-404", ADL, PERIOD) == []


# =============================================================================
# Evaluation Paths
# =============================================================================

class TestEvaluate:

    def test_no_evidence_skips_advisory(self, dossier) -> None:
        advisory = FixedAdvisory("voldoet")
        result = _evaluate(CriterionEvaluator(dossier, advisory=advisory, as_of=AS_OF), GEDRAG)
        assert result.status == CriterionStatus.ONVOLDOENDE_BEWIJS
        assert result.confidence == 0.0
        assert result.evidence == []
        assert result.uncertainty == UNCERTAINTY_NO_EVIDENCE
        assert result.source == EvaluationSource.NO_EVIDENCE
        assert advisory.calls == []

    def test_advisory_opinion_used(self, dossier) -> None:
        advisory = FixedAdvisory("voldoet", confidence=0.85, argument="Stabiel beeld")
        result = _evaluate(CriterionEvaluator(dossier, advisory=advisory, as_of=AS_OF))
        assert result.status == CriterionStatus.VOLDOET
        assert result.confidence == pytest.approx(0.85)
        assert result.argument == "Stabiel beeld"
        assert result.source == EvaluationSource.ADVISORY
        assert result.uncertainty is None
        assert len(result.evidence) == 2

        criterion_id, evidence_count, context_text = advisory.calls[0]
        assert (criterion_id, evidence_count) == ("ADL", 2)
        assert context_text == "Client ID: C-001, Period: 2026-01-01 to 2026-03-15"

    def test_no_advisory_uses_heuristic(self, dossier) -> None:
        result = _evaluate(CriterionEvaluator(dossier, as_of=AS_OF))
        assert result.status == CriterionStatus.TOEGENOMEN_BEHOEFTE
        assert result.confidence == pytest.approx(0.65)
        assert result.uncertainty == UNCERTAINTY_HEURISTIC
        assert result.source == EvaluationSource.HEURISTIC

    def test_advisory_error_falls_back(self, dossier) -> None:
        advisory = FailingAdvisory()
        result = _evaluate(CriterionEvaluator(dossier, advisory=advisory, as_of=AS_OF))
        assert advisory.calls == 1
        assert result.source == EvaluationSource.HEURISTIC
        assert result.status == CriterionStatus.TOEGENOMEN_BEHOEFTE

    def test_advisory_timeout_falls_back(self, dossier) -> None:
        evaluator = CriterionEvaluator(
            dossier, advisory=SlowAdvisory(), advisory_timeout=0.01, as_of=AS_OF,
        )
        result = _evaluate(evaluator)
        assert result.source == EvaluationSource.HEURISTIC
        assert result.uncertainty == UNCERTAINTY_HEURISTIC

    @pytest.mark.parametrize("status,confidence", [
        ("misschien", 0.8),
        ("unknown", 0.8),
        ("onbekend", 0.8),
        (None, 0.8),
        ("voldoet", 1.5),
        ("voldoet", -0.1),
        ("voldoet", "hoog"),
        ("voldoet", True),
        ("voldoet", None),
    ])
    def test_malformed_opinion_falls_back(self, dossier, status, confidence) -> None:
        advisory = FixedAdvisory(status, confidence=confidence)
        result = _evaluate(CriterionEvaluator(dossier, advisory=advisory, as_of=AS_OF))
        assert result.source == EvaluationSource.HEURISTIC
        assert result.status != CriterionStatus.UNKNOWN

    @pytest.mark.parametrize("value", [
        None,
        {"status": "voldoet", "confidence": 0.9},
        "voldoet",
    ])
    def test_non_opinion_answer_falls_back(self, dossier, value) -> None:
        advisory = RawAdvisory(value)
        result = _evaluate(CriterionEvaluator(dossier, advisory=advisory, as_of=AS_OF))
        assert result.source == EvaluationSource.HEURISTIC
        assert result.status == CriterionStatus.TOEGENOMEN_BEHOEFTE

    def test_status_literal_normalized(self, dossier) -> None:
        advisory = FixedAdvisory(" Verslechterd ", confidence=1)
        result = _evaluate(CriterionEvaluator(dossier, advisory=advisory, as_of=AS_OF))
        assert result.status == CriterionStatus.VERSLECHTERD
        assert result.confidence == 1.0

    @pytest.mark.parametrize("advisory", [
        None,
        FixedAdvisory("unknown"),
        FixedAdvisory("onbekend"),
        FailingAdvisory(),
    ])
    def test_evidence_never_yields_unknown(self, dossier, advisory) -> None:
        evaluator = CriterionEvaluator(dossier, advisory=advisory, as_of=AS_OF)
        results = asyncio.run(evaluator.evaluate_all(CLIENT_ID, PERIOD))
        for result in results:
            if result.evidence:
                assert result.status != CriterionStatus.UNKNOWN


class TestEvaluateAll:

    def test_defaults_to_vv8_criteria_in_order(self, dossier) -> None:
        results = asyncio.run(CriterionEvaluator(dossier, as_of=AS_OF).evaluate_all(CLIENT_ID, PERIOD))
        assert [r.id for r in results] == [c.id for c in VV8_CRITERIA_2026]

    def test_selected_criteria(self, dossier) -> None:
        evaluator = CriterionEvaluator(dossier, as_of=AS_OF)
        results = asyncio.run(evaluator.evaluate_all(CLIENT_ID, PERIOD, [GEDRAG, ADL]))
        assert [r.id for r in results] == ["GEDRAG", "ADL"]
        assert results[0].status == CriterionStatus.ONVOLDOENDE_BEWIJS

    def test_one_advisory_call_per_criterion_with_evidence(self, dossier) -> None:
        advisory = FixedAdvisory("voldoet")
        evaluator = CriterionEvaluator(dossier, advisory=advisory, as_of=AS_OF)
        results = asyncio.run(evaluator.evaluate_all(CLIENT_ID, PERIOD))
        with_evidence = [r for r in results if r.evidence]
        assert len(advisory.calls) == len(with_evidence)

    def test_convenience_function(self, dossier) -> None:
        result = asyncio.run(evaluate_criterion(dossier, CLIENT_ID, ADL, PERIOD, as_of=AS_OF))
        assert result.id == "ADL"
        assert result.label == "ADL-afhankelijkheid"


# =============================================================================
# Heuristic
# =============================================================================

def _links(*snippets: str) -> list[EvidenceLink]:
    return [
        EvidenceLink(
            source_type=SourceType.NOTE,
            source_id=f"n-{i}",
            snippet=snippet,
            relevance=0.8,
            confidence=0.9,
        )
        for i, snippet in enumerate(snippets)
    ]


class TestHeuristic:

    @pytest.mark.parametrize("snippets,expected", [
        ((), CriterionStatus.ONVOLDOENDE_BEWIJS),
        (("Vaker onrustig in de avond",), CriterionStatus.TOEGENOMEN_BEHOEFTE),
        (("Situatie stabiel",), CriterionStatus.VOLDOET),
        (("Mobiliteit verbeterd", "Maar vaker gevallen"), CriterionStatus.VERSLECHTERD),
        (("Loopt met rollator",), CriterionStatus.VERSLECHTERD),
    ])
    def test_status(self, snippets, expected) -> None:
        assert heuristic_status(_links(*snippets)) == expected

    @pytest.mark.parametrize("count,expected", [(0, 0.0), (1, 0.5), (2, 0.65), (3, 0.75), (7, 0.75)])
    def test_confidence(self, count, expected) -> None:
        assert heuristic_confidence(count) == pytest.approx(expected)

    def test_argument_quotes_two_snippets(self) -> None:
        argument = heuristic_argument(ADL, _links("Eerste", "Tweede", "Derde"))
        assert argument.startswith("Op basis van recente observaties: Eerste. Tweede.")
        assert "Derde" not in argument

    def test_criterion_without_evidence(self) -> None:
        result = heuristic_criterion(ADL, [])
        assert result.status == CriterionStatus.ONVOLDOENDE_BEWIJS
        assert result.source == EvaluationSource.NO_EVIDENCE
        assert result.argument == "Geen recente observaties gevonden voor ADL-afhankelijkheid."

    def test_to_dict(self) -> None:
        data = heuristic_criterion(ADL, _links("Meer hulp bij eten")).to_dict()
        assert data["status"] == "toegenomen_behoefte"
        assert data["source"] == "heuristic"
        assert data["uncertainty"] == UNCERTAINTY_HEURISTIC
        assert data["evidence"][0]["source_id"] == "n-0"
