"""
Tests for the evidence matcher: keyword matching, measure matching,
keyword extraction and snippets.
"""
from __future__ import annotations

import pytest

from carecheck.engine.matcher import (
    extract_keywords,
    extract_snippet,
    format_measure_snippet,
    is_relevant,
    keywords_from_query,
    match_measure,
    match_text,
    tokenize,
)
from carecheck.models import MatchResult

from tests.conftest import days_ago, make_measure


class TestMatchText:

    def test_score_is_fraction_of_keywords_found(self) -> None:
        result = match_text(
            "Cliënt heeft hulp nodig bij wassen en aankleden",
            ["wassen", "aankleden", "katz", "adl"],
        )
        assert result.score == pytest.approx(0.5)
        assert result.reason == "Matched keywords: wassen, aankleden"

    def test_matching_is_case_insensitive(self) -> None:
        result = match_text("KATZ-ADL afgenomen", ["katz", "ADL"])
        assert result.score == pytest.approx(1.0)

    def test_reason_lists_at_most_three_keywords(self) -> None:
        result = match_text("wassen aankleden toiletgang mobiliteit", [
            "wassen", "aankleden", "toiletgang", "mobiliteit",
        ])
        assert result.reason == "Matched keywords: wassen, aankleden, toiletgang"

    def test_empty_keywords_scores_zero(self) -> None:
        result = match_text("wat dan ook", [])
        assert result.score == 0.0
        assert result.reason is None

    def test_no_match_has_no_reason(self) -> None:
        result = match_text("Rustige dag gehad", ["agressie"])
        assert result.score == 0.0
        assert result.reason is None


class TestMatchMeasure:

    def test_direct_type_match(self) -> None:
        result = match_measure(make_measure(type="NPI"), "npi", None)
        assert result.score == 1.0
        assert result.reason == "Direct match: NPI"

    def test_field_contained_in_type(self) -> None:
        result = match_measure(make_measure(type="Katz-ADL"), "katz", None)
        assert result.score == 1.0

    def test_adl_family_match(self) -> None:
        result = match_measure(make_measure(type="Katz-ADL"), "adl_score", None)
        assert result.score == pytest.approx(0.9)
        assert result.reason == "ADL measurement match"

    def test_score_match(self) -> None:
        result = match_measure(make_measure(type="MMSE", score=18), "cognitie", "18")
        assert result.score == pytest.approx(0.8)
        assert result.reason == "Score match: 18"

    def test_empty_field_never_matches_directly(self) -> None:
        result = match_measure(make_measure(type="Katz-ADL"), None, None)
        assert result.score == 0.0

    def test_unrelated_measure_scores_zero(self) -> None:
        result = match_measure(make_measure(type="Gewicht", score=62), "nachtzorg_uren", 4)
        assert result.score == 0.0


class TestRelevance:

    def test_threshold_is_exclusive(self) -> None:
        assert not is_relevant(MatchResult(score=0.3))
        assert is_relevant(MatchResult(score=0.31))


class TestKeywordExtraction:

    def test_tokenize_splits_on_separators(self) -> None:
        assert tokenize("Dag_zorg-uren totaal") == ["dag", "zorg", "uren", "totaal"]

    def test_adl_field_adds_adl_vocabulary(self) -> None:
        keywords = extract_keywords("adl_score", "zware zorg")
        assert keywords[:4] == ["adl", "score", "zware", "zorg"]
        assert "katz" in keywords
        assert "wassen" in keywords

    def test_first_matching_vocabulary_wins(self) -> None:
        keywords = extract_keywords("nachtzorg_uren", 12)
        assert "12" in keywords
        assert "slapen" in keywords
        # the care-hours vocabulary is not added as well
        assert "dagzorg" not in keywords

    def test_stop_words_and_short_words_dropped(self) -> None:
        keywords = extract_keywords("opmerking", "de cliënt is van slag")
        assert keywords == ["opmerking", "cliënt", "slag"]

    def test_boolean_value_ignored(self) -> None:
        assert extract_keywords("opmerking", True) == ["opmerking"]

    def test_duplicates_are_kept(self) -> None:
        keywords = extract_keywords("adl", None)
        assert keywords.count("adl") == 2

    def test_keywords_from_query(self) -> None:
        assert keywords_from_query("Hulp bij de ADL") == ["hulp", "bij", "adl"]


class TestSnippets:

    def test_short_text_returned_whole(self) -> None:
        text = "Hulp bij wassen in de ochtend"
        assert extract_snippet(text, ["wassen"]) == text

    def test_long_text_windowed_around_keyword(self) -> None:
        text = "x" * 100 + " wassen " + "y" * 300
        snippet = extract_snippet(text, ["wassen"])
        assert snippet.startswith("...")
        assert snippet.endswith("...")
        assert "wassen" in snippet
        assert len(snippet) == 200 + 6

    def test_first_keyword_found_is_used(self) -> None:
        text = "a" * 300 + " slapen"
        snippet = extract_snippet(text, ["agressie", "slapen"])
        assert snippet.endswith("slapen")

    def test_no_match_truncates_from_start(self) -> None:
        text = "z" * 250
        assert extract_snippet(text, ["wassen"]) == "z" * 200 + "..."

    def test_measure_snippet(self) -> None:
        measure = make_measure(type="Katz-ADL", score="F", age_days=10, comment="zwaar zorgafhankelijk")
        expected = f"Katz-ADL: F ({days_ago(10).isoformat()}) - zwaar zorgafhankelijk"
        assert format_measure_snippet(measure) == expected

    def test_measure_snippet_without_comment(self) -> None:
        measure = make_measure(type="NPI", score=24, age_days=0)
        assert format_measure_snippet(measure) == f"NPI: 24 ({days_ago(0).isoformat()})"
