"""
CareCheck Evidence Matcher

Keyword-based relevance scoring of dossier records against a claim.

Key features:
- match_text: Fraction of keywords found in a text
- match_measure: Structured match of a measurement against a form field
- extract_keywords: Keywords for a form field and its value
- extract_snippet / format_measure_snippet: Excerpts shown to reviewers

Matching is plain case-insensitive substring search. Records scoring at or
below RELEVANCE_THRESHOLD are not linked.
"""
from __future__ import annotations

import re
from typing import Any, Callable, Optional

from ..models import Measure, MatchResult


# =============================================================================
# Constants
# =============================================================================

RELEVANCE_THRESHOLD = 0.3

STOP_WORDS = frozenset({"de", "het", "een", "van", "is", "in", "op", "en", "met"})

# Domain vocabulary by field-name substring; the first matching entry wins
DOMAIN_KEYWORDS: tuple[tuple[Callable[[str], bool], tuple[str, ...]], ...] = (
    (lambda f: "adl" in f or "zelfzorg" in f, (
        "adl", "katz", "zelfzorg", "wassen", "aankleden", "toiletgang", "mobiliteit",
    )),
    (lambda f: "bpsd" in f or "gedrag" in f, (
        "bpsd", "gedrag", "agressie", "dwalen", "onrust", "apathie", "agitatie",
    )),
    (lambda f: "nacht" in f, (
        "nacht", "nachtzorg", "slapen", "insomnia", "nachtelijke", "toezicht",
    )),
    (lambda f: "zorg" in f and "uren" in f, (
        "zorguren", "uren", "dagzorg", "nachtzorg", "begeleiding", "toezicht",
    )),
    (lambda f: "incident" in f, (
        "incident", "val", "medicatie", "agressie", "dwaling", "ongeluk",
    )),
)

_TOKEN_SPLIT = re.compile(r"[_\s-]+")

SNIPPET_BEFORE = 50
MAX_SNIPPET_LENGTH = 200
MAX_REASON_KEYWORDS = 3


# =============================================================================
# Matching
# =============================================================================

def match_text(text: str, keywords: list[str]) -> MatchResult:
    """
    Score a text by the fraction of keywords it contains.

    Args:
        text: Text to search
        keywords: Keywords to look for (case-insensitive substrings)

    Returns:
        MatchResult with score in [0, 1]; reason lists up to three matches
    """
    if not keywords:
        return MatchResult(score=0.0)

    lower_text = (text or "").lower()
    matched = [kw for kw in keywords if kw.lower() in lower_text]
    score = len(matched) / len(keywords)

    reason = None
    if matched:
        reason = f"Matched keywords: {', '.join(matched[:MAX_REASON_KEYWORDS])}"
    return MatchResult(score=score, reason=reason)


def match_measure(measure: Measure, field_name: Optional[str], value: Any) -> MatchResult:
    """
    Score a measurement against a form field and value.

    Scoring:
        1.0  field and measure type contain one another
        0.9  ADL family (field mentions adl, type is adl or katz)
        0.8  measure score equals the value literally
        0.0  otherwise

    An empty field never produces a direct match.
    """
    field_lower = (field_name or "").lower()
    type_lower = (measure.type or "").lower()

    if field_lower and type_lower and (field_lower in type_lower or type_lower in field_lower):
        return MatchResult(score=1.0, reason=f"Direct match: {measure.type}")

    if "adl" in field_lower and ("adl" in type_lower or "katz" in type_lower):
        return MatchResult(score=0.9, reason="ADL measurement match")

    if value is not None and str(measure.score) == str(value):
        return MatchResult(score=0.8, reason=f"Score match: {measure.score}")

    return MatchResult(score=0.0)


def is_relevant(result: MatchResult) -> bool:
    """Check if a match clears the relevance threshold."""
    return result.score > RELEVANCE_THRESHOLD


# =============================================================================
# Keyword Extraction
# =============================================================================

def tokenize(text: str) -> list[str]:
    """Lowercase and split on underscores, whitespace and hyphens."""
    return [t for t in _TOKEN_SPLIT.split((text or "").lower()) if t]


def extract_keywords(field_name: Optional[str], value: Any = None) -> list[str]:
    """
    Derive search keywords for a form field and its value.

    Includes the field name tokens, value words longer than two characters
    (or the number itself), and domain vocabulary selected by field-name
    substrings. Stop words and single characters are dropped; duplicates
    are kept.
    """
    field_lower = (field_name or "").lower()
    keywords = tokenize(field_lower)

    if isinstance(value, bool):
        pass
    elif isinstance(value, str):
        keywords.extend(w for w in value.lower().split() if len(w) > 2)
    elif isinstance(value, (int, float)):
        keywords.append(str(value))

    for applies, vocabulary in DOMAIN_KEYWORDS:
        if applies(field_lower):
            keywords.extend(vocabulary)
            break

    return [kw for kw in keywords if kw not in STOP_WORDS and len(kw) > 1]


def keywords_from_query(query: str) -> list[str]:
    """Keywords for a free-text search query."""
    return [kw for kw in tokenize(query) if kw not in STOP_WORDS and len(kw) > 1]


# =============================================================================
# Snippets
# =============================================================================

def extract_snippet(text: str, keywords: list[str], max_length: int = MAX_SNIPPET_LENGTH) -> str:
    """
    Excerpt of a text around the first keyword that occurs in it.

    Keywords are tried in order. The window starts 50 characters before the
    match and spans max_length characters, with "..." marking truncated edges.
    Without a match, the first max_length characters are returned.
    """
    text = text or ""
    lower_text = text.lower()

    for keyword in keywords:
        idx = lower_text.find(keyword.lower())
        if idx == -1:
            continue
        start = max(0, idx - SNIPPET_BEFORE)
        end = min(len(text), idx + max_length - SNIPPET_BEFORE)
        snippet = text[start:end]
        if start > 0:
            snippet = "..." + snippet
        if end < len(text):
            snippet = snippet + "..."
        return snippet.strip()

    if len(text) > max_length:
        return text[:max_length] + "..."
    return text


def format_measure_snippet(measure: Measure) -> str:
    """Render a measurement as "{type}: {score} ({date}) - comment"."""
    snippet = f"{measure.type}: {measure.score} ({measure.date.isoformat()})"
    if measure.comment:
        snippet += f" - {measure.comment}"
    return snippet
