"""
CareCheck Built-in Rules

Normative check rules for the meerzorg, vv8 and toetsingskader frameworks,
and the rule sets that bind them to framework versions.

Rule sets:
- meerzorg (any version): client info, care hours, ADL assessment, BPSD
  documentation, night care justification, incident threshold, specialist
  report, recent assessment, care plan
- meerzorg 2026: the above plus sustainability
- vv8: all eight criteria assessed, evidence present
- toetsingskader: data quality

Predicates are pure: they read the CheckContext and return a RuleOutcome.
A predicate that cannot interpret the form data raises ValueError; the check
engine records that as a failed check.
"""
from __future__ import annotations

import calendar
from datetime import date
from typing import Any

from ..models import (
    VV8_CRITERIA_2026,
    CheckCategory,
    CheckContext,
    FrameworkType,
    RuleOutcome,
    Severity,
)
from .rule_registry import RuleRegistry


# =============================================================================
# Helpers
# =============================================================================

def _present(form_data: dict[str, Any], key: str) -> bool:
    return form_data.get(key) is not None


def parse_hours(form_data: dict[str, Any], key: str) -> float:
    """
    Read an hours field as a number. Missing or empty means 0.

    Raises:
        ValueError: If the value is not numeric
    """
    raw = form_data.get(key)
    if raw is None or raw == "":
        return 0.0
    if isinstance(raw, bool):
        raise ValueError(f"Ongeldige waarde voor {key}: {raw!r}")
    try:
        return float(raw)
    except (TypeError, ValueError):
        raise ValueError(f"Ongeldige waarde voor {key}: {raw!r}") from None


def months_before(reference: date, months: int) -> date:
    """Same day of month, `months` earlier (clamped to the month's length)."""
    month_index = reference.year * 12 + reference.month - 1 - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(reference.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def _notes_mention(ctx: CheckContext, *terms: str) -> bool:
    return any(
        any(term in (note.text or "").lower() for term in terms)
        for note in ctx.notes
    )


# =============================================================================
# Meerzorg Rules
# =============================================================================

def client_info_complete(ctx: CheckContext) -> RuleOutcome:
    missing: list[str] = []
    if not ctx.client.name:
        missing.append("naam")
    if not ctx.client.dob:
        missing.append("geboortedatum")
    if not ctx.client.wlz_profile:
        missing.append("WLZ profiel")

    if missing:
        return RuleOutcome.failed(
            f"Ontbrekende gegevens: {', '.join(missing)}",
            {"missing": missing},
        )
    return RuleOutcome.ok("Cliëntgegevens compleet")


def care_hours_documented(ctx: CheckContext) -> RuleOutcome:
    if _present(ctx.form_data, "dagzorg_uren") or _present(ctx.form_data, "nachtzorg_uren"):
        return RuleOutcome.ok("Zorguren gedocumenteerd")
    return RuleOutcome.failed("Geen dag- of nachtzorguren vastgelegd")


def adl_assessment(ctx: CheckContext) -> RuleOutcome:
    has_measure = any(
        "adl" in m.type.lower() or "katz" in m.type.lower()
        for m in ctx.measures
    )
    if has_measure or _present(ctx.form_data, "adl_score"):
        return RuleOutcome.ok("ADL beoordeling aanwezig")
    return RuleOutcome.failed("Geen ADL beoordeling gevonden in metingen of formulier")


def bpsd_documented(ctx: CheckContext) -> RuleOutcome:
    if ctx.form_data.get("gedragsproblematiek") != "ja":
        return RuleOutcome.ok("Geen gedragsproblematiek gemeld")
    if _notes_mention(ctx, "bpsd", "gedrag", "agressie"):
        return RuleOutcome.ok("Gedragsproblematiek gedocumenteerd")
    return RuleOutcome.failed(
        "Gedragsproblematiek gemeld maar onvoldoende gedocumenteerd in notities"
    )


def night_care_justification(ctx: CheckContext) -> RuleOutcome:
    if parse_hours(ctx.form_data, "nachtzorg_uren") == 0:
        return RuleOutcome.ok("Geen nachtzorg aangevraagd")
    if _notes_mention(ctx, "nacht"):
        return RuleOutcome.ok("Nachtzorg voldoende onderbouwd")
    return RuleOutcome.failed("Nachtzorg aangevraagd maar onvoldoende onderbouwd in notities")


INCIDENT_COUNT_THRESHOLD = 10
SEVERE_INCIDENT_THRESHOLD = 3


def incident_threshold(ctx: CheckContext) -> RuleOutcome:
    total = len(ctx.incidents)
    severe = sum(
        1 for i in ctx.incidents
        if (i.severity or "").lower() in {"hoog", "ernstig"}
    )
    if total < INCIDENT_COUNT_THRESHOLD and severe < SEVERE_INCIDENT_THRESHOLD:
        return RuleOutcome.ok("Incidentdruk binnen normale grenzen")

    details = {"total": total, "severe": severe}
    if _present(ctx.form_data, "incident_onderbouwing"):
        return RuleOutcome.ok("Hoog aantal incidenten gedocumenteerd", details)
    return RuleOutcome.failed(
        f"Hoog aantal incidenten ({total} totaal, {severe} ernstig) vereist extra onderbouwing",
        details,
    )


def specialist_report(ctx: CheckContext) -> RuleOutcome:
    severe_bpsd = ctx.form_data.get("gedragsproblematiek_ernst") in {"ernstig", "severe"}
    high_care_need = (
        parse_hours(ctx.form_data, "een_op_een_uren") > 0
        or parse_hours(ctx.form_data, "nachtzorg_uren") > 8
    )
    if not severe_bpsd and not high_care_need:
        return RuleOutcome.ok("Geen specialistisch rapport vereist")
    if _notes_mention(ctx, "psychiater", "geriater", "specialist"):
        return RuleOutcome.ok("Specialistisch rapport aanwezig")
    return RuleOutcome.failed(
        "Ernstige problematiek of hoge zorgbehoefte vereist specialistisch rapport"
    )


def recent_assessment(ctx: CheckContext) -> RuleOutcome:
    if not ctx.measures:
        return RuleOutcome.failed("Geen metingen beschikbaar")

    cutoff = months_before(ctx.reference_date, 3)
    recent = [m for m in ctx.measures if m.date >= cutoff]
    if recent:
        return RuleOutcome.ok(f"{len(recent)} recente meting(en) gevonden")
    return RuleOutcome.failed("Geen metingen van de laatste 3 maanden")


def care_plan_present(ctx: CheckContext) -> RuleOutcome:
    has_plan = any(
        "plan" in (n.section or "").lower()
        or "doel" in (n.text or "").lower()
        or "interventie" in (n.text or "").lower()
        for n in ctx.notes
    )
    if has_plan:
        return RuleOutcome.ok("Zorgplan gedocumenteerd")
    return RuleOutcome.failed("Geen zorgplan of doelen/interventies gevonden")


def sustainability_2026(ctx: CheckContext) -> RuleOutcome:
    if _notes_mention(ctx, "duurza", "blijvend", "structureel"):
        return RuleOutcome.ok("Duurzaamheid onderbouwd")
    return RuleOutcome.failed("2026 framework vereist onderbouwing van duurzame zorgbehoefte")


# =============================================================================
# VV8 Rules
# =============================================================================

VV8_REQUIRED_CRITERIA = tuple(c.id for c in VV8_CRITERIA_2026)


def vv8_criteria_complete(ctx: CheckContext) -> RuleOutcome:
    missing = [c for c in VV8_REQUIRED_CRITERIA if not _present(ctx.form_data, c)]
    if missing:
        return RuleOutcome.failed(
            f"Ontbrekende criteria: {', '.join(missing)}",
            {"missing": missing},
        )
    return RuleOutcome.ok("Alle VV8 criteria beoordeeld")


def vv8_evidence_present(ctx: CheckContext) -> RuleOutcome:
    if ctx.notes or ctx.measures:
        return RuleOutcome.ok("Bewijs aanwezig in notities en/of metingen")
    return RuleOutcome.failed("Geen bewijs (notities of metingen) gevonden")


# =============================================================================
# Toetsingskader Rules
# =============================================================================

def data_quality(ctx: CheckContext) -> RuleOutcome:
    issues: list[str] = []
    cutoff = months_before(ctx.reference_date, 12)
    if ctx.notes and all(n.date < cutoff for n in ctx.notes):
        issues.append("alle notities zijn ouder dan 1 jaar")

    if issues:
        return RuleOutcome.failed(f"Kwaliteitsissues: {'; '.join(issues)}")
    return RuleOutcome.ok("Data kwaliteit OK")


# =============================================================================
# Registration
# =============================================================================

MEERZORG_BASE_RULES = (
    "meerzorg_client_info_complete",
    "meerzorg_care_hours_documented",
    "meerzorg_adl_assessment",
    "meerzorg_bpsd_documented",
    "meerzorg_night_care_justification",
    "meerzorg_incident_threshold",
    "meerzorg_specialist_report",
    "meerzorg_recent_assessment",
    "meerzorg_care_plan_present",
)

MEERZORG_2026_RULES = MEERZORG_BASE_RULES + ("meerzorg_2026_sustainability",)

VV8_RULES = ("vv8_criteria_complete", "vv8_evidence_present")

TOETSINGSKADER_RULES = ("toets_data_quality",)


def register_builtin_rules(registry: RuleRegistry) -> RuleRegistry:
    """Register all built-in rules and rule sets on a registry."""
    rule = registry.rule

    rule("meerzorg_client_info_complete", "Cliëntgegevens compleet",
         "Controleer of basis cliëntgegevens aanwezig zijn",
         CheckCategory.REQUIRED_FIELD, Severity.CRITICAL)(client_info_complete)
    rule("meerzorg_care_hours_documented", "Zorguren gedocumenteerd",
         "Controleer of zorguren zijn vastgelegd",
         CheckCategory.REQUIRED_FIELD, Severity.HIGH)(care_hours_documented)
    rule("meerzorg_adl_assessment", "ADL beoordeling aanwezig",
         "Controleer of ADL beoordeling is uitgevoerd",
         CheckCategory.TOETSINGSKADER_RULE, Severity.HIGH)(adl_assessment)
    rule("meerzorg_bpsd_documented", "Gedragsproblematiek gedocumenteerd",
         "Bij gedragsproblematiek: documentatie vereist",
         CheckCategory.TOETSINGSKADER_RULE, Severity.MEDIUM)(bpsd_documented)
    rule("meerzorg_night_care_justification", "Nachtzorg onderbouwing",
         "Nachtzorg vereist specifieke onderbouwing",
         CheckCategory.TOETSINGSKADER_RULE, Severity.HIGH)(night_care_justification)
    rule("meerzorg_incident_threshold", "Incident drempelwaarde",
         "Hoog aantal incidenten vereist extra aandacht",
         CheckCategory.CONSISTENCY, Severity.MEDIUM)(incident_threshold)
    rule("meerzorg_specialist_report", "Specialistisch rapport",
         "Bij ernstige problematiek: specialistisch rapport vereist",
         CheckCategory.TOETSINGSKADER_RULE, Severity.HIGH)(specialist_report)
    rule("meerzorg_recent_assessment", "Recente beoordeling",
         "Metingen moeten recent zijn (< 3 maanden)",
         CheckCategory.COMPLETENESS, Severity.MEDIUM)(recent_assessment)
    rule("meerzorg_care_plan_present", "Zorgplan aanwezig",
         "Zorgplan met doelen en interventies moet aanwezig zijn",
         CheckCategory.COMPLETENESS, Severity.MEDIUM)(care_plan_present)
    rule("meerzorg_2026_sustainability", "Duurzaamheid aanvraag (2026)",
         "Voor 2026: onderbouwing duurzaamheid zorgbehoefte",
         CheckCategory.TOETSINGSKADER_RULE, Severity.MEDIUM)(sustainability_2026)

    rule("vv8_criteria_complete", "VV8 criteria compleet",
         "Alle 8 VV8 criteria moeten beoordeeld zijn",
         CheckCategory.COMPLETENESS, Severity.CRITICAL)(vv8_criteria_complete)
    rule("vv8_evidence_present", "Bewijs aanwezig",
         "Elke criterium moet onderbouwd zijn met bewijs",
         CheckCategory.TOETSINGSKADER_RULE, Severity.HIGH)(vv8_evidence_present)

    rule("toets_data_quality", "Data kwaliteit",
         "Basiscontrole op data kwaliteit en consistentie",
         CheckCategory.CONSISTENCY, Severity.LOW)(data_quality)

    registry.define_rule_set(FrameworkType.MEERZORG, None, MEERZORG_BASE_RULES)
    registry.define_rule_set(FrameworkType.MEERZORG, "2025", MEERZORG_BASE_RULES)
    registry.define_rule_set(FrameworkType.MEERZORG, "2026", MEERZORG_2026_RULES)
    registry.define_rule_set(FrameworkType.VV8, None, VV8_RULES)
    registry.define_rule_set(FrameworkType.TOETSINGSKADER, None, TOETSINGSKADER_RULES)

    return registry


def create_default_registry() -> RuleRegistry:
    """A new registry holding the built-in rules."""
    return register_builtin_rules(RuleRegistry())
