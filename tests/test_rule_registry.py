"""
Tests for the rule registry and the built-in rule sets.
"""
from __future__ import annotations

from datetime import date

import pytest

from carecheck.engine.builtin_rules import (
    MEERZORG_2026_RULES,
    MEERZORG_BASE_RULES,
    TOETSINGSKADER_RULES,
    VV8_RULES,
    months_before,
    parse_hours,
)
from carecheck.engine.rule_registry import RuleRegistry
from carecheck.exceptions import RuleRegistrationError, UnknownRuleError
from carecheck.models import (
    CheckCategory,
    CheckRule,
    FrameworkType,
    RuleOutcome,
    Severity,
)


def _rule(rule_id: str) -> CheckRule:
    return CheckRule(
        id=rule_id,
        name=rule_id,
        description="",
        category=CheckCategory.COMPLETENESS,
        severity=Severity.LOW,
    )


class TestRegistration:

    def test_decorator_registers_descriptor_and_predicate(self) -> None:
        registry = RuleRegistry()

        @registry.rule("demo", "Demo", "Always passes", CheckCategory.COMPLETENESS, Severity.LOW)
        def demo(ctx):
            return RuleOutcome.ok("ok")

        assert "demo" in registry
        assert registry.get_rule("demo").name == "Demo"
        assert registry.get_predicate("demo") is demo

    def test_duplicate_id_rejected(self) -> None:
        registry = RuleRegistry()
        registry.register(_rule("a"))
        with pytest.raises(RuleRegistrationError):
            registry.register(_rule("a"))

    def test_empty_id_rejected(self) -> None:
        with pytest.raises(RuleRegistrationError):
            RuleRegistry().register(_rule(""))

    def test_descriptor_without_predicate(self) -> None:
        registry = RuleRegistry()
        registry.register(_rule("a"))
        assert registry.has_rule("a")
        assert registry.get_predicate("a") is None

    def test_rule_set_with_unknown_id_rejected(self) -> None:
        registry = RuleRegistry()
        registry.register(_rule("a"))
        with pytest.raises(UnknownRuleError) as exc_info:
            registry.define_rule_set(FrameworkType.VV8, None, ["a", "b"])
        assert exc_info.value.details["unknown_rule_ids"] == ["b"]


class TestRuleSetLookup:

    def test_version_specific_set(self) -> None:
        registry = RuleRegistry()
        for rid in ("a", "b"):
            registry.register(_rule(rid))
        registry.define_rule_set(FrameworkType.MEERZORG, None, ["a"])
        registry.define_rule_set(FrameworkType.MEERZORG, "2026", ["a", "b"])
        assert registry.rule_ids_for(FrameworkType.MEERZORG, "2026") == ("a", "b")

    def test_falls_back_to_type_default(self) -> None:
        registry = RuleRegistry()
        registry.register(_rule("a"))
        registry.define_rule_set(FrameworkType.MEERZORG, None, ["a"])
        assert registry.rule_ids_for(FrameworkType.MEERZORG, "2031") == ("a",)

    def test_type_without_rules(self) -> None:
        assert RuleRegistry().rules_for(FrameworkType.VV8, "2026") == []

    def test_unknown_rule_ids(self) -> None:
        registry = RuleRegistry()
        registry.register(_rule("a"))
        assert registry.unknown_rule_ids(["a", "x", "y"]) == ["x", "y"]


class TestBuiltinRegistry:

    def test_all_builtin_rules_registered(self, registry) -> None:
        expected = set(MEERZORG_2026_RULES) | set(VV8_RULES) | set(TOETSINGSKADER_RULES)
        assert {rule.id for rule in registry.list_rules()} == expected
        assert len(registry) == 13

    def test_every_builtin_rule_has_predicate(self, registry) -> None:
        for rule in registry.list_rules():
            assert registry.get_predicate(rule.id) is not None

    def test_meerzorg_rule_sets(self, registry) -> None:
        assert registry.rule_ids_for(FrameworkType.MEERZORG, "2025") == MEERZORG_BASE_RULES
        assert registry.rule_ids_for(FrameworkType.MEERZORG, "2026") == MEERZORG_2026_RULES
        assert registry.rule_ids_for(FrameworkType.MEERZORG, "2024") == MEERZORG_BASE_RULES

    def test_vv8_rule_set(self, registry) -> None:
        assert registry.rule_ids_for(FrameworkType.VV8, "2026") == VV8_RULES


class TestHelpers:

    def test_parse_hours(self) -> None:
        assert parse_hours({"x": "12"}, "x") == 12.0
        assert parse_hours({"x": 7.5}, "x") == 7.5
        assert parse_hours({"x": ""}, "x") == 0.0
        assert parse_hours({}, "x") == 0.0

    @pytest.mark.parametrize("raw", ["veel", True, [1]])
    def test_parse_hours_rejects_non_numeric(self, raw) -> None:
        with pytest.raises(ValueError):
            parse_hours({"x": raw}, "x")

    def test_months_before(self) -> None:
        assert months_before(date(2026, 3, 15), 3) == date(2025, 12, 15)
        assert months_before(date(2026, 5, 31), 3) == date(2026, 2, 28)
        assert months_before(date(2026, 3, 15), 12) == date(2025, 3, 15)
