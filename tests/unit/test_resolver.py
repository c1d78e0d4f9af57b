"""Tests for the condition evaluator and the conditional value resolver."""

import pytest

from adminschema.core.ir import (
    Condition,
    ConditionalValue,
    Eval,
    FieldSpec,
    IfThen,
    InputCheck,
    Transformer,
    ValidatorKind,
)
from adminschema.core.resolver import MATCH_ANY, evaluate, evaluate_any, resolve

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def status() -> FieldSpec:
    return FieldSpec(id="status")


@pytest.fixture
def mode() -> FieldSpec:
    return FieldSpec(id="mode")


def _any(field: FieldSpec, *values: str) -> Eval:
    return Eval(field=field, values=list(values), condition=Condition.MATCH_ANY)


def _none(field: FieldSpec, *values: str) -> Eval:
    return Eval(field=field, values=list(values), condition=Condition.MATCH_NONE)


# =============================================================================
# Condition Evaluator
# =============================================================================


class TestMatchAny:
    """Tests for MATCH_ANY evals."""

    def test_matches_listed_value(self, status: FieldSpec) -> None:
        assert evaluate(_any(status, "on", "off"), {"status": "off"}) is True

    def test_rejects_unlisted_value(self, status: FieldSpec) -> None:
        assert evaluate(_any(status, "on", "off"), {"status": "maybe"}) is False

    def test_absent_value_never_matches(self, status: FieldSpec) -> None:
        """An unset field is not one of any list of literals."""
        assert evaluate(_any(status, "on", "off"), {}) is False
        assert evaluate(_any(status, ""), {}) is False

    def test_empty_string_is_a_value(self, status: FieldSpec) -> None:
        assert evaluate(_any(status, ""), {"status": ""}) is True

    def test_comparison_is_exact(self, status: FieldSpec) -> None:
        assert evaluate(_any(status, "off"), {"status": "OFF"}) is False
        assert evaluate(_any(status, "off"), {"status": " off"}) is False

    def test_empty_literal_list_never_matches(self, status: FieldSpec) -> None:
        assert evaluate(_any(status), {"status": "on"}) is False

    def test_constant_matches_enum(self) -> None:
        assert Condition.MATCH_ANY == MATCH_ANY
        assert Condition.MATCH_NONE != MATCH_ANY


class TestMatchNone:
    """Tests for MATCH_NONE evals."""

    def test_matches_unlisted_value(self, status: FieldSpec) -> None:
        assert evaluate(_none(status, "lmtp"), {"status": "smtp"}) is True

    def test_rejects_listed_value(self, status: FieldSpec) -> None:
        assert evaluate(_none(status, "lmtp", "smtp"), {"status": "smtp"}) is False

    def test_absent_value_always_matches(self, status: FieldSpec) -> None:
        """An unset field is vacuously none of the literals."""
        assert evaluate(_none(status, "on", "off"), {}) is True

    def test_reads_only_referenced_field(self, status: FieldSpec) -> None:
        assert evaluate(_none(status, "off"), {"other": "off"}) is True


class TestEvaluateAny:
    """Tests for OR-combination of evals."""

    def test_empty_list_is_true(self) -> None:
        assert evaluate_any([], {}) is True
        assert evaluate_any([], {"status": "anything"}) is True

    def test_single_eval(self, status: FieldSpec) -> None:
        assert evaluate_any([_any(status, "off")], {"status": "off"}) is True
        assert evaluate_any([_any(status, "off")], {"status": "on"}) is False

    def test_or_semantics(self, status: FieldSpec, mode: FieldSpec) -> None:
        evals = [_any(status, "off"), _any(mode, "fast")]
        assert evaluate_any(evals, {"status": "off", "mode": "slow"}) is True
        assert evaluate_any(evals, {"status": "on", "mode": "fast"}) is True
        assert evaluate_any(evals, {"status": "on", "mode": "slow"}) is False
        assert evaluate_any(evals, {}) is False

    def test_accepts_generator(self, status: FieldSpec) -> None:
        evals = (e for e in [_any(status, "on")])
        assert evaluate_any(evals, {"status": "on"}) is True

    def test_eval_method_delegates(self, status: FieldSpec) -> None:
        rule = _any(status, "on")
        assert rule.evaluate({"status": "on"}) is True
        assert rule.field_id == "status"


# =============================================================================
# Value Resolver
# =============================================================================


class TestResolve:
    """Tests for conditional value resolution."""

    def test_empty_rules_return_fallback(self) -> None:
        value = ConditionalValue[str](fallback="30s")
        assert resolve(value, {}) == "30s"
        assert resolve(value, {"mode": "fast"}) == "30s"

    def test_empty_rules_without_fallback_return_none(self) -> None:
        value = ConditionalValue[str]()
        assert value.is_empty
        assert resolve(value, {}) is None
        assert resolve(value, {"mode": "fast"}) is None

    def test_matching_rule_wins_over_fallback(self, mode: FieldSpec) -> None:
        value = ConditionalValue[str](
            if_thens=[IfThen[str](when=_any(mode, "fast"), value="1s")],
            fallback="30s",
        )
        assert resolve(value, {"mode": "fast"}) == "1s"
        assert resolve(value, {"mode": "slow"}) == "30s"
        assert resolve(value, {}) == "30s"

    def test_unmatched_without_fallback_is_none(self, mode: FieldSpec) -> None:
        value = ConditionalValue[str](
            if_thens=[IfThen[str](when=_any(mode, "fast"), value="1s")],
        )
        assert resolve(value, {"mode": "slow"}) is None

    def test_first_matching_rule_wins(self, status: FieldSpec, mode: FieldSpec) -> None:
        """Rules are tried in declared order; the first match is returned."""
        first = IfThen[str](when=_any(mode, "fast"), value="A")
        second = IfThen[str](when=_none(status, "off"), value="B")
        values = {"mode": "fast", "status": "on"}

        assert resolve(ConditionalValue[str](if_thens=[first, second]), values) == "A"
        assert resolve(ConditionalValue[str](if_thens=[second, first]), values) == "B"

    def test_resolution_is_stable(self, mode: FieldSpec) -> None:
        value = ConditionalValue[str](
            if_thens=[
                IfThen[str](when=_any(mode, "fast"), value="A"),
                IfThen[str](when=_any(mode, "fast"), value="B"),
            ]
        )
        assert [resolve(value, {"mode": "fast"}) for _ in range(5)] == ["A"] * 5

    def test_no_caching_between_calls(self, mode: FieldSpec) -> None:
        value = ConditionalValue[str](
            if_thens=[IfThen[str](when=_any(mode, "fast"), value="1s")],
            fallback="30s",
        )
        values = {"mode": "fast"}
        assert value.resolve(values) == "1s"
        values["mode"] = "slow"
        assert value.resolve(values) == "30s"

    def test_resolves_input_checks(self, mode: FieldSpec) -> None:
        strict = InputCheck.new([Transformer.TRIM], [ValidatorKind.REQUIRED])
        loose = InputCheck.new([Transformer.TRIM], [])
        value = ConditionalValue[InputCheck](
            if_thens=[IfThen[InputCheck](when=_any(mode, "strict"), value=strict)],
            fallback=loose,
        )
        assert resolve(value, {"mode": "strict"}) is strict
        assert resolve(value, {}) is loose
