"""
Conditional value resolution.

Evaluates evals and conditional values against a value source at lookup
time. Nothing is cached: every call rescans the rules, so callers holding a
changing value source (a form being edited) always see current results.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from .ir.fields import ConditionalValue, Eval
    from .values import ValueSource

T = TypeVar("T")

# Condition.MATCH_ANY; ir.fields imports this module
MATCH_ANY = "match_any"

# =============================================================================
# Condition Evaluator
# =============================================================================


def evaluate(condition: Eval, values: ValueSource) -> bool:
    """
    Evaluate a single eval against a value source.

    An absent value never matches MATCH_ANY and always satisfies MATCH_NONE:
    an unset field is "none of" any list of literals.

    Args:
        condition: The eval to test
        values: Source of current field values

    Returns:
        True if the referenced field's current value satisfies the test
    """
    current = values.get(condition.field.id)
    if condition.condition == MATCH_ANY:
        return current is not None and current in condition.values
    return current is None or current not in condition.values


def evaluate_any(conditions: Iterable[Eval], values: ValueSource) -> bool:
    """
    OR-combine evals.

    An empty list means unconditional, so it evaluates to True.
    """
    conditions = list(conditions)
    if not conditions:
        return True
    return any(evaluate(c, values) for c in conditions)


# =============================================================================
# Value Resolver
# =============================================================================


def resolve(value: ConditionalValue[T], values: ValueSource) -> T | None:
    """
    Resolve a conditional value.

    Args:
        value: Ordered rules plus optional fallback
        values: Source of current field values

    Returns:
        The value of the first matching rule, else the fallback, else None
    """
    for if_then in value.if_thens:
        if evaluate(if_then.when, values):
            return if_then.value
    return value.fallback
