"""
Condition expression types for petscript IR.

Conditions appear in ``if [...]`` lines and as inline ``action [...]``
suffixes. A condition is one predicate or several joined by ``&``.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from .selectors import SelectorDescriptor


class Operator(StrEnum):
    """Comparison operators, in the order the decoder tries them."""

    NOT_EQUALS = "!="
    GREATER_EQUAL = ">="
    LESS_EQUAL = "<="
    NOT_CONTAINS = "!~"
    CONTAINS = "~"
    EQUALS = "="
    GREATER_THAN = ">"
    LESS_THAN = "<"


class Predicate(BaseModel):
    """
    A single, optionally negated, comparison.

    Examples:
        - enemy.hpp < 50
        - !enemy.aura(217).exists
        - weather != Moonlight
    """

    raw: str
    selector_raw: str
    negated: bool = False
    operator: Operator | None = None  # None for a bare boolean selector
    value: str | None = None
    selector: SelectorDescriptor | None = None  # None when the shape is not recognized

    model_config = ConfigDict(frozen=True)

    @property
    def is_boolean(self) -> bool:
        """Check if this predicate tests a selector without comparing it."""
        return self.operator is None


class Condition(BaseModel):
    """
    One predicate, or several joined by logical AND.

    There is no OR and no grouping; predicates are kept in source order.
    """

    raw: str
    predicates: list[Predicate]

    model_config = ConfigDict(frozen=True)

    @property
    def is_compound(self) -> bool:
        """Check if this is an ``&``-joined conjunction."""
        return len(self.predicates) > 1
