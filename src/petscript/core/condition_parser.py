"""
Condition decoding for petscript.

Handles the text inside ``if [...]`` and inline ``action [...]`` brackets::

    enemy.hpp<50 & self.active=true
    !enemy.aura(Shattered Defenses:542).exists
    weather != Moonlight

There is no tokenizer: conjunctions are split on the literal `` & `` and each
predicate is split on the first operator found by priority order.
"""

from __future__ import annotations

from . import ir
from .selector_parser import decode_selector

AND_SEPARATOR = " & "

# Two-character operators come first so "!=" is not read as "!" then "="
OPERATOR_PRIORITY: tuple[ir.Operator, ...] = tuple(ir.Operator)


def decode_condition(raw: str) -> ir.Condition:
    """
    Decode condition text into a Condition.

    Args:
        raw: Text between the condition brackets

    Returns:
        Condition holding one predicate per ``&``-joined part, in source order
    """
    raw = raw.strip()
    if AND_SEPARATOR in raw:
        parts = [part.strip() for part in raw.split(AND_SEPARATOR)]
    else:
        parts = [raw]

    return ir.Condition(raw=raw, predicates=[decode_predicate(part) for part in parts])


def decode_predicate(raw: str) -> ir.Predicate:
    """
    Decode a single predicate.

    A leading ``!`` marks the predicate as negated. The first operator in
    ``OPERATOR_PRIORITY`` that occurs after position 0 splits selector from
    value; a predicate with no operator is a bare boolean selector.
    """
    text = raw.strip()
    negated = text.startswith("!")
    if negated:
        text = text[1:]

    operator, selector_raw, value = split_comparison(text)
    return ir.Predicate(
        raw=raw.strip(),
        selector_raw=selector_raw,
        negated=negated,
        operator=operator,
        value=value,
        selector=decode_selector(selector_raw),
    )


def split_comparison(text: str) -> tuple[ir.Operator | None, str, str | None]:
    """
    Split ``selector<op>value`` on the highest-priority operator present.

    Returns:
        (operator, selector, value); operator and value are None when no
        operator occurs past the first character
    """
    for op in OPERATOR_PRIORITY:
        index = text.find(op.value)
        if index > 0:
            left = text[:index].strip()
            right = text[index + len(op.value) :].strip()
            return op, left, right
    return None, text.strip(), None
