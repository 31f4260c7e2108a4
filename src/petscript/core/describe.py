"""
Plain-English descriptions of parsed scripts.

    ability(Moonfire:595) [enemy.hpp<50]
    -> "Use ability Moonfire (595) if Enemy active pet's health is below 50%"

With a resolver attached, ids are looked up in the name catalog and every
reference that is not a clean match gets a bracketed note appended. Without
one, references are shown as written.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Sequence

from . import ir
from .names import NameCheck, NameKind, NameResolver, NameVerdict, NameVerifier
from .selector_parser import join_named_id, split_named_id

OPERATOR_WORDS = {
    ir.Operator.EQUALS: "is",
    ir.Operator.NOT_EQUALS: "is not",
    ir.Operator.GREATER_THAN: "is greater than",
    ir.Operator.GREATER_EQUAL: "is greater than or equal to",
    ir.Operator.LESS_THAN: "is less than",
    ir.Operator.LESS_EQUAL: "is less than or equal to",
    ir.Operator.CONTAINS: "contains",
    ir.Operator.NOT_CONTAINS: "does not contain",
}

PROPERTY_NAMES = {
    "hp": "health",
    "hpp": "health %",
}

# (when true, when false)
BOOLEAN_VERBS = {
    "active": ("is active", "is NOT active"),
    "dead": ("is dead", "is alive"),
    "exists": ("exists", "does NOT exist"),
    "played": ("has been played", "has NOT been played"),
    "usable": ("is usable", "is NOT usable"),
    "strong": ("is strong", "is NOT strong"),
    "weak": ("is weak", "is NOT weak"),
    "collected": ("is collected", "is NOT collected"),
    "fast": ("is faster than the enemy active pet", "is NOT faster than the enemy active pet"),
    "slow": ("is slower than the enemy active pet", "is NOT slower than the enemy active pet"),
}

# Properties compared with "= true" / "!= false" read as yes/no statements
BOOLEAN_PROPERTIES = frozenset({"active", "dead", "exists", "played", "usable"})

ACTION_PHRASES = {
    ir.ActionKind.STANDBY: "Pass this turn",
    ir.ActionKind.QUIT: "Forfeit the battle",
    ir.ActionKind.CATCH: "Attempt to catch the enemy pet",
}

_ROUND_PATTERN = re.compile(r"\bround\s*(=|!=|>=|<=|>|<)\s*(\d+)")
_LEADING_INT = re.compile(r"^\s*(-?\d+)")


def capitalize_first(text: str) -> str:
    return text[:1].upper() + text[1:]


def boolean_verb(prop: str, is_true: bool) -> str:
    if prop in BOOLEAN_VERBS:
        when_true, when_false = BOOLEAN_VERBS[prop]
        return when_true if is_true else when_false
    return f"is {prop}" if is_true else f"is NOT {prop}"


def property_name(prop: str) -> str:
    return PROPERTY_NAMES.get(prop, prop)


def _number(value: str) -> str:
    match = _LEADING_INT.match(value)
    return match.group(1) if match else value


def health_percent_phrase(operator: ir.Operator, value: str) -> str:
    num = _number(value)
    phrases = {
        ir.Operator.LESS_THAN: f"is below {num}%",
        ir.Operator.LESS_EQUAL: f"is at or below {num}%",
        ir.Operator.GREATER_THAN: f"is above {num}%",
        ir.Operator.GREATER_EQUAL: f"is at or above {num}%",
        ir.Operator.EQUALS: f"is exactly {num}%",
        ir.Operator.NOT_EQUALS: f"is NOT {num}%",
    }
    return phrases.get(operator, f"{operator.value} {value}%")


def health_points_phrase(operator: ir.Operator, value: str) -> str:
    num = _number(value)
    phrases = {
        ir.Operator.LESS_THAN: f"is less than {num}",
        ir.Operator.LESS_EQUAL: f"is at most {num}",
        ir.Operator.GREATER_THAN: f"is greater than {num}",
        ir.Operator.GREATER_EQUAL: f"is at least {num}",
        ir.Operator.EQUALS: f"is exactly {num}",
        ir.Operator.NOT_EQUALS: f"is NOT {num}",
    }
    return phrases.get(operator, f"{operator.value} {value}")


def aura_duration_phrase(operator: ir.Operator, value: str) -> str:
    num = _number(value)
    rounds = "round" if num == "1" else "rounds"
    phrases = {
        ir.Operator.LESS_THAN: f"has less than {num} {rounds} remaining",
        ir.Operator.LESS_EQUAL: f"has {num} {rounds} or less remaining",
        ir.Operator.GREATER_THAN: f"has more than {num} {rounds} remaining",
        ir.Operator.GREATER_EQUAL: f"has {num} {rounds} or more remaining",
        ir.Operator.EQUALS: f"has exactly {num} {rounds} remaining",
        ir.Operator.NOT_EQUALS: f"does NOT have {num} {rounds} remaining",
    }
    return phrases.get(operator, f"duration {operator.value} {value}")


def round_badge(condition_raw: str | None) -> str | None:
    """
    Short round marker for a condition: ``R7`` for ``round=7``, ``R>=3`` for
    ``round>=3``. None when the condition has no round comparison.
    """
    if not condition_raw:
        return None
    match = _ROUND_PATTERN.search(condition_raw)
    if not match:
        return None
    operator, number = match.groups()
    if operator == "=":
        return f"R{number}"
    return f"R{operator}{number}"


def _is_affirmative(operator: ir.Operator | None, value: str | None) -> bool:
    """``x = true`` / ``x != false`` style comparisons read as "x holds"."""
    return (operator == ir.Operator.EQUALS and value != "false") or (
        operator == ir.Operator.NOT_EQUALS and value == "false"
    )


def name_note(verdict: NameVerdict | None) -> str:
    """Bracketed note for a verdict that is not a clean match."""
    if verdict is None or verdict.check == NameCheck.MATCH:
        return ""
    if verdict.check == NameCheck.MISMATCH:
        return (
            f" [name mismatch: script says '{verdict.provided_name}'"
            f" but catalog says '{verdict.resolved_name}']"
        )
    if verdict.check == NameCheck.NOT_FOUND:
        return f" [{verdict.kind.value} id {verdict.ref_id} not found]"
    return f" [no {verdict.kind.value} id given]"


class Describer:
    """Turns syntax nodes into English sentences."""

    def __init__(self, resolver: NameResolver | None = None):
        self.verifier = NameVerifier(resolver) if resolver is not None else None

    # -- references --

    def _reference(self, kind: NameKind, arg: str) -> tuple[str, str]:
        """(label, note) for an ability, aura or pet argument."""
        if self.verifier is None:
            provided_name, ref_id = split_named_id(arg)
            return (f"{provided_name} ({ref_id})" if provided_name else arg), ""

        verdict = self.verifier.verify(kind, arg)
        if verdict is None:
            return arg, ""
        if verdict.check == NameCheck.NO_ID:
            return arg, name_note(verdict)
        name = verdict.provided_name or verdict.resolved_name
        label = f"{name} ({verdict.ref_id})" if name else verdict.ref_id
        return label, name_note(verdict)

    def target_phrase(self, target: ir.TargetKind, arg: str | None) -> str:
        """
        Who a selector points at: ``your active pet``, ``enemy pet #3``,
        ``your pet Mechanical Pandaren Dragonling (844)``.
        """
        if not arg:
            owner = "your" if target == ir.TargetKind.SELF else target.value
            return f"{owner} active pet"

        if arg.startswith("#"):
            owner = "your" if target == ir.TargetKind.SELF else target.value
            return f"{owner} pet {arg}"

        prefix = "your pet" if target == ir.TargetKind.SELF else f"{target.value} pet"
        label, note = self._reference(NameKind.PET, arg)
        if label == arg and ":" not in arg:
            return f"{target.value}({arg}){note}"
        return f"{prefix} {label}{note}"

    def _subject(self, selector: ir.PetPropertySelector | ir.AbilitySelector | ir.AuraSelector) -> str:
        return capitalize_first(self.target_phrase(selector.target, selector.target_arg))

    # -- actions --

    def describe_ability(self, args: str | None) -> str:
        if args is None:
            return "Use ability"
        if self.verifier is not None and args.startswith("#"):
            return f"Use ability in slot {args}"
        label, note = self._reference(NameKind.ABILITY, args)
        return f"Use ability {label}{note}"

    def describe_change(self, args: str | None) -> str:
        if args is None:
            return "Change pet"
        if args == "next":
            return "Change to next pet"
        label, note = self._reference(NameKind.PET, args)
        return f"Change to pet {label}{note}"

    def describe_action(self, node: ir.ActionNode) -> str:
        if node.action_kind == ir.ActionKind.ABILITY:
            base = self.describe_ability(node.args)
        elif node.action_kind == ir.ActionKind.CHANGE:
            base = self.describe_change(node.args)
        elif node.action_kind == ir.ActionKind.TEST:
            base = f"Print debug message: {node.args}"
        else:
            base = ACTION_PHRASES.get(node.action_kind, node.raw_action)

        if node.condition is not None:
            return f"{base} if {self.describe_condition(node.condition)}"
        return base

    # -- conditions --

    def describe_condition(self, condition: ir.Condition) -> str:
        return " AND ".join(self.describe_predicate(p) for p in condition.predicates)

    def describe_predicate(self, predicate: ir.Predicate) -> str:
        if predicate.operator is None:
            return self._describe_boolean(predicate)
        return self._describe_comparison(predicate, predicate.operator)

    def _describe_comparison(self, predicate: ir.Predicate, operator: ir.Operator) -> str:
        selector = predicate.selector
        value = predicate.value or ""
        op_word = OPERATOR_WORDS[operator]

        if selector is None:
            return capitalize_first(f"{predicate.selector_raw} {op_word} {value}")

        if isinstance(selector, ir.GlobalSelector):
            return f"{capitalize_first(selector.subject.value)} {op_word} {value}"

        holds = _is_affirmative(operator, value) != predicate.negated
        subject = self._subject(selector)

        if isinstance(selector, ir.AbilitySelector):
            label, note = self._reference(
                NameKind.ABILITY, join_named_id(selector.provided_name, selector.ability_id)
            )
            if selector.property == "usable":
                verb = "is ready" if holds else "is NOT ready"
                return f"{subject}'s ability {label} {verb}{note}"
            return f"{subject} ability {label} {property_name(selector.property)} {op_word} {value}{note}"

        if isinstance(selector, ir.AuraSelector):
            label, note = self._reference(
                NameKind.AURA, join_named_id(selector.provided_name, selector.aura_id)
            )
            if selector.property == "exists":
                verb = "has" if holds else "does NOT have"
                return f"{subject} {verb} aura {label}{note}"
            if selector.property == "duration":
                return f"{subject} aura {label} {aura_duration_phrase(operator, value)}{note}"
            return f"{subject} aura {label} {property_name(selector.property)} {op_word} {value}{note}"

        if (
            operator in (ir.Operator.EQUALS, ir.Operator.NOT_EQUALS)
            and selector.property in BOOLEAN_PROPERTIES
        ):
            return f"{subject} {boolean_verb(selector.property, holds)}"
        if selector.property == "hpp":
            return f"{subject}'s health {health_percent_phrase(operator, value)}"
        if selector.property == "hp":
            return f"{subject}'s health {health_points_phrase(operator, value)}"
        return f"{subject}'s {property_name(selector.property)} {op_word} {value}"

    def _describe_boolean(self, predicate: ir.Predicate) -> str:
        selector = predicate.selector
        holds = not predicate.negated

        if selector is None:
            text = capitalize_first(predicate.selector_raw)
            return text if holds else f"NOT {text}"

        if isinstance(selector, ir.GlobalSelector):
            return f"{capitalize_first(selector.subject.value)} {'is set' if holds else 'is NOT set'}"

        subject = self._subject(selector)

        if isinstance(selector, ir.AbilitySelector):
            label, note = self._reference(
                NameKind.ABILITY, join_named_id(selector.provided_name, selector.ability_id)
            )
            if selector.property == "usable":
                verb = "is ready" if holds else "is NOT ready"
            else:
                verb = boolean_verb(selector.property, holds)
            return f"{subject}'s ability {label} {verb}{note}"

        if isinstance(selector, ir.AuraSelector):
            label, note = self._reference(
                NameKind.AURA, join_named_id(selector.provided_name, selector.aura_id)
            )
            verb = "has" if holds else "does NOT have"
            return f"{subject} {verb} aura {label}{note}"

        return f"{subject} {boolean_verb(selector.property, holds)}"

    # -- trees --

    def describe_node(self, node: ir.SyntaxNode) -> str:
        if isinstance(node, ir.ActionNode):
            return self.describe_action(node)
        if isinstance(node, ir.IfNode):
            return f"If {self.describe_condition(node.condition)}"
        if isinstance(node, ir.ParseErrorNode):
            return f"Error: {node.message}"
        return "--"

    def walk(self, nodes: Sequence[ir.SyntaxNode], depth: int = 0) -> Iterator[tuple[int, ir.SyntaxNode, str]]:
        """Yield (depth, node, description) for every node, depth first."""
        for node in nodes:
            yield depth, node, self.describe_node(node)
            if isinstance(node, ir.IfNode):
                yield from self.walk(node.children, depth + 1)
