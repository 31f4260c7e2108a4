"""
Selector decoding for petscript conditions.

Turns the left-hand side of a predicate into a typed descriptor::

    self(#2).ability(Moonfire:595).usable  -> AbilitySelector
    enemy.aura(217).exists                 -> AuraSelector
    enemy.hpp                              -> PetPropertySelector
    weather                                -> GlobalSelector

Shapes are tried top to bottom from ``SELECTOR_RULES``; the first match wins.
Anything else decodes to None (an opaque selector, not an error).
"""

from __future__ import annotations

import re
from collections.abc import Callable

from . import ir

_TARGET = r"^(self|enemy|ally)(\([^)]+\))?"

_ABILITY_PATTERN = re.compile(_TARGET + r"\.ability\(([^)]+)\)\.(.+)$")
_AURA_PATTERN = re.compile(_TARGET + r"\.aura\(([^)]+)\)\.(.+)$")
_PET_PATTERN = re.compile(_TARGET + r"\.(.+)$")
_GLOBAL_PATTERN = re.compile(r"^(weather|round)$")

# Nested speed paths are sugar for "faster/slower than the enemy active pet"
_PROPERTY_ALIASES = {
    "speed.fast": "fast",
    "speed.slow": "slow",
}


def split_named_id(arg: str) -> tuple[str | None, str]:
    """
    Split a ``Name:Id`` argument.

    Returns:
        (provided_name, id); provided_name is None without a ``:``
    """
    parts = arg.split(":")
    if len(parts) > 1:
        return parts[0], parts[1]
    return None, arg


def join_named_id(provided_name: str | None, ref_id: str) -> str:
    """Inverse of ``split_named_id``."""
    return f"{provided_name}:{ref_id}" if provided_name is not None else ref_id


def _target_arg(match: re.Match[str]) -> str | None:
    group = match.group(2)
    return group[1:-1] if group else None


def _build_ability(match: re.Match[str]) -> ir.AbilitySelector:
    provided_name, ability_id = split_named_id(match.group(3))
    return ir.AbilitySelector(
        target=ir.TargetKind(match.group(1)),
        target_arg=_target_arg(match),
        ability_id=ability_id,
        provided_name=provided_name,
        property=match.group(4),
    )


def _build_aura(match: re.Match[str]) -> ir.AuraSelector:
    provided_name, aura_id = split_named_id(match.group(3))
    return ir.AuraSelector(
        target=ir.TargetKind(match.group(1)),
        target_arg=_target_arg(match),
        aura_id=aura_id,
        provided_name=provided_name,
        property=match.group(4),
    )


def _build_pet(match: re.Match[str]) -> ir.PetPropertySelector:
    prop = match.group(3)
    return ir.PetPropertySelector(
        target=ir.TargetKind(match.group(1)),
        target_arg=_target_arg(match),
        property=_PROPERTY_ALIASES.get(prop, prop),
    )


def _build_global(match: re.Match[str]) -> ir.GlobalSelector:
    return ir.GlobalSelector(subject=ir.GlobalSubject(match.group(1)))


SelectorBuilder = Callable[[re.Match[str]], ir.SelectorDescriptor]

# Order matters: the generic pet pattern would also match ability/aura paths
SELECTOR_RULES: list[tuple[re.Pattern[str], SelectorBuilder]] = [
    (_ABILITY_PATTERN, _build_ability),
    (_AURA_PATTERN, _build_aura),
    (_PET_PATTERN, _build_pet),
    (_GLOBAL_PATTERN, _build_global),
]


def decode_selector(selector: str) -> ir.SelectorDescriptor | None:
    """
    Decode a selector string into a descriptor.

    Args:
        selector: Selector text, already stripped of negation and operator

    Returns:
        The descriptor for the first matching shape, or None
    """
    if not selector:
        return None

    for pattern, build in SELECTOR_RULES:
        match = pattern.match(selector)
        if match:
            return build(match)
    return None
