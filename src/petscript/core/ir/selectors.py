"""
Selector descriptor types for petscript IR.

A selector is the left-hand side of a predicate, such as ``enemy.hpp`` or
``self(#2).ability(Moonfire:595).usable``. Decoding turns it into one of the
descriptor models below.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class TargetKind(StrEnum):
    """Which side's pet a selector refers to."""

    SELF = "self"
    ENEMY = "enemy"
    ALLY = "ally"


class GlobalSubject(StrEnum):
    """Battle-wide values that are not tied to a pet."""

    WEATHER = "weather"
    ROUND = "round"


class GlobalSelector(BaseModel):
    """``weather`` or ``round``."""

    kind: Literal["global"] = "global"
    subject: GlobalSubject

    model_config = ConfigDict(frozen=True)


class PetPropertySelector(BaseModel):
    """
    A property of a pet.

    Examples:
        - enemy.hpp
        - self(#3).active
        - self.speed.fast (property collapses to ``fast``)
    """

    kind: Literal["pet"] = "pet"
    target: TargetKind
    target_arg: str | None = None  # "#3", "1227" or "Name:1227"
    property: str

    model_config = ConfigDict(frozen=True)


class AbilitySelector(BaseModel):
    """
    A property of one of a pet's abilities.

    Examples:
        - self.ability(595).usable
        - self(#2).ability(Moonfire:595).usable
    """

    kind: Literal["ability"] = "ability"
    target: TargetKind
    target_arg: str | None = None
    ability_id: str
    provided_name: str | None = None  # Only set for the Name:Id form
    property: str

    model_config = ConfigDict(frozen=True)


class AuraSelector(BaseModel):
    """
    A property of an aura on a pet.

    Examples:
        - enemy.aura(217).exists
        - self.aura(Shattered Defenses:542).duration
    """

    kind: Literal["aura"] = "aura"
    target: TargetKind
    target_arg: str | None = None
    aura_id: str
    provided_name: str | None = None
    property: str

    model_config = ConfigDict(frozen=True)


SelectorDescriptor = Annotated[
    GlobalSelector | PetPropertySelector | AbilitySelector | AuraSelector,
    Field(discriminator="kind"),
]
