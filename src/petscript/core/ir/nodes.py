"""
Syntax tree node types for petscript IR.

The block parser produces a list of these nodes. ``IfNode`` nests its
children; everything else is a leaf.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from .conditions import Condition


class ActionKind(StrEnum):
    """What an action line does."""

    ABILITY = "ability"
    CHANGE = "change"
    QUIT = "quit"
    STANDBY = "standby"
    CATCH = "catch"
    TEST = "test"
    UNKNOWN = "unknown"


class SeparatorNode(BaseModel):
    """A ``--`` organizer line."""

    type: Literal["separator"] = "separator"
    indent: int = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True)


class ActionNode(BaseModel):
    """
    An action line, optionally guarded by an inline condition.

    Examples:
        - ability(Moonfire:595)
        - change(#2) [self.dead]
        - standby
    """

    type: Literal["action"] = "action"
    action_kind: ActionKind
    raw_action: str
    args: str | None = None
    condition: Condition | None = None
    condition_raw: str | None = None
    indent: int = Field(default=0, ge=0)
    source_line: int

    model_config = ConfigDict(frozen=True)


class ParseErrorNode(BaseModel):
    """A structural error recorded in place of the construct it broke."""

    type: Literal["error"] = "error"
    message: str
    source_line: int

    model_config = ConfigDict(frozen=True)


class IfNode(BaseModel):
    """
    An ``if [...]`` ... ``endif`` block.

    ``end_line`` is None when the block was never closed.
    """

    type: Literal["if"] = "if"
    condition: Condition
    condition_raw: str
    indent: int = Field(default=0, ge=0)
    children: list[SyntaxNode] = Field(default_factory=list)
    source_line: int
    end_line: int | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_closed(self) -> bool:
        """Check if a matching ``endif`` was found."""
        return self.end_line is not None


SyntaxNode = Annotated[
    SeparatorNode | IfNode | ActionNode | ParseErrorNode,
    Field(discriminator="type"),
]

IfNode.model_rebuild()
