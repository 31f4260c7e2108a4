"""
petscript Intermediate Representation (IR) types.

All types are re-exported from this package.
"""

from pydantic import TypeAdapter

# Conditions
from .conditions import (
    Condition,
    Operator,
    Predicate,
)

# Syntax tree
from .nodes import (
    ActionKind,
    ActionNode,
    IfNode,
    ParseErrorNode,
    SeparatorNode,
    SyntaxNode,
)

# Selectors
from .selectors import (
    AbilitySelector,
    AuraSelector,
    GlobalSelector,
    GlobalSubject,
    PetPropertySelector,
    SelectorDescriptor,
    TargetKind,
)

# Validates and serializes whole parse results
SyntaxTree = TypeAdapter(list[SyntaxNode])

__all__ = [
    # Conditions
    "Condition",
    "Operator",
    "Predicate",
    # Syntax tree
    "ActionKind",
    "ActionNode",
    "IfNode",
    "ParseErrorNode",
    "SeparatorNode",
    "SyntaxNode",
    "SyntaxTree",
    # Selectors
    "AbilitySelector",
    "AuraSelector",
    "GlobalSelector",
    "GlobalSubject",
    "PetPropertySelector",
    "SelectorDescriptor",
    "TargetKind",
]
