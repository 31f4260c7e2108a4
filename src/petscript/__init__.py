"""
petscript - parser and decoder for Pet Battle Scripts.

Turns a script into a typed syntax tree, decodes every condition selector,
and checks embedded ability and pet names against a name catalog.
"""

from __future__ import annotations

from ._version import get_version

# Re-export commonly used types for convenience
from .core import ir
from .core.condition_parser import decode_condition
from .core.errors import CatalogError, ConfigError, FetchError, PetScriptError
from .core.parser import parse_lines, parse_script
from .core.selector_parser import decode_selector

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    "parse_script",
    "parse_lines",
    "decode_condition",
    "decode_selector",
    "PetScriptError",
    "CatalogError",
    "ConfigError",
    "FetchError",
]
