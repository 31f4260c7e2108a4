"""Core petscript functionality: IR, line classifier, block parser, condition and selector decoding, name checks."""

from . import ir
from .condition_parser import decode_condition, decode_predicate
from .describe import Describer, round_badge
from .errors import (
    CatalogError,
    CatalogNotLoadedError,
    ConfigError,
    ErrorContext,
    FetchError,
    PetScriptError,
    ScriptEncodingError,
)
from .lexer import ClassifiedLine, LineKind, classify_line, indent_level
from .names import (
    CatalogState,
    DeferredNameResolver,
    NameCatalog,
    NameCheck,
    NameKind,
    NameResolver,
    NameVerdict,
    NameVerifier,
    classify_name,
    load_catalog,
    write_catalog,
)
from .parser import collect_errors, parse_file, parse_lines, parse_script
from .selector_parser import decode_selector

__all__ = [
    "ir",
    # Errors
    "PetScriptError",
    "CatalogError",
    "CatalogNotLoadedError",
    "ConfigError",
    "FetchError",
    "ScriptEncodingError",
    "ErrorContext",
    # Parsing
    "ClassifiedLine",
    "LineKind",
    "classify_line",
    "indent_level",
    "parse_lines",
    "parse_script",
    "parse_file",
    "collect_errors",
    "decode_condition",
    "decode_predicate",
    "decode_selector",
    # Names
    "CatalogState",
    "DeferredNameResolver",
    "NameCatalog",
    "NameCheck",
    "NameKind",
    "NameResolver",
    "NameVerdict",
    "NameVerifier",
    "classify_name",
    "load_catalog",
    "write_catalog",
    # Descriptions
    "Describer",
    "round_badge",
]
