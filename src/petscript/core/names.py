"""
Name catalog, resolvers, and name-mismatch classification.

Scripts may embed a display name next to a numeric id (``Moonfire:595``).
The catalog maps ability and pet ids to their authoritative names so those
embedded names can be checked. Every reference is classified as one of:

    match      the catalog agrees, or no name was embedded
    mismatch   the catalog has a different name (exact, case-sensitive)
    no_id      only a bare name was given, nothing to look up
    not_found  a numeric id was given but the catalog has no entry

Aura names are not in the catalog directly: aura ``X`` is named after the
ability registered under id ``X + 1``.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from collections.abc import Awaitable, Callable, Sequence
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from . import ir
from .errors import CatalogError, CatalogNotLoadedError, PetScriptError
from .selector_parser import join_named_id, split_named_id

logger = logging.getLogger(__name__)

_NUMERIC_ID = re.compile(r"[0-9]+")


class NameCatalog(BaseModel):
    """Id-to-name maps for pet abilities and pets."""

    abilities: dict[str, str] = Field(default_factory=dict)
    pets: dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)


def _read_name_map(path: Path) -> dict[str, str]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise CatalogError(f"Catalog file not found: {path}") from e
    except OSError as e:
        raise CatalogError(f"Cannot read catalog file {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise CatalogError(f"Catalog file {path} is not valid UTF-8: {e}") from e
    except json.JSONDecodeError as e:
        raise CatalogError(f"Invalid JSON in catalog file {path}: {e}") from e

    if not isinstance(data, dict):
        raise CatalogError(f"Catalog file {path} must contain an object of id -> name")
    return {str(key): str(value) for key, value in data.items()}


def load_catalog(abilities_path: Path, pets_path: Path) -> NameCatalog:
    """
    Load the two catalog JSON files.

    Raises:
        CatalogError: If either file is missing or malformed
    """
    return NameCatalog(abilities=_read_name_map(abilities_path), pets=_read_name_map(pets_path))


def write_catalog(catalog: NameCatalog, abilities_path: Path, pets_path: Path) -> None:
    """Write the catalog as two indented JSON objects."""
    for path, names in ((abilities_path, catalog.abilities), (pets_path, catalog.pets)):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(names, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


def strip_id_suffix(name: str | None) -> str | None:
    """Drop a trailing ``:<id>`` from catalog names like ``Wind-up:458``."""
    if name and ":" in name:
        return name.split(":")[0]
    return name


def is_numeric_id(value: str) -> bool:
    return _NUMERIC_ID.fullmatch(value) is not None


def aura_ability_id(aura_id: str) -> str | None:
    """Ability id that carries the display name of ``aura_id``."""
    if not is_numeric_id(aura_id):
        return None
    return str(int(aura_id) + 1)


# =============================================================================
# Resolvers
# =============================================================================


class CatalogState(StrEnum):
    """Load state of a resolver's catalog."""

    PENDING = "pending"
    LOADED = "loaded"
    FAILED = "failed"


class NameResolver:
    """
    Synchronous lookups against a catalog.

    A resolver in ``pending`` state raises CatalogNotLoadedError from every
    lookup. A ``failed`` resolver answers None forever, the same as a loaded
    catalog without the entry.
    """

    def __init__(self, catalog: NameCatalog | None = None):
        self._catalog = catalog
        self._state = CatalogState.LOADED if catalog is not None else CatalogState.PENDING

    @classmethod
    def from_files(cls, abilities_path: Path, pets_path: Path) -> NameResolver:
        """Load a catalog from disk, falling back to a failed resolver."""
        resolver = cls()
        try:
            resolver.mark_loaded(load_catalog(abilities_path, pets_path))
        except CatalogError as e:
            logger.warning("Failed to load name catalog: %s", e.message)
            resolver.mark_failed()
        return resolver

    @property
    def state(self) -> CatalogState:
        return self._state

    def mark_loaded(self, catalog: NameCatalog) -> None:
        if self._state != CatalogState.PENDING:
            raise PetScriptError(f"Catalog already {self._state.value}")
        self._catalog = catalog
        self._state = CatalogState.LOADED

    def mark_failed(self) -> None:
        if self._state != CatalogState.PENDING:
            raise PetScriptError(f"Catalog already {self._state.value}")
        self._state = CatalogState.FAILED

    def _names(self, kind: str) -> dict[str, str]:
        if self._state == CatalogState.PENDING:
            raise CatalogNotLoadedError("Name catalog has not been loaded yet")
        if self._catalog is None:
            return {}
        return self._catalog.abilities if kind == "abilities" else self._catalog.pets

    def lookup_ability_name(self, ability_id: str) -> str | None:
        """Raw catalog entry; may carry a ``:<id>`` suffix."""
        return self._names("abilities").get(ability_id)

    def lookup_pet_name(self, pet_id: str) -> str | None:
        return self._names("pets").get(pet_id)

    def lookup_aura_name(self, aura_id: str) -> str | None:
        ability_id = aura_ability_id(aura_id)
        if ability_id is None:
            return None
        return strip_id_suffix(self.lookup_ability_name(ability_id))


class DeferredNameResolver:
    """
    Asynchronous resolver whose catalog is loaded once, on first use.

    Every lookup awaits the same load task, so concurrent lookups are safe.
    If the loader fails the resolver settles in ``failed`` state and
    resolves everything to None.
    """

    def __init__(self, loader: Callable[[], Awaitable[NameCatalog]]):
        self._loader = loader
        self._resolver = NameResolver()
        self._task: asyncio.Task[None] | None = None

    @classmethod
    def from_files(cls, abilities_path: Path, pets_path: Path) -> DeferredNameResolver:
        async def load() -> NameCatalog:
            return await asyncio.to_thread(load_catalog, abilities_path, pets_path)

        return cls(load)

    @property
    def state(self) -> CatalogState:
        return self._resolver.state

    async def _load(self) -> None:
        try:
            catalog = await self._loader()
        except Exception as e:
            logger.warning("Failed to load name catalog: %s", e)
            self._resolver.mark_failed()
            return
        self._resolver.mark_loaded(catalog)

    async def resolver(self) -> NameResolver:
        """Wait for the catalog and return the settled synchronous resolver."""
        if self._task is None:
            self._task = asyncio.ensure_future(self._load())
        await asyncio.shield(self._task)
        return self._resolver

    async def lookup_ability_name(self, ability_id: str) -> str | None:
        return (await self.resolver()).lookup_ability_name(ability_id)

    async def lookup_pet_name(self, pet_id: str) -> str | None:
        return (await self.resolver()).lookup_pet_name(pet_id)

    async def lookup_aura_name(self, aura_id: str) -> str | None:
        return (await self.resolver()).lookup_aura_name(aura_id)


# =============================================================================
# Classification
# =============================================================================


class NameKind(StrEnum):
    """What kind of game object a reference names."""

    ABILITY = "ability"
    AURA = "aura"
    PET = "pet"


class NameCheck(StrEnum):
    """Outcome of checking a script reference against the catalog."""

    MATCH = "match"
    MISMATCH = "mismatch"
    NO_ID = "no_id"
    NOT_FOUND = "not_found"


def classify_name(provided_name: str | None, ref_id: str, resolved_name: str | None) -> NameCheck:
    """
    Classify a reference.

    Args:
        provided_name: Name embedded in the script (``Name:Id`` form), if any
        ref_id: Id part of the reference, or the whole argument
        resolved_name: What the catalog returned for ``ref_id``
    """
    if not is_numeric_id(ref_id):
        return NameCheck.NO_ID
    if resolved_name is None:
        return NameCheck.NOT_FOUND
    if provided_name is not None and provided_name != resolved_name:
        return NameCheck.MISMATCH
    return NameCheck.MATCH


class NameVerdict(BaseModel):
    """The classification of one ability, aura or pet reference."""

    kind: NameKind
    raw: str
    ref_id: str
    provided_name: str | None = None
    resolved_name: str | None = None
    check: NameCheck

    model_config = ConfigDict(frozen=True)

    @property
    def is_problem(self) -> bool:
        return self.check != NameCheck.MATCH


class NameVerifier:
    """Runs name classification over arguments, selectors and whole trees."""

    def __init__(self, resolver: NameResolver):
        self.resolver = resolver

    def _resolve(self, kind: NameKind, ref_id: str) -> str | None:
        if not is_numeric_id(ref_id):
            return None
        if kind == NameKind.ABILITY:
            return strip_id_suffix(self.resolver.lookup_ability_name(ref_id))
        if kind == NameKind.AURA:
            return self.resolver.lookup_aura_name(ref_id)
        return self.resolver.lookup_pet_name(ref_id)

    def verify(self, kind: NameKind, arg: str) -> NameVerdict | None:
        """
        Classify one argument such as ``595``, ``Moonfire:595`` or ``Moonfire``.

        Returns:
            None for slot references (``#2``), which name nothing
        """
        if arg.startswith("#"):
            return None
        provided_name, ref_id = split_named_id(arg)
        resolved_name = self._resolve(kind, ref_id)
        return NameVerdict(
            kind=kind,
            raw=arg,
            ref_id=ref_id,
            provided_name=provided_name,
            resolved_name=resolved_name,
            check=classify_name(provided_name, ref_id, resolved_name),
        )

    def verify_ability(self, arg: str) -> NameVerdict | None:
        return self.verify(NameKind.ABILITY, arg)

    def verify_aura(self, arg: str) -> NameVerdict | None:
        return self.verify(NameKind.AURA, arg)

    def verify_pet(self, arg: str) -> NameVerdict | None:
        return self.verify(NameKind.PET, arg)

    def verify_selector(self, selector: ir.SelectorDescriptor | None) -> list[NameVerdict]:
        """Verdicts for a selector's target argument and ability/aura argument."""
        if selector is None or isinstance(selector, ir.GlobalSelector):
            return []

        verdicts: list[NameVerdict | None] = []
        if selector.target_arg:
            verdicts.append(self.verify_pet(selector.target_arg))
        if isinstance(selector, ir.AbilitySelector):
            verdicts.append(self.verify_ability(join_named_id(selector.provided_name, selector.ability_id)))
        elif isinstance(selector, ir.AuraSelector):
            verdicts.append(self.verify_aura(join_named_id(selector.provided_name, selector.aura_id)))
        return [v for v in verdicts if v is not None]

    def verify_condition(self, condition: ir.Condition | None) -> list[NameVerdict]:
        if condition is None:
            return []
        verdicts: list[NameVerdict] = []
        for predicate in condition.predicates:
            verdicts.extend(self.verify_selector(predicate.selector))
        return verdicts

    def verify_action(self, node: ir.ActionNode) -> list[NameVerdict]:
        """Verdicts for an action's argument and its inline condition."""
        verdict = None
        if node.args is not None:
            if node.action_kind == ir.ActionKind.ABILITY:
                verdict = self.verify_ability(node.args)
            elif node.action_kind == ir.ActionKind.CHANGE and node.args != "next":
                verdict = self.verify_pet(node.args)

        verdicts = [verdict] if verdict is not None else []
        return verdicts + self.verify_condition(node.condition)

    def verify_tree(self, nodes: Sequence[ir.SyntaxNode]) -> list[tuple[int, NameVerdict]]:
        """Every verdict in the tree, paired with its source line."""
        results: list[tuple[int, NameVerdict]] = []
        for node in nodes:
            if isinstance(node, ir.ActionNode):
                results.extend((node.source_line, v) for v in self.verify_action(node))
            elif isinstance(node, ir.IfNode):
                results.extend((node.source_line, v) for v in self.verify_condition(node.condition))
                results.extend(self.verify_tree(node.children))
        return results


