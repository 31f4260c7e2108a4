"""Shared pytest fixtures for petscript tests."""

from pathlib import Path

import pytest

from petscript.core.names import NameCatalog, NameResolver, write_catalog

SAMPLE_SCRIPT = """if [weather != Moonlight]
ability(Moonfire:595)
ability(#2)
standby
endif
ability(#1)"""


@pytest.fixture
def sample_script() -> str:
    """Return the canonical weather-guarded sample script."""
    return SAMPLE_SCRIPT


@pytest.fixture
def catalog() -> NameCatalog:
    """Return a small name catalog."""
    return NameCatalog(
        abilities={
            "595": "Moonfire",
            "218": "Rampage",
            "459": "Wind-up:458",
            "543": "Shattered Defenses",
        },
        pets={
            "1532": "Ikky",
            "844": "Mechanical Pandaren Dragonling",
        },
    )


@pytest.fixture
def resolver(catalog: NameCatalog) -> NameResolver:
    """Return a loaded resolver over the sample catalog."""
    return NameResolver(catalog)


@pytest.fixture
def catalog_files(tmp_path: Path, catalog: NameCatalog) -> tuple[Path, Path]:
    """Write the sample catalog to disk and return (abilities, pets) paths."""
    abilities = tmp_path / "pet-abilities.json"
    pets = tmp_path / "pet-list.json"
    write_catalog(catalog, abilities, pets)
    return abilities, pets
