import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ConfigError

CONFIG_FILENAME = "petscript.toml"


@dataclass
class CatalogConfig:
    """Where the name catalog JSON files live."""

    abilities: Path = Path("pet-abilities.json")
    pets: Path = Path("pet-list.json")


@dataclass
class ApiConfig:
    """Game data API settings for ``petscript fetch-names``."""

    region: str = "us"
    locale: str = "en_US"
    # Credentials come from environment: OAUTH_CLIENT_ID, OAUTH_CLIENT_SECRET


@dataclass
class LoggingConfig:
    level: str = "WARNING"


@dataclass
class PetScriptConfig:
    """Settings loaded from petscript.toml.

    Example petscript.toml:

        [catalog]
        abilities = "data/pet-abilities.json"
        pets = "data/pet-list.json"

        [api]
        region = "eu"
        locale = "en_GB"

        [logging]
        level = "INFO"
    """

    catalog: CatalogConfig = field(default_factory=CatalogConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    path: Path | None = None  # File this config was loaded from


def _get_str(section: dict, key: str, default: str, table: str) -> str:
    value = section.get(key, default)
    if not isinstance(value, str):
        raise ConfigError(f"[{table}] {key} must be a string, got {type(value).__name__}")
    return value


def _get_table(data: dict, name: str) -> dict:
    value = data.get(name, {})
    if not isinstance(value, dict):
        raise ConfigError(f"[{name}] must be a table")
    return value


def load_config(path: Path) -> PetScriptConfig:
    """
    Load petscript.toml.

    Relative catalog paths are resolved against the file's directory.

    Raises:
        ConfigError: If the file is not valid TOML or a value has the wrong type
    """
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    catalog_data = _get_table(data, "catalog")
    api_data = _get_table(data, "api")
    logging_data = _get_table(data, "logging")

    root = path.parent
    defaults = CatalogConfig()
    catalog_config = CatalogConfig(
        abilities=root / _get_str(catalog_data, "abilities", str(defaults.abilities), "catalog"),
        pets=root / _get_str(catalog_data, "pets", str(defaults.pets), "catalog"),
    )

    api_config = ApiConfig(
        region=_get_str(api_data, "region", "us", "api"),
        locale=_get_str(api_data, "locale", "en_US", "api"),
    )

    logging_config = LoggingConfig(
        level=_get_str(logging_data, "level", "WARNING", "logging").upper(),
    )

    return PetScriptConfig(
        catalog=catalog_config,
        api=api_config,
        logging=logging_config,
        path=path,
    )


def find_config(start: Path) -> Path | None:
    """Walk up from ``start`` looking for petscript.toml."""
    current = start.resolve()
    if current.is_file():
        current = current.parent
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def resolve_config(explicit: Path | None, start: Path) -> PetScriptConfig:
    """
    Load the explicit config file, else the nearest petscript.toml above
    ``start``, else defaults relative to the current directory.
    """
    path = explicit or find_config(start)
    if path is None:
        return PetScriptConfig()
    return load_config(path)
