"""
Name catalog commands for petscript CLI.

Downloads ability and pet names from the game data API and writes the two
JSON files that ``describe`` and ``check`` read.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from petscript.cli.utils import setup_logging
from petscript.core.catalog_fetch import CatalogFetcher
from petscript.core.config import resolve_config
from petscript.core.errors import PetScriptError
from petscript.core.names import write_catalog

console = Console()


def fetch_names_command(
    client_id: Annotated[
        str,
        typer.Option("--client-id", envvar="OAUTH_CLIENT_ID", help="API client id"),
    ],
    client_secret: Annotated[
        str,
        typer.Option("--client-secret", envvar="OAUTH_CLIENT_SECRET", help="API client secret"),
    ],
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to petscript.toml (default: search upwards)"),
    ] = None,
) -> None:
    """
    Download the ability and pet name catalog.

    Files are written to the [catalog] paths from petscript.toml.
    """
    try:
        cfg = resolve_config(config, Path.cwd())
        setup_logging(cfg)
        fetcher = CatalogFetcher(
            client_id,
            client_secret,
            region=cfg.api.region,
            locale=cfg.api.locale,
        )
        catalog = asyncio.run(fetcher.fetch_catalog())
        write_catalog(catalog, cfg.catalog.abilities, cfg.catalog.pets)
    except PetScriptError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    table = Table(title="Name catalog")
    table.add_column("Kind", style="cyan")
    table.add_column("Entries", justify="right")
    table.add_column("File")
    table.add_row("abilities", str(len(catalog.abilities)), str(cfg.catalog.abilities))
    table.add_row("pets", str(len(catalog.pets)), str(cfg.catalog.pets))
    console.print(table)
