"""
petscript CLI package.

- script.py: parse, describe, check
- names.py: fetch-names
- utils.py: Shared utilities
"""

import sys
from typing import Annotated

import typer

from petscript._version import get_version
from petscript.cli.utils import set_log_level_override, version_callback

__version__ = get_version()

app = typer.Typer(
    help="""petscript - Pet Battle Script parser

Commands:
  • parse, describe, check
    → Read a script file and show its syntax tree, an English reading,
      or name and structure diagnostics

  • fetch-names
    → Download the ability and pet name catalog from the game data API
""",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            callback=version_callback,
            is_eager=True,
            help="Show version and environment information",
        ),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            envvar="PETSCRIPT_LOG_LEVEL",
            help="Logging level (DEBUG, INFO, WARNING, ...). Overrides petscript.toml",
        ),
    ] = None,
) -> None:
    """petscript CLI main callback for global options."""
    set_log_level_override(log_level)


from petscript.cli.names import fetch_names_command  # noqa: E402
from petscript.cli.script import check_command, describe_command, parse_command  # noqa: E402

app.command(name="parse")(parse_command)
app.command(name="describe")(describe_command)
app.command(name="check")(check_command)
app.command(name="fetch-names")(fetch_names_command)


def main(argv: list[str] | None = None) -> None:
    app(args=argv, standalone_mode=True)


__all__ = [
    "__version__",
    "app",
    "main",
    "version_callback",
]


if __name__ == "__main__":
    main(sys.argv[1:])
