"""
petscript CLI utilities.

Shared helpers used across CLI modules.
"""

import logging
import platform
from pathlib import Path

import typer

from petscript._version import get_version
from petscript.core.config import PetScriptConfig
from petscript.core.errors import make_error_context
from petscript.core.ir import ParseErrorNode
from petscript.core.names import NameCheck, NameVerdict

# Set by the main callback; wins over [logging] level in petscript.toml
_log_level_override: str | None = None


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"petscript version {get_version()}")
        typer.echo(f"  Python:        {platform.python_implementation()} {platform.python_version()}")
        typer.echo(f"  Platform:      {platform.system()} {platform.release()}")
        raise typer.Exit()


def set_log_level_override(level: str | None) -> None:
    global _log_level_override
    _log_level_override = level.upper() if level else None


def setup_logging(config: PetScriptConfig) -> None:
    """Configure root logging from the CLI option or the config file."""
    level_name = _log_level_override or config.logging.level
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        typer.echo(f"Unknown log level '{level_name}', using WARNING", err=True)
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def print_human_diagnostics(
    script: Path,
    errors: list[ParseErrorNode],
    verdicts: list[tuple[int, NameVerdict]],
) -> None:
    """Print diagnostics in human-readable format."""
    lines = script.read_text(encoding="utf-8").split("\n")
    for error in errors:
        context = make_error_context(script, lines, error.source_line)
        typer.echo(f"ERROR: {error.message}\n{context.format()}\n", err=True)

    for line, verdict in verdicts:
        severity = "ERROR" if verdict.check == NameCheck.MISMATCH else "WARNING"
        typer.echo(f"{severity}: line {line}: {describe_verdict(verdict)}", err=True)

    if not errors and not verdicts:
        typer.echo("OK: script is valid.")


def print_vscode_diagnostics(
    script: Path,
    errors: list[ParseErrorNode],
    verdicts: list[tuple[int, NameVerdict]],
) -> None:
    """Print diagnostics in VS Code format: file:line:col: severity: message"""
    lines = script.read_text(encoding="utf-8").split("\n")
    for error in errors:
        context = make_error_context(script, lines, error.source_line)
        typer.echo(f"{script}:{context.line}:{context.column}: error: {error.message}", err=True)

    for line, verdict in verdicts:
        context = make_error_context(script, lines, line)
        severity = "error" if verdict.check == NameCheck.MISMATCH else "warning"
        typer.echo(
            f"{script}:{line}:{context.column}: {severity}: {describe_verdict(verdict)}", err=True
        )

    if not errors and not verdicts:
        typer.echo("::notice: Validation successful")


def describe_verdict(verdict: NameVerdict) -> str:
    kind = verdict.kind.value
    if verdict.check == NameCheck.MISMATCH:
        return (
            f"{kind} name mismatch: script says '{verdict.provided_name}' "
            f"but catalog says '{verdict.resolved_name}' (id {verdict.ref_id})"
        )
    if verdict.check == NameCheck.NOT_FOUND:
        return f"{kind} id {verdict.ref_id} not found in name catalog"
    if verdict.check == NameCheck.NO_ID:
        return f"no {kind} id provided for '{verdict.raw}'; cannot verify name"
    return f"{kind} {verdict.raw} matches catalog"
