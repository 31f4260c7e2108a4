"""
Script commands for petscript CLI.

- parse: Print the syntax tree (rich tree or JSON)
- describe: Print each line as English
- check: Report parse errors and name problems
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from petscript.cli.utils import print_human_diagnostics, print_vscode_diagnostics, setup_logging
from petscript.core import ir
from petscript.core.config import PetScriptConfig, resolve_config
from petscript.core.describe import Describer, round_badge
from petscript.core.errors import PetScriptError
from petscript.core.names import CatalogState, NameCheck, NameResolver, NameVerifier
from petscript.core.parser import collect_errors, parse_file

console = Console()

ScriptArgument = Annotated[
    Path,
    typer.Argument(help="Pet battle script file", exists=True, dir_okay=False, readable=True),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to petscript.toml (default: search upwards)"),
]


def _load_config(config: Path | None, script: Path) -> PetScriptConfig:
    try:
        cfg = resolve_config(config, script)
    except PetScriptError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    setup_logging(cfg)
    return cfg


def _parse(script: Path) -> list[ir.SyntaxNode]:
    try:
        return parse_file(script)
    except PetScriptError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


def _node_label(node: ir.SyntaxNode) -> str:
    if isinstance(node, ir.IfNode):
        end = node.end_line if node.end_line is not None else "?"
        return (
            f"[bold]if[/bold] [cyan]{escape(f'[{node.condition_raw}]')}[/cyan]"
            f" [bright_black](lines {node.source_line}-{end})[/bright_black]"
        )
    if isinstance(node, ir.ActionNode):
        label = f"[green]{node.action_kind.value}[/green] {escape(node.raw_action)}"
        if node.condition_raw is not None:
            label += f" [cyan]{escape(f'[{node.condition_raw}]')}[/cyan]"
        return f"{label} [bright_black](line {node.source_line})[/bright_black]"
    if isinstance(node, ir.ParseErrorNode):
        return f"[red]error[/red] {escape(node.message)} [bright_black](line {node.source_line})[/bright_black]"
    return "[bright_black]--[/bright_black]"


def _add_nodes(tree: Tree, nodes: list[ir.SyntaxNode]) -> None:
    for node in nodes:
        branch = tree.add(_node_label(node))
        if isinstance(node, ir.IfNode):
            _add_nodes(branch, node.children)


def parse_command(
    script: ScriptArgument,
    json_output: Annotated[
        bool, typer.Option("--json", help="Print the syntax tree as JSON")
    ] = False,
) -> None:
    """
    Parse a script and print its syntax tree.

    Exits with code 1 when the tree contains parse errors.
    """
    nodes = _parse(script)

    if json_output:
        typer.echo(ir.SyntaxTree.dump_json(nodes, indent=2).decode())
    else:
        tree = Tree(f"[bold]{escape(script.name)}[/bold]")
        _add_nodes(tree, nodes)
        console.print(tree)

    if collect_errors(nodes):
        raise typer.Exit(code=1)


def describe_command(
    script: ScriptArgument,
    config: ConfigOption = None,
    no_names: Annotated[
        bool, typer.Option("--no-names", help="Do not look ids up in the name catalog")
    ] = False,
) -> None:
    """
    Print a plain-English reading of every line in a script.
    """
    cfg = _load_config(config, script)
    resolver = None
    if not no_names:
        resolver = NameResolver.from_files(cfg.catalog.abilities, cfg.catalog.pets)
    describer = Describer(resolver)

    nodes = _parse(script)
    root = Tree(f"[bold]{escape(script.name)}[/bold]")
    branches: list[Tree] = [root]
    for depth, node, text in describer.walk(nodes):
        del branches[depth + 1 :]
        label = escape(text)
        if isinstance(node, ir.ParseErrorNode):
            label = f"[red]{label}[/red]"
        badge = round_badge(getattr(node, "condition_raw", None))
        if badge:
            label = f"[magenta]{escape(badge)}[/magenta] {label}"
        branches.append(branches[depth].add(label))
    console.print(root)


def check_command(
    script: ScriptArgument,
    config: ConfigOption = None,
    format: Annotated[
        str, typer.Option("--format", "-f", help="Output format: 'human' or 'vscode'")
    ] = "human",
) -> None:
    """
    Report parse errors and ability/pet name problems in a script.

    Name mismatches are errors; unknown ids and bare names are warnings.
    Exits with code 1 on any error.
    """
    cfg = _load_config(config, script)
    nodes = _parse(script)
    errors = collect_errors(nodes)

    resolver = NameResolver.from_files(cfg.catalog.abilities, cfg.catalog.pets)
    if resolver.state == CatalogState.LOADED:
        verdicts = [
            (line, verdict)
            for line, verdict in NameVerifier(resolver).verify_tree(nodes)
            if verdict.is_problem
        ]
    else:
        typer.echo("Warning: name catalog unavailable, skipping name checks", err=True)
        verdicts = []

    if format == "vscode":
        print_vscode_diagnostics(script, errors, verdicts)
    else:
        print_human_diagnostics(script, errors, verdicts)

    if errors or any(verdict.check == NameCheck.MISMATCH for _, verdict in verdicts):
        raise typer.Exit(code=1)
