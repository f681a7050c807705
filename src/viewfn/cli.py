"""viewfn CLI

Usage:
    viewfn render page.j2 -d data.yaml       # Render a template file
    viewfn render page.j2 -o page.html       # Render to a file
    viewfn functions                         # List the function table
    viewfn functions -n strings              # List one namespace
    viewfn functions --aliases               # List short aliases
    viewfn call first 2 "[1, 2, 3]"          # Call one function, print JSON
    viewfn --version                         # Show version
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Any, List, NoReturn, Optional

import jinja2
import msgspec
import typer
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from viewfn._version import __version__
from viewfn.config import ViewfnConfig, find_config_file
from viewfn.core.cast import to_text
from viewfn.core.value import Outcome
from viewfn.exceptions import ViewfnError
from viewfn.extensions import get_viewfn_jinja_env
from viewfn.registry import build_table

log = logging.getLogger(__name__)

console = Console()

typer_app = typer.Typer(no_args_is_help=True)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the viewfn CLI.

    Log levels:
    - Normal: Only warnings/errors shown (e.g. omitted function failures)
    - Verbose (-v): INFO level
    - Debug (VIEWFN_DEBUG=1): DEBUG level - shows degraded calls as well
    """
    debug = bool(os.environ.get("VIEWFN_DEBUG"))
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=verbose,
        show_path=debug,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    viewfn_logger = logging.getLogger("viewfn")
    viewfn_logger.setLevel(level)
    viewfn_logger.handlers = [handler]
    viewfn_logger.propagate = False


def exit_with_error(message: str, exit_code: int = 1) -> NoReturn:
    """Exit the program with an error message."""
    typer.echo(f"Error: {message}", err=True)
    sys.exit(exit_code)


def load_config(config_path: Optional[Path], seed: Optional[int] = None) -> ViewfnConfig:
    """Load the explicit config file, or viewfn.yaml from cwd or its parents."""
    path = config_path if config_path is not None else find_config_file()
    if config_path is not None and not config_path.exists():
        exit_with_error(f"Config file not found: {config_path}")

    config = ViewfnConfig.load(path) if path is not None else ViewfnConfig()
    if seed is not None:
        config = config.model_copy(update={"seed": seed})
    log.info("Using config %s", path if path is not None else "(defaults)")
    return config


def load_data(data_path: Optional[Path]) -> dict[str, Any]:
    """Read template data from a YAML or JSON file."""
    if data_path is None:
        return {}
    if not data_path.exists():
        exit_with_error(f"Data file not found: {data_path}")

    try:
        data = yaml.safe_load(data_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        exit_with_error(f"Invalid data file {data_path}: {e}")

    if not isinstance(data, dict):
        exit_with_error(f"Data file must contain a mapping: {data_path}")
    return data


def parse_arg(arg: str) -> Any:
    """Parse a command-line argument as a YAML value; fall back to the raw text."""
    try:
        return yaml.safe_load(arg)
    except yaml.YAMLError:
        return arg


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"viewfn {__version__}")
        raise typer.Exit()


@typer_app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Value-manipulation functions for Jinja2 templates."""


@typer_app.command()
def render(
    template: Path = typer.Argument(..., help="Template file to render."),
    data: Optional[Path] = typer.Option(
        None, "-d", "--data", help="YAML or JSON file with template variables."
    ),
    config_path: Optional[Path] = typer.Option(
        None, "-c", "--config", help="Path to viewfn.yaml."
    ),
    seed: Optional[int] = typer.Option(
        None, "--seed", help="Seed for shuffle and math.Rand."
    ),
    output: Optional[Path] = typer.Option(
        None, "-o", "--output", help="Write the result to a file instead of stdout."
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose output."),
) -> None:
    """Render a template file."""
    setup_logging(verbose)

    if not template.exists():
        exit_with_error(f"Template not found: {template}")

    try:
        config = load_config(config_path, seed)
        env = get_viewfn_jinja_env(config)
        result = env.from_string(template.read_text(encoding="utf-8")).render(load_data(data))
    except ViewfnError as e:
        exit_with_error(str(e))
    except jinja2.TemplateError as e:
        exit_with_error(f"Template error in {template}: {e}")

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(result, encoding="utf-8")
        log.info("Wrote %s", output)
    else:
        typer.echo(result, nl=False)


@typer_app.command()
def functions(
    namespace: Optional[str] = typer.Option(
        None, "-n", "--namespace", help="Only list this namespace."
    ),
    aliases: bool = typer.Option(False, "--aliases", help="List short aliases instead."),
    config_path: Optional[Path] = typer.Option(
        None, "-c", "--config", help="Path to viewfn.yaml."
    ),
) -> None:
    """List the available template functions."""
    setup_logging()

    try:
        table = build_table(load_config(config_path))
    except ViewfnError as e:
        exit_with_error(str(e))

    if aliases:
        alias_table = Table()
        alias_table.add_column("Alias", style="cyan", no_wrap=True)
        alias_table.add_column("Function", no_wrap=True)
        for alias, target in table.aliases().items():
            if namespace is None or target.startswith(f"{namespace}."):
                alias_table.add_row(alias, target)
        console.print(alias_table)
        return

    if namespace is not None and namespace not in table.namespaces():
        exit_with_error(f"Unknown namespace: {namespace}")

    entries = table.entries(namespace)
    func_table = Table()
    func_table.add_column("Function", style="cyan", no_wrap=True)
    func_table.add_column("Args", justify="right")
    func_table.add_column("Description")

    for entry in entries:
        args = f"{entry.arity}+" if entry.variadic else str(entry.arity)
        description = entry.doc
        if entry.fallible:
            description = f"[yellow]fallible[/yellow] {description}".rstrip()
        func_table.add_row(entry.name, args, description)

    console.print(func_table)


@typer_app.command()
def call(
    name: str = typer.Argument(..., help="Function name or alias."),
    args: Optional[List[str]] = typer.Argument(None, help="Arguments, parsed as YAML."),
    config_path: Optional[Path] = typer.Option(
        None, "-c", "--config", help="Path to viewfn.yaml."
    ),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for random functions."),
) -> None:
    """Call one function and print the result as JSON."""
    setup_logging()

    try:
        table = build_table(load_config(config_path, seed))
        entry = table.resolve(name)
    except ViewfnError as e:
        exit_with_error(str(e))

    values = [parse_arg(arg) for arg in args or []]
    log.debug("Calling %s with %r", entry.name, values)
    try:
        result = entry.func(*values)
    except TypeError as e:
        exit_with_error(f"Bad arguments for {entry.name}: {e}")

    if entry.fallible and isinstance(result, Outcome):
        if not result.ok:
            exit_with_error(f"{entry.name} failed: {result.error}")
        result = result.value

    typer.echo(msgspec.json.encode(result, enc_hook=to_text).decode("utf-8"))


def app() -> None:
    """Entry point for the CLI."""
    typer_app()


if __name__ == "__main__":
    app()
