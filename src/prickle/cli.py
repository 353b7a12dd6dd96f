# src/prickle/cli.py
"""CLI for running prickle properties outside a test framework.

Targets are named ``module:attribute``. The attribute may be a
``Property`` (or ``Gen`` for ``sample``) or a zero-argument callable
returning one.

Usage:
    # Check a property with defaults
    prickle check tests.props:reverse_involutive

    # Check with a preset and a fixed seed
    prickle check tests.props:reverse_involutive --preset=thorough --seed=42

    # Replay a reported failure
    prickle recheck tests.props:all_small 3_8412..._9122..._0:1

    # Look at what a generator produces
    prickle sample tests.props:small_lists --size=20 --count=3
"""

from __future__ import annotations

import importlib
import json
from pathlib import Path
from typing import Annotated, Any

import typer

from prickle.config import PropertyConfig, list_presets, load_config
from prickle.errors import RecheckDataError
from prickle.gen import Gen
from prickle.logging import configure_logging
from prickle.property import Property, report, report_recheck
from prickle.report import render
from prickle.seed import Seed

app = typer.Typer(
    name="prickle",
    help="prickle: property-based testing with integrated shrinking.",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from prickle import __version__

        typer.echo(f"prickle version {__version__}")
        raise typer.Exit()


def _fail(message: str) -> typer.Exit:
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    return typer.Exit(1)


@app.callback()
def _main(
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            "-l",
            help="Log level: DEBUG, INFO, WARNING or ERROR.",
        ),
    ] = "WARNING",
    json_logs: Annotated[
        bool,
        typer.Option(
            "--json-logs",
            help="Emit logs as JSON lines.",
        ),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
) -> None:
    """Configure logging for every command."""
    try:
        configure_logging(json_output=json_logs, level=log_level)
    except ValueError as e:
        raise _fail(str(e)) from e


def _resolve(target: str, expected: type) -> Any:
    """Import ``module:attribute`` and return an instance of ``expected``."""
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise _fail(f"Target must be 'module:attribute', got {target!r}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise _fail(f"Cannot import module {module_name!r}: {e}") from e

    try:
        obj = getattr(module, attr)
    except AttributeError as e:
        raise _fail(f"Module {module_name!r} has no attribute {attr!r}") from e

    if not isinstance(obj, expected) and callable(obj):
        obj = obj()
    if not isinstance(obj, expected):
        raise _fail(f"{target} is a {type(obj).__name__}, expected {expected.__name__}")
    return obj


def _load(preset: str | None, config_file: Path | None, cli_overrides: dict[str, Any]) -> PropertyConfig:
    try:
        return load_config(preset=preset, config_file=config_file, cli_overrides=cli_overrides)
    except FileNotFoundError as e:
        raise _fail(str(e)) from e
    except Exception as e:
        typer.secho(f"Configuration error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from e


@app.command()
def check(
    target: Annotated[str, typer.Argument(help="Property to check, as module:attribute.")],
    preset: Annotated[
        str | None,
        typer.Option(
            "--preset",
            "-p",
            help="Preset configuration to use. Use 'prickle presets' to list available presets.",
        ),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to YAML configuration file.",
            exists=True,
            file_okay=True,
            dir_okay=False,
            resolve_path=True,
        ),
    ] = None,
    tests: Annotated[
        int | None,
        typer.Option("--tests", "-n", help="Successful tests required to pass.", min=1),
    ] = None,
    discards: Annotated[
        int | None,
        typer.Option("--discards", help="Discards tolerated before giving up.", min=0),
    ] = None,
    shrinks: Annotated[
        int | None,
        typer.Option("--shrinks", help="Maximum shrink steps after a failure.", min=0),
    ] = None,
    seed: Annotated[
        int | None,
        typer.Option("--seed", "-s", help="Seed for a reproducible run."),
    ] = None,
) -> None:
    """Check a property and print its report.

    Configuration precedence (highest to lowest):
    1. Command-line flags
    2. Config file (--config)
    3. Preset (--preset)
    4. Built-in defaults

    Exits with status 1 if the property fails or gives up.
    """
    cli_overrides: dict[str, Any] = {}
    if tests is not None:
        cli_overrides["test_limit"] = tests
    if discards is not None:
        cli_overrides["discard_limit"] = discards
    if shrinks is not None:
        cli_overrides["shrink_limit"] = shrinks

    config = _load(preset, config_file, cli_overrides)
    prop = _resolve(target, Property)
    result = report(prop, config, seed=Seed.from_int(seed) if seed is not None else None)

    typer.echo(render(result))
    if not result.passed:
        raise typer.Exit(1)


@app.command()
def recheck(
    target: Annotated[str, typer.Argument(help="Property to replay, as module:attribute.")],
    token: Annotated[str, typer.Argument(help="Recheck data printed with the original failure.")],
) -> None:
    """Replay a failure from its recheck data without searching again."""
    prop = _resolve(target, Property)
    try:
        result = report_recheck(prop, token)
    except RecheckDataError as e:
        raise _fail(str(e)) from e

    typer.echo(render(result))
    if not result.passed:
        raise typer.Exit(1)


@app.command()
def sample(
    target: Annotated[str, typer.Argument(help="Generator to sample, as module:attribute.")],
    size: Annotated[int, typer.Option("--size", help="Size parameter.", min=1)] = 10,
    count: Annotated[int, typer.Option("--count", "-n", help="Number of samples.", min=1)] = 5,
    seed: Annotated[
        int | None,
        typer.Option("--seed", "-s", help="Seed for reproducible samples."),
    ] = None,
    shrinks: Annotated[
        int,
        typer.Option("--shrinks", help="Immediate shrinks shown per sample.", min=0),
    ] = 10,
) -> None:
    """Print sampled outcomes of a generator with their first shrinks."""
    gen = _resolve(target, Gen)
    typer.echo(
        gen.render_sample(
            size,
            count,
            Seed.from_int(seed) if seed is not None else None,
            max_shrinks=shrinks,
        )
    )


@app.command()
def presets() -> None:
    """List available preset configurations."""
    available = list_presets()

    if not available:
        typer.echo("No presets found.")
        return

    typer.secho("Available presets:", fg=typer.colors.GREEN)
    for name in available:
        typer.echo(f"  - {name}")

    typer.echo()
    typer.echo("Use with: prickle check <target> --preset=<name>")


@app.command()
def show_config(
    preset: Annotated[
        str | None,
        typer.Option("--preset", "-p", help="Preset to show configuration for."),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Config file to show.",
            exists=True,
            file_okay=True,
            dir_okay=False,
            resolve_path=True,
        ),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: json or yaml."),
    ] = "yaml",
) -> None:
    """Show the effective configuration merged from preset and config file."""
    config = _load(preset, config_file, {})
    config_dict = config.model_dump()

    if output_format == "json":
        typer.echo(json.dumps(config_dict, indent=2))
    else:
        import yaml

        typer.echo(yaml.dump(config_dict, default_flow_style=False, sort_keys=False))


def main() -> None:
    """Entry point for the prickle CLI."""
    app()


if __name__ == "__main__":
    main()
