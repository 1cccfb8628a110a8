"""Load commands: run a definition file and print the validated value."""

import asyncio
import json
from pathlib import Path
from typing import Annotated, Any

import typer

from module_factory.cli.commands.definition import read_definition_file
from module_factory.exceptions import ModuleFactoryError
from module_factory.loader import load_instance, load_json_from_module, load_json_resource
from module_factory.utils.config import resolve_settings

load_app = typer.Typer(
    name="load",
    help="Load values described by module definition files",
)

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Settings TOML (defaults to $MODULE_FACTORY_CONFIG)"),
]


def _echo_value(value: Any) -> None:
    typer.echo(json.dumps(value, indent=2, ensure_ascii=False, default=repr))


@load_app.command("instance")
def instance(
    file: Annotated[Path, typer.Argument(help="ModuleDefinition JSON file")],
    config: ConfigOption = None,
) -> None:
    """Call the definition's factory or constructor and print the result."""
    definition = read_definition_file(file)
    settings = resolve_settings(config)
    try:
        result = asyncio.run(load_instance(definition, settings=settings))
    except ModuleFactoryError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e

    _echo_value(result.value)
    if result.was_async is not None:
        typer.echo(f"async factory: {str(result.was_async).lower()}", err=True)


@load_app.command("json")
def json_value(
    file: Annotated[Path, typer.Argument(help="ModuleDefinition JSON file")],
    from_module: Annotated[
        bool,
        typer.Option("--from-module", help="Read the JSON text from a module function or property"),
    ] = False,
    config: ConfigOption = None,
) -> None:
    """Load a JSON resource (or JSON text produced by a module) and print it."""
    definition = read_definition_file(file)
    settings = resolve_settings(config)
    loader = load_json_from_module if from_module else load_json_resource
    try:
        value = asyncio.run(loader(definition, settings=settings))
    except ModuleFactoryError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e

    _echo_value(value)
