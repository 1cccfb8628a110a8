"""CLI entry point for module-factory."""

import logging

import typer

from module_factory import __version__
from module_factory.cli.commands import definition_app, load_app

app = typer.Typer(
    name="module-factory",
    help="Load code units described as data and validate what they produce",
)

# サブコマンドを登録
app.add_typer(definition_app, name="definition")
app.add_typer(load_app, name="load")


@app.command()
def version() -> None:
    """Show version information."""
    typer.echo(f"module-factory version {__version__}")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version_flag: bool = typer.Option(False, "--version", "-V", help="Show version information"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Load code units described as data and validate what they produce."""
    if version_flag:
        typer.echo(f"module-factory version {__version__}")
        raise typer.Exit()
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


if __name__ == "__main__":
    app()
