"""定義ファイル検証CLIコマンド.

JSONで書かれたModuleDefinitionを構造検証する。
"""

import json
from pathlib import Path
from typing import Any

import typer

from module_factory.models import validate_module_definition

definition_app = typer.Typer(
    name="definition",
    help="モジュール定義の管理コマンド",
)


def read_definition_file(path: Path) -> dict[str, Any]:
    """JSON定義ファイルを読み込む.

    Args:
        path: 定義ファイルのパス

    Returns:
        定義のマッピング

    Raises:
        typer.Exit: 読み込みに失敗した場合、またはJSONオブジェクトでない場合
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        typer.echo(f"エラー: 定義ファイルを読み込めません: {e}", err=True)
        raise typer.Exit(code=1) from e
    if not isinstance(data, dict):
        typer.echo("エラー: 定義ファイルはJSONオブジェクトである必要があります", err=True)
        raise typer.Exit(code=1)
    return data


@definition_app.command("validate")
def validate(
    file: Path = typer.Argument(..., help="ModuleDefinitionのJSONファイル"),
) -> None:
    """定義ファイルを構造検証する."""
    result = validate_module_definition(read_definition_file(file))
    if result is True:
        typer.echo("valid")
        return

    for entry in result:
        typer.echo(f"{entry.field}: {entry.message} ({entry.type})", err=True)
    raise typer.Exit(code=1)
