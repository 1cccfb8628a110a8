"""CLIコマンドモジュール"""

from module_factory.cli.commands.definition import definition_app
from module_factory.cli.commands.load import load_app

__all__ = ["definition_app", "load_app"]
