"""Dynamic import, dotted attribute lookup and file reads.

Dotted names go through ``importlib.import_module``. File paths and ``file://``
URIs are executed from source on every call; the module is registered in
``sys.modules`` under a name derived from its path so that dataclasses and
pickling inside it keep working.
"""

import hashlib
import importlib
import importlib.machinery
import importlib.util
import re
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path
from types import ModuleType
from typing import Any
from urllib.parse import unquote, urlparse
from urllib.request import url2pathname

from module_factory.exceptions import ModuleResolutionError

# Returned by get_path when a segment does not resolve
MISSING: Any = object()

_NON_IDENTIFIER = re.compile(r"\W")


def is_file_target(target: str) -> bool:
    """Return True when ``target`` names a file rather than a dotted import name."""
    if target.startswith("file:"):
        return True
    return "/" in target or "\\" in target or target.endswith(".py")


def to_path(target: str) -> Path:
    """Convert a file URI or path string to a Path."""
    if target.startswith("file:"):
        parsed = urlparse(target)
        return Path(url2pathname(unquote(parsed.path)))
    return Path(target)


def _dynamic_module_name(path: Path) -> str:
    digest = hashlib.sha1(str(path).encode("utf-8")).hexdigest()[:12]
    stem = _NON_IDENTIFIER.sub("_", path.stem)
    return f"module_factory_dynamic_{stem}_{digest}"


def _load_from_file(target: str) -> ModuleType:
    path = to_path(target).resolve()
    if not path.is_file():
        raise ModuleResolutionError(f"モジュールファイルが見つかりません: {path}", module_name=target)

    module_name = _dynamic_module_name(path)
    loader = None
    if path.suffix not in importlib.machinery.all_suffixes():
        # .py以外の拡張子はソースとして読み込む
        loader = importlib.machinery.SourceFileLoader(module_name, str(path))
    spec = importlib.util.spec_from_file_location(module_name, path, loader=loader)
    if spec is None or spec.loader is None:
        raise ModuleResolutionError(f"モジュール '{target}' のspecを作成できません", module_name=target)

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        sys.modules.pop(module_name, None)
        raise ModuleResolutionError(f"モジュール '{target}' の実行に失敗しました: {e}", module_name=target) from e
    return module


def import_target(target: str) -> ModuleType:
    """Import the module named by ``target``.

    Args:
        target: Dotted import name, filesystem path or file URI

    Returns:
        The imported module

    Raises:
        ModuleResolutionError: The module cannot be found, or raised while executing
    """
    if is_file_target(target):
        return _load_from_file(target)
    try:
        return importlib.import_module(target)
    except Exception as e:
        raise ModuleResolutionError(f"モジュール '{target}' のインポートに失敗しました: {e}", module_name=target) from e


def get_path(root: Any, dotted: str) -> Any:
    """Look up a dotted path (``foo.bar``) below ``root``.

    Mappings are indexed by key, sequences by integer segment, anything else by
    attribute. Returns ``MISSING`` when a segment does not resolve.
    """
    current = root
    for segment in dotted.split("."):
        if isinstance(current, Mapping):
            if segment not in current:
                return MISSING
            current = current[segment]
        elif isinstance(current, Sequence) and not isinstance(current, (str, bytes)) and segment.isdigit():
            index = int(segment)
            if index >= len(current):
                return MISSING
            current = current[index]
        else:
            try:
                current = getattr(current, segment)
            except AttributeError:
                return MISSING
    return current


def read_text(target: str, encoding: str = "utf-8") -> str:
    """Read a text file named by a path or file URI.

    Raises:
        OSError: The file cannot be read
        UnicodeDecodeError: The file is not valid in ``encoding``
    """
    return to_path(target).read_text(encoding=encoding)


__all__ = ["MISSING", "get_path", "import_target", "is_file_target", "read_text", "to_path"]
