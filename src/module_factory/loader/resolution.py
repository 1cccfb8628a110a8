"""Decide whether a module name is a relative path that needs resolving."""

from pathlib import Path

_RELATIVE_PREFIXES = ("./", "../", ".\\", "..\\")


def is_relative_path(name: str, *, legacy: bool = False) -> bool:
    """Return True when ``name`` is a relative filesystem path.

    Args:
        name: Module name from the definition
        legacy: Also treat a ``../`` anywhere in the name as relative

    Returns:
        True for names starting with ``./`` or ``../`` (or their backslash forms)
    """
    if legacy:
        return name.startswith("./") or "../" in name
    return name.startswith(_RELATIVE_PREFIXES)


def to_absolute_load_target(name: str, *, base_dir: Path | None = None, legacy: bool = False) -> str:
    """Return a file URI for relative names, and ``name`` unchanged otherwise.

    Absolute paths, ``file://`` URIs and dotted import names pass through. So do
    relative paths without a leading ``./`` or ``../`` (``plugins/x.py``) unless
    ``legacy`` applies; those are opened relative to the working directory, not
    ``base_dir``.
    """
    if not is_relative_path(name, legacy=legacy):
        return name
    root = base_dir if base_dir is not None else Path.cwd()
    return (root / name).resolve().as_uri()


__all__ = ["is_relative_path", "to_absolute_load_target"]
