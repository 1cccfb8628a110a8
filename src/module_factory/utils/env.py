"""Environment variable utilities for module-factory."""

import os
from pathlib import Path

from module_factory.constants import CONFIG_ENV_VAR


def get_config_path() -> Path | None:
    """Get the settings file from the MODULE_FACTORY_CONFIG environment variable.

    Returns:
        Path to the TOML settings file, or None when the variable is unset or empty
    """
    config_path = os.environ.get(CONFIG_ENV_VAR, "").strip()
    if not config_path:
        return None
    return Path(config_path)
