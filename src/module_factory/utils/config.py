"""Configuration loading utilities for module-factory."""

import logging
import tomllib
from pathlib import Path

from pydantic import ValidationError

from module_factory.constants import CONFIG_TABLE
from module_factory.models.settings import FactorySettings
from module_factory.utils.env import get_config_path

logger = logging.getLogger(__name__)


def load_factory_settings(config_path: Path | None = None) -> FactorySettings | None:
    """Load FactorySettings from a TOML file.

    Args:
        config_path: Optional path to the settings file.
            If None, uses $MODULE_FACTORY_CONFIG.

    Returns:
        FactorySettings if the file exists and is valid, None otherwise.

    Note:
        Missing or invalid files do not raise. A warning is logged for invalid
        files and None is returned so callers fall back to default settings.
    """
    if config_path is None:
        config_path = get_config_path()
        if config_path is None:
            return None

    if not config_path.exists():
        return None

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Cannot read settings from %s: %s", config_path, e)
        return None

    # Extract [module_factory] section
    settings_data = data.get(CONFIG_TABLE)
    if settings_data is None:
        return None

    try:
        settings = FactorySettings.model_validate(settings_data)
    except ValidationError as e:
        logger.warning("Invalid [%s] settings in %s: %s", CONFIG_TABLE, config_path, e)
        return None

    # 相対パスのbase_dirは設定ファイルの場所を基準にする
    if settings.base_dir is not None and not settings.base_dir.is_absolute():
        settings = settings.model_copy(update={"base_dir": (config_path.parent / settings.base_dir).resolve()})
    return settings


def resolve_settings(config_path: Path | None = None) -> FactorySettings:
    """Return settings from ``config_path`` (or $MODULE_FACTORY_CONFIG), falling back to defaults."""
    return load_factory_settings(config_path) or FactorySettings()
