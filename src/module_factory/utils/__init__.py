"""Utility functions for module-factory."""

from module_factory.utils.config import load_factory_settings, resolve_settings
from module_factory.utils.env import get_config_path

__all__ = [
    "get_config_path",
    "load_factory_settings",
    "resolve_settings",
]
