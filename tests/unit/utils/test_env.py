"""Unit tests for environment utilities."""

import os
from pathlib import Path
from unittest.mock import patch

from module_factory.utils.env import get_config_path


class TestGetConfigPath:
    """Test get_config_path function."""

    def test_get_config_path_success(self) -> None:
        """Test get_config_path returns Path when MODULE_FACTORY_CONFIG is set."""
        with patch.dict(os.environ, {"MODULE_FACTORY_CONFIG": "/path/to/settings.toml"}):
            result = get_config_path()
            assert result == Path("/path/to/settings.toml")
            assert isinstance(result, Path)

    def test_get_config_path_missing_env_var(self) -> None:
        """Test get_config_path returns None when MODULE_FACTORY_CONFIG is not set."""
        with patch.dict(os.environ, {}, clear=True):
            assert get_config_path() is None

    def test_get_config_path_blank_env_var(self) -> None:
        """Test get_config_path returns None when MODULE_FACTORY_CONFIG is blank."""
        with patch.dict(os.environ, {"MODULE_FACTORY_CONFIG": "  "}):
            assert get_config_path() is None
