"""Constants for module-factory."""

from module_factory.constants.defaults import (
    ASYNC_SCHEMA_FLAG,
    CONFIG_ENV_VAR,
    CONFIG_TABLE,
    CUSTOM_KEYWORD,
    DEFAULT_FACTORY_NAME,
    LOGGER_NAME,
)

__all__ = [
    "ASYNC_SCHEMA_FLAG",
    "CONFIG_ENV_VAR",
    "CONFIG_TABLE",
    "CUSTOM_KEYWORD",
    "DEFAULT_FACTORY_NAME",
    "LOGGER_NAME",
]
