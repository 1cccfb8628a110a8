"""Schema compilation and load-time validation."""

from module_factory.schema.adapter import (
    ModuleFactoryLogger,
    SchemaKind,
    SchemaStrategy,
    classify_load_schema,
    default_logger,
    validate_value,
    validate_value_async,
    validate_value_sync,
)
from module_factory.schema.compiler import CheckFunction, async_check, compile_schema, sync_check

__all__ = [
    "CheckFunction",
    "ModuleFactoryLogger",
    "SchemaKind",
    "SchemaStrategy",
    "async_check",
    "classify_load_schema",
    "compile_schema",
    "default_logger",
    "sync_check",
    "validate_value",
    "validate_value_async",
    "validate_value_sync",
]
