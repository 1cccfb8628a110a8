"""module-factory: load code units described as data, then validate what they produce."""

from module_factory.exceptions import (
    AsyncContractError,
    ConfigurationError,
    ContractViolationError,
    DefinitionConflictError,
    DefinitionIncompleteError,
    DefinitionStructureError,
    FactoryReferenceError,
    ImmutableStateError,
    InvalidConstructorReferenceError,
    InvalidFactoryReferenceError,
    MissingFactoryReferenceError,
    ModuleFactoryError,
    ModuleResolutionError,
    ResourceLoadError,
    SchemaCompileError,
    SchemaValidationError,
    TypeMismatchError,
    TypeOfRegistryError,
    ValidationFailure,
)
from module_factory.loader import (
    load_from_module,
    load_from_module_sync,
    load_instance,
    load_json_from_module,
    load_json_from_module_sync,
    load_json_resource,
    load_json_resource_sync,
)
from module_factory.models import (
    FactorySettings,
    LoadResult,
    LoadSchema,
    ModuleDefinition,
    TypeOf,
    ValidationErrorEntry,
    is_constrained_module_definition,
    is_load_schema,
    is_module_definition,
    is_type_of,
    validate_module_definition,
)
from module_factory.schema import CheckFunction, ModuleFactoryLogger, async_check, compile_schema, sync_check

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Load operations
    "load_from_module",
    "load_from_module_sync",
    "load_instance",
    "load_json_from_module",
    "load_json_from_module_sync",
    "load_json_resource",
    "load_json_resource_sync",
    # Definitions
    "FactorySettings",
    "LoadResult",
    "LoadSchema",
    "ModuleDefinition",
    "TypeOf",
    "ValidationErrorEntry",
    "is_constrained_module_definition",
    "is_load_schema",
    "is_module_definition",
    "is_type_of",
    "validate_module_definition",
    # Schemas
    "CheckFunction",
    "ModuleFactoryLogger",
    "async_check",
    "compile_schema",
    "sync_check",
    # Exceptions
    "AsyncContractError",
    "ConfigurationError",
    "ContractViolationError",
    "DefinitionConflictError",
    "DefinitionIncompleteError",
    "DefinitionStructureError",
    "FactoryReferenceError",
    "ImmutableStateError",
    "InvalidConstructorReferenceError",
    "InvalidFactoryReferenceError",
    "MissingFactoryReferenceError",
    "ModuleFactoryError",
    "ModuleResolutionError",
    "ResourceLoadError",
    "SchemaCompileError",
    "SchemaValidationError",
    "TypeMismatchError",
    "TypeOfRegistryError",
    "ValidationFailure",
]
