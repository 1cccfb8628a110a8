"""Models package for module-factory."""

from module_factory.models.load_result import LoadResult
from module_factory.models.module_definition import (
    DISCRIMINATORS,
    LoadSchema,
    ModuleDefinition,
    coerce_definition,
    is_constrained_module_definition,
    is_load_schema,
    is_module_definition,
    validate_module_definition,
)
from module_factory.models.settings import FactorySettings
from module_factory.models.type_of import MAX_SAFE_INTEGER, TypeOf, is_type_of, type_tag
from module_factory.models.validation_entry import ValidationErrorEntry

__all__ = [
    # Definition models
    "DISCRIMINATORS",
    "LoadSchema",
    "ModuleDefinition",
    "coerce_definition",
    "is_constrained_module_definition",
    "is_load_schema",
    "is_module_definition",
    "validate_module_definition",
    # TypeOf registry
    "MAX_SAFE_INTEGER",
    "TypeOf",
    "is_type_of",
    "type_tag",
    # Results
    "LoadResult",
    "ValidationErrorEntry",
    # Settings
    "FactorySettings",
]
