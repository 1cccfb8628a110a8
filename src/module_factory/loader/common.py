"""Steps shared by the instance and JSON loaders."""

from collections.abc import Mapping
from types import ModuleType
from typing import Any, TypeVar

from module_factory.exceptions import DefinitionStructureError, ModuleFactoryError, ModuleResolutionError
from module_factory.loader.importer import import_target
from module_factory.loader.resolution import to_absolute_load_target
from module_factory.models.module_definition import ModuleDefinition, coerce_definition
from module_factory.models.settings import FactorySettings
from module_factory.schema.adapter import ModuleFactoryLogger, SchemaStrategy, classify_load_schema

E = TypeVar("E", bound=Exception)


def fail(log: ModuleFactoryLogger, error: E) -> E:
    """Log ``error`` once at the point of detection and hand it back for raising."""
    log.error(str(error))
    return error


def clean_name(name: str | None) -> str | None:
    """Strip a discriminator; blank names count as absent."""
    if name is None:
        return None
    stripped = name.strip()
    return stripped or None


def definition_from(candidate: ModuleDefinition | Mapping[str, Any], log: ModuleFactoryLogger) -> ModuleDefinition:
    try:
        return coerce_definition(candidate)
    except DefinitionStructureError as e:
        log.error(str(e))
        raise


def strategy_for(definition: ModuleDefinition, log: ModuleFactoryLogger) -> SchemaStrategy:
    """Classify the definition's load schema, logging compile failures."""
    try:
        return classify_load_schema(definition.load_schema)
    except (ModuleFactoryError, TypeError) as e:
        log.error("Invalid load schema for %s: %s", definition.module_name, e)
        raise


def resolve_module(definition: ModuleDefinition, settings: FactorySettings, log: ModuleFactoryLogger) -> ModuleType:
    """Resolve the definition's module name and import it."""
    target = to_absolute_load_target(
        definition.module_name,
        base_dir=settings.base_dir,
        legacy=settings.legacy_relative_paths,
    )
    log.debug("Resolving module %s as %s", definition.module_name, target)
    try:
        return import_target(target)
    except ModuleResolutionError as e:
        log.error(str(e))
        raise


__all__ = ["clean_name", "definition_from", "fail", "resolve_module", "strategy_for"]
