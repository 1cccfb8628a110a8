"""JSON loaders.

``load_json_resource`` reads ``module_name`` as a text file and parses it.
``load_json_from_module`` imports ``module_name`` and takes the JSON text from a
string-producing function or a string property. Both send the parsed value
through the schema adapter, exactly like the instance loader.
"""

import asyncio
import inspect
import json
import weakref
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from module_factory.exceptions import (
    AsyncContractError,
    ContractViolationError,
    DefinitionConflictError,
    DefinitionIncompleteError,
    InvalidFactoryReferenceError,
    ResourceLoadError,
)
from module_factory.loader.common import clean_name, definition_from, fail, resolve_module, strategy_for
from module_factory.loader.importer import MISSING, get_path, read_text
from module_factory.loader.resolution import is_relative_path
from module_factory.models.module_definition import ModuleDefinition
from module_factory.models.settings import FactorySettings
from module_factory.schema.adapter import (
    ModuleFactoryLogger,
    SchemaKind,
    SchemaStrategy,
    default_logger,
    validate_value_async,
    validate_value_sync,
)
from module_factory.schema.compiler import discard_awaitable


def _parse(text: str, source: str, log: ModuleFactoryLogger) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise fail(log, ResourceLoadError(f"malformed JSON in {source}: {e}")) from e


def _refuse_async_check(definition: ModuleDefinition, strategy: SchemaStrategy, log: ModuleFactoryLogger) -> None:
    if strategy.kind is SchemaKind.ASYNC_CHECK:
        raise fail(
            log,
            AsyncContractError(
                f"asynchronous check cannot be used when loading {definition.module_name} synchronously"
            ),
        )


# JSON resource files


def _resource_path(definition: ModuleDefinition, settings: FactorySettings) -> str:
    name = definition.module_name
    if settings.base_dir is not None and is_relative_path(name, legacy=settings.legacy_relative_paths):
        return str(settings.base_dir / name)
    return name


def _read_failure(source: str, error: Exception, log: ModuleFactoryLogger) -> ResourceLoadError:
    return fail(log, ResourceLoadError(f"cannot read JSON resource {source}: {error}"))


async def load_json_resource(
    definition: ModuleDefinition | Mapping[str, Any],
    log: ModuleFactoryLogger | None = None,
    *,
    settings: FactorySettings | None = None,
) -> Any:
    """JSONファイルを読み込み、検証済みの値を返す。

    ``module_name``はファイルパス（作業ディレクトリ基準の相対パス可）またはfile URI。

    Raises:
        ResourceLoadError: 読み込みまたはパースに失敗した場合
        ValidationFailure: 検証に失敗した場合
    """
    log = log or default_logger()
    settings = settings or FactorySettings()
    module_def = definition_from(definition, log)
    strategy = strategy_for(module_def, log)
    source = _resource_path(module_def, settings)

    try:
        text = await asyncio.to_thread(read_text, source, settings.encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise _read_failure(source, e, log) from e

    value = _parse(text, source, log)
    return await validate_value_async(value, module_def.module_name, module_def, log, strategy)


def load_json_resource_sync(
    definition: ModuleDefinition | Mapping[str, Any],
    log: ModuleFactoryLogger | None = None,
    *,
    settings: FactorySettings | None = None,
) -> Any:
    """Synchronous ``load_json_resource``; refuses asynchronous checks."""
    log = log or default_logger()
    settings = settings or FactorySettings()
    module_def = definition_from(definition, log)
    strategy = strategy_for(module_def, log)
    _refuse_async_check(module_def, strategy, log)
    source = _resource_path(module_def, settings)

    try:
        text = read_text(source, settings.encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise _read_failure(source, e, log) from e

    value = _parse(text, source, log)
    return validate_value_sync(value, module_def.module_name, module_def, log, strategy)


# JSON produced by a module


# A coroutine can be awaited once, but a module-level coroutine property is
# read by every load of an imported (cached) module.
_settled_properties: "weakref.WeakKeyDictionary[Any, asyncio.Future[Any]]" = weakref.WeakKeyDictionary()


async def _await_property(resource: Any) -> Any:
    """Await a property value; a coroutine object settles once and is shared afterwards."""
    if not inspect.iscoroutine(resource):
        return await resource

    settled = _settled_properties.get(resource)
    if settled is None:
        settled = asyncio.get_running_loop().create_future()
        _settled_properties[resource] = settled
        try:
            settled.set_result(await resource)
        except BaseException as e:
            settled.set_exception(e)
    return await settled


@dataclass(frozen=True)
class _JsonSource:
    definition: ModuleDefinition
    strategy: SchemaStrategy
    function_name: str | None
    property_name: str | None

    @property
    def label(self) -> str:
        return f"{self.definition.module_name}.{self.function_name or self.property_name}"


def _json_source(
    candidate: ModuleDefinition | Mapping[str, Any],
    log: ModuleFactoryLogger,
) -> _JsonSource:
    """Check the definition before anything is imported."""
    definition = definition_from(candidate, log)
    function_name = clean_name(definition.function_name)
    property_name = clean_name(definition.property_name)

    if function_name and property_name:
        raise fail(
            log,
            DefinitionConflictError(
                f"Only one of functionName {function_name} or propertyName {property_name} "
                f"may be specified for module {definition.module_name}"
            ),
        )
    if not definition.module_name.strip() or not (function_name or property_name):
        raise fail(
            log,
            DefinitionIncompleteError(
                f"moduleName [{definition.module_name}] and either functionName [{definition.function_name}] "
                f"or propertyName [{definition.property_name}] are required"
            ),
        )
    return _JsonSource(
        definition=definition,
        strategy=strategy_for(definition, log),
        function_name=function_name,
        property_name=property_name,
    )


def _json_text_or_awaitable(source: _JsonSource, settings: FactorySettings, log: ModuleFactoryLogger) -> Any:
    """Import the module and return the function result or property value (maybe awaitable)."""
    module = resolve_module(source.definition, settings, log)

    if source.function_name:
        function = get_path(module, source.function_name)
        if function is MISSING or not callable(function):
            raise fail(
                log,
                InvalidFactoryReferenceError(f"module property {source.label} does not point to a function"),
            )
        try:
            return function()
        except Exception as e:
            log.error("JSON function %s raised: %s", source.label, e)
            raise

    assert source.property_name is not None
    resource = get_path(module, source.property_name)
    if resource is MISSING:
        raise fail(log, ContractViolationError(f"module property {source.label} does not exist"))
    return resource


def _require_string(text: Any, source: _JsonSource, log: ModuleFactoryLogger) -> str:
    if isinstance(text, str):
        return text
    if source.function_name:
        contract = "a string-producing function (returning str or an awaitable of str)"
    else:
        contract = "a string property (str or an awaitable of str)"
    raise fail(
        log,
        ContractViolationError(f"{source.label} must be {contract}, got {type(text).__name__}"),
    )


async def load_json_from_module(
    definition: ModuleDefinition | Mapping[str, Any],
    log: ModuleFactoryLogger | None = None,
    *,
    settings: FactorySettings | None = None,
) -> Any:
    """Load JSON text from a module function or property, parse and validate it.

    Exactly one of ``function_name`` / ``property_name`` must be set; this is
    checked before the module is imported.

    Raises:
        DefinitionConflictError: Both functionName and propertyName are set
        DefinitionIncompleteError: Neither is set, or moduleName is empty
        ContractViolationError: The function/property does not produce a string
        ResourceLoadError: The string is not valid JSON
    """
    log = log or default_logger()
    source = _json_source(definition, log)
    produced = _json_text_or_awaitable(source, settings or FactorySettings(), log)
    if inspect.isawaitable(produced):
        try:
            produced = await (produced if source.function_name else _await_property(produced))
        except Exception as e:
            log.error("JSON source %s raised: %s", source.label, e)
            raise

    value = _parse(_require_string(produced, source, log), source.label, log)
    return await validate_value_async(value, source.definition.module_name, source.definition, log, source.strategy)


def load_json_from_module_sync(
    definition: ModuleDefinition | Mapping[str, Any],
    log: ModuleFactoryLogger | None = None,
    *,
    settings: FactorySettings | None = None,
) -> Any:
    """Synchronous ``load_json_from_module``.

    Raises:
        AsyncContractError: The function/property is awaitable, or the check is asynchronous
    """
    log = log or default_logger()
    source = _json_source(definition, log)
    _refuse_async_check(source.definition, source.strategy, log)
    produced = _json_text_or_awaitable(source, settings or FactorySettings(), log)
    if inspect.isawaitable(produced):
        # プロパティはモジュールが保持しているので閉じない
        if source.function_name:
            discard_awaitable(produced)
        raise fail(
            log,
            AsyncContractError(f"{source.label} produced an awaitable, use load_json_from_module instead"),
        )

    value = _parse(_require_string(produced, source, log), source.label, log)
    return validate_value_sync(value, source.definition.module_name, source.definition, log, source.strategy)


__all__ = [
    "load_json_from_module",
    "load_json_from_module_sync",
    "load_json_resource",
    "load_json_resource_sync",
]
