"""Instance loader: resolve a module, call its factory or constructor, validate.

``load_instance`` / ``load_from_module`` always return coroutines; a factory
that returns an awaitable is awaited before validation. ``load_from_module_sync``
gives the immediate contract and raises ``AsyncContractError`` when the factory
or the check would need awaiting. Constructors are never awaited.
"""

import inspect
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from types import ModuleType
from typing import Any

from module_factory.exceptions import (
    AsyncContractError,
    InvalidConstructorReferenceError,
    InvalidFactoryReferenceError,
    MissingFactoryReferenceError,
)
from module_factory.loader.common import clean_name, definition_from, fail, resolve_module, strategy_for
from module_factory.loader.importer import MISSING, get_path
from module_factory.models.load_result import LoadResult
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


class TargetKind(StrEnum):
    """How the produced value is built."""

    FUNCTION = "function"
    CONSTRUCTOR = "constructor"


@dataclass(frozen=True)
class _Invocation:
    definition: ModuleDefinition
    strategy: SchemaStrategy
    kind: TargetKind
    name: str
    module: ModuleType


def select_target(definition: ModuleDefinition, settings: FactorySettings) -> tuple[TargetKind, str]:
    """Pick the factory: functionName, then constructorName, then the default factory name.

    Raises:
        MissingFactoryReferenceError: Nothing is named and no default factory is configured
    """
    function_name = clean_name(definition.function_name)
    if function_name:
        return TargetKind.FUNCTION, function_name
    constructor_name = clean_name(definition.constructor_name)
    if constructor_name:
        return TargetKind.CONSTRUCTOR, constructor_name
    default_name = clean_name(settings.default_factory_name)
    if default_name:
        return TargetKind.FUNCTION, default_name
    raise MissingFactoryReferenceError(
        f"Neither functionName nor constructorName provided for {definition.module_name}, "
        "and no default factory name is configured"
    )


def _prepare(
    candidate: ModuleDefinition | Mapping[str, Any],
    log: ModuleFactoryLogger,
    settings: FactorySettings,
    *,
    synchronous: bool,
) -> _Invocation:
    definition = definition_from(candidate, log)
    strategy = strategy_for(definition, log)
    if synchronous and strategy.kind is SchemaKind.ASYNC_CHECK:
        raise fail(
            log,
            AsyncContractError(
                f"asynchronous check cannot be used when loading {definition.module_name} synchronously"
            ),
        )
    try:
        kind, name = select_target(definition, settings)
    except MissingFactoryReferenceError as e:
        raise fail(log, e) from None
    module = resolve_module(definition, settings, log)
    return _Invocation(definition=definition, strategy=strategy, kind=kind, name=name, module=module)


def _produce(invocation: _Invocation, log: ModuleFactoryLogger) -> Any:
    """Look up the factory or constructor and call it with paramsArray."""
    module_name = invocation.definition.module_name
    target = get_path(invocation.module, invocation.name)

    if invocation.kind is TargetKind.FUNCTION:
        if target is MISSING or not callable(target):
            raise fail(
                log,
                InvalidFactoryReferenceError(
                    f"functionName {invocation.name} provided but does not resolve to a function in {module_name}"
                ),
            )
    elif target is MISSING or not inspect.isclass(target):
        raise fail(
            log,
            InvalidConstructorReferenceError(
                f"constructorName {invocation.name} provided but does not resolve to a constructor in {module_name}"
            ),
        )

    params = invocation.definition.params_array or []
    try:
        return target(*params)
    except Exception as e:
        log.error("%s %s.%s raised: %s", invocation.kind, module_name, invocation.name, e)
        raise


async def load_instance(
    definition: ModuleDefinition | Mapping[str, Any],
    log: ModuleFactoryLogger | None = None,
    *,
    settings: FactorySettings | None = None,
) -> LoadResult[Any]:
    """モジュールからインスタンスをロードし、検証済みの値を返す。

    Args:
        definition: ModuleDefinitionまたは同じ形のマッピング
        log: ロガー（省略時はパッケージロガー）
        settings: ローダー設定（省略時は既定値）

    Returns:
        検証済みの値と、ファクトリが非同期だったかを持つLoadResult

    Raises:
        DefinitionStructureError: 定義が不正な場合
        ModuleResolutionError: モジュールを解決できない場合
        FactoryReferenceError: 名前が関数/クラスを指していない場合
        ValidationFailure: 検証に失敗した場合
    """
    log = log or default_logger()
    invocation = _prepare(definition, log, settings or FactorySettings(), synchronous=False)
    produced = _produce(invocation, log)

    was_async: bool | None = None
    if invocation.kind is TargetKind.FUNCTION:
        was_async = inspect.isawaitable(produced)
        if was_async:
            try:
                produced = await produced
            except Exception as e:
                log.error("async factory %s.%s raised: %s", invocation.definition.module_name, invocation.name, e)
                raise

    value = await validate_value_async(
        produced,
        invocation.definition.module_name,
        invocation.definition,
        log,
        invocation.strategy,
    )
    return LoadResult(value=value, was_async=was_async)


async def load_from_module(
    definition: ModuleDefinition | Mapping[str, Any],
    log: ModuleFactoryLogger | None = None,
    *,
    settings: FactorySettings | None = None,
) -> Any:
    """Load and validate an instance, returning only the value."""
    result = await load_instance(definition, log, settings=settings)
    return result.value


def load_from_module_sync(
    definition: ModuleDefinition | Mapping[str, Any],
    log: ModuleFactoryLogger | None = None,
    *,
    settings: FactorySettings | None = None,
) -> Any:
    """Load and validate an instance without an event loop.

    Raises:
        AsyncContractError: The factory returned an awaitable, or the check is asynchronous
    """
    log = log or default_logger()
    invocation = _prepare(definition, log, settings or FactorySettings(), synchronous=True)
    produced = _produce(invocation, log)

    if invocation.kind is TargetKind.FUNCTION and inspect.isawaitable(produced):
        discard_awaitable(produced)
        raise fail(
            log,
            AsyncContractError(
                f"factory {invocation.definition.module_name}.{invocation.name} returned an awaitable, "
                "use load_from_module instead"
            ),
        )

    return validate_value_sync(
        produced,
        invocation.definition.module_name,
        invocation.definition,
        log,
        invocation.strategy,
    )


__all__ = ["TargetKind", "load_from_module", "load_from_module_sync", "load_instance", "select_target"]
