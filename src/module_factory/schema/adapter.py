"""Schema adapter: one dispatch over every kind of ``load_schema``.

``classify_load_schema`` reduces a definition's ``load_schema`` to a tagged
``SchemaStrategy`` (compiling a ``LoadSchema`` on the way). ``validate_value``
runs that strategy and returns the value, raises, or returns an awaitable when
the check is asynchronous. ``validate_value_sync`` is the immediate variant and
refuses anything that would need awaiting.
"""

import inspect
import logging
from collections.abc import Awaitable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Protocol

from module_factory.constants import LOGGER_NAME
from module_factory.exceptions import (
    AsyncContractError,
    SchemaValidationError,
    TypeMismatchError,
    ValidationFailure,
)
from module_factory.models.module_definition import LoadSchema, ModuleDefinition
from module_factory.models.type_of import TypeOf, is_type_of, type_tag
from module_factory.models.validation_entry import ValidationErrorEntry
from module_factory.schema.compiler import compile_schema, discard_awaitable


class ModuleFactoryLogger(Protocol):
    """Leveled logger consumed by the loaders (``logging.Logger`` satisfies it)."""

    def error(self, msg: object, *args: object, **kwargs: Any) -> None: ...

    def warning(self, msg: object, *args: object, **kwargs: Any) -> None: ...

    def info(self, msg: object, *args: object, **kwargs: Any) -> None: ...

    def debug(self, msg: object, *args: object, **kwargs: Any) -> None: ...


def default_logger() -> logging.Logger:
    """Return the package logger used when callers pass no logger."""
    return logging.getLogger(LOGGER_NAME)


class SchemaKind(StrEnum):
    """Validation strategy kinds."""

    NONE = "none"
    TYPE_OF = "type_of"
    SYNC_CHECK = "sync_check"
    ASYNC_CHECK = "async_check"


@dataclass(frozen=True)
class SchemaStrategy:
    """Classified load schema.

    Attributes:
        kind: Which branch the adapter takes
        label: Representation of the schema reported in failures
        type_of: Expected tag (TYPE_OF only)
        check: Check function (SYNC_CHECK / ASYNC_CHECK only)
    """

    kind: SchemaKind
    label: Any = None
    type_of: TypeOf | None = None
    check: Any = None


_PASS_THROUGH = SchemaStrategy(kind=SchemaKind.NONE)


def _check_is_async(check: Any) -> bool:
    flag = getattr(check, "is_async", None)
    if flag is None:
        return inspect.iscoroutinefunction(check)
    return bool(flag)


def classify_load_schema(load_schema: Any) -> SchemaStrategy:
    """Reduce a ``load_schema`` to a SchemaStrategy.

    Args:
        load_schema: None, a TypeOf member, a LoadSchema or a check function

    Returns:
        The strategy to run

    Raises:
        SchemaCompileError: The LoadSchema is not a valid JSON Schema
        TypeError: ``load_schema`` is none of the supported kinds
    """
    if load_schema is None:
        return _PASS_THROUGH
    if is_type_of(load_schema):
        return SchemaStrategy(kind=SchemaKind.TYPE_OF, label="TypeOf", type_of=load_schema)
    if isinstance(load_schema, LoadSchema):
        # 毎回コンパイルするのは遅い。繰り返し使う場合はcompile_schemaの結果を渡す
        check = compile_schema(
            load_schema.validation_schema,
            use_new_checker_function=load_schema.use_new_checker_function,
        )
        label: Any = load_schema.model_dump(by_alias=True)
    elif callable(load_schema):
        check = load_schema
        label = "compiled"
    else:
        raise TypeError(f"unsupported load schema: {type(load_schema).__name__}")

    kind = SchemaKind.ASYNC_CHECK if _check_is_async(check) else SchemaKind.SYNC_CHECK
    return SchemaStrategy(kind=kind, label=label, check=check)


@dataclass(frozen=True)
class _Subject:
    """What is being validated, for diagnostics."""

    value: Any
    module_name: str
    definition: ModuleDefinition
    strategy: SchemaStrategy
    log: ModuleFactoryLogger


def _reject(
    error_class: type[ValidationFailure],
    message: str,
    subject: _Subject,
    entries: list[ValidationErrorEntry],
) -> ValidationFailure:
    """Log a validation failure (structured warning, then error) and build the exception."""
    subject.log.warning(
        "%s: %d validation error(s)",
        message,
        len(entries),
        extra={
            "validation_failure": {
                "module_def": subject.definition,
                "module_name": subject.module_name,
                "schema": subject.strategy.label,
                "obj": subject.value,
                "result": entries,
            }
        },
    )
    subject.log.error(message)
    return error_class(
        message,
        module_name=subject.module_name,
        definition=subject.definition,
        schema=subject.strategy.label,
        value=subject.value,
        errors=entries,
    )


def _match_type_of(subject: _Subject) -> Any:
    expected = subject.strategy.type_of
    actual = type_tag(subject.value)
    if actual == expected:
        return subject.value
    entry = ValidationErrorEntry(
        field="n/a",
        actual=actual.value,
        expected=str(expected),
        message=f"returned instance failed 'type_tag(instance) == \"{expected}\"'",
        type="typeof",
    )
    raise _reject(TypeMismatchError, f"TypeOf validation failed for {subject.module_name}", subject, [entry])


def _failure_entries(result: Any) -> list[ValidationErrorEntry]:
    if isinstance(result, (list, tuple)) and result:
        return [ValidationErrorEntry.from_raw(raw) for raw in result]
    return [
        ValidationErrorEntry(
            actual=result,
            expected=True,
            message="check function rejected the value",
            type="check",
        )
    ]


def _settle(result: Any, phase: str, subject: _Subject) -> Any:
    if result is True:
        return subject.value
    raise _reject(
        SchemaValidationError,
        f"{phase} validation failed for {subject.module_name}",
        subject,
        _failure_entries(result),
    )


def _call_check(subject: _Subject) -> Any:
    try:
        return subject.strategy.check(subject.value)
    except Exception as e:
        subject.log.error("Check function raised for %s: %s", subject.module_name, e)
        raise


async def _await_check(pending: Any, subject: _Subject) -> Any:
    if inspect.isawaitable(pending):
        try:
            result = await pending
        except Exception as e:
            subject.log.error("Async check raised for %s: %s", subject.module_name, e)
            raise
    else:
        result = pending
    return _settle(result, "Async", subject)


def _subject(
    value: Any,
    module_name: str,
    definition: ModuleDefinition,
    log: ModuleFactoryLogger | None,
    strategy: SchemaStrategy | None,
) -> _Subject:
    return _Subject(
        value=value,
        module_name=module_name,
        definition=definition,
        strategy=strategy if strategy is not None else classify_load_schema(definition.load_schema),
        log=log or default_logger(),
    )


def validate_value(
    value: Any,
    module_name: str,
    definition: ModuleDefinition,
    log: ModuleFactoryLogger | None = None,
    strategy: SchemaStrategy | None = None,
) -> Any | Awaitable[Any]:
    """生成された値をロードスキーマで検証する。

    Args:
        value: ファクトリが生成した値
        module_name: 診断用のモジュール名
        definition: ModuleDefinition
        log: ロガー（省略時はパッケージロガー）
        strategy: 分類済みの戦略（省略時はdefinition.load_schemaから分類）

    Returns:
        検証済みの値。非同期チェックの場合は値を返すawaitable

    Raises:
        TypeMismatchError: TypeOfが一致しない場合
        SchemaValidationError: 同期チェックが値を拒否した場合
    """
    subject = _subject(value, module_name, definition, log, strategy)
    kind = subject.strategy.kind

    if kind is SchemaKind.NONE:
        return value
    if kind is SchemaKind.TYPE_OF:
        return _match_type_of(subject)

    result = _call_check(subject)
    if kind is SchemaKind.ASYNC_CHECK or inspect.isawaitable(result):
        return _await_check(result, subject)
    return _settle(result, "Sync", subject)


async def validate_value_async(
    value: Any,
    module_name: str,
    definition: ModuleDefinition,
    log: ModuleFactoryLogger | None = None,
    strategy: SchemaStrategy | None = None,
) -> Any:
    """Validate like ``validate_value`` and always settle before returning.

    ``value`` itself is never awaited, even when it is awaitable.
    """
    subject = _subject(value, module_name, definition, log, strategy)
    kind = subject.strategy.kind

    if kind is SchemaKind.NONE:
        return value
    if kind is SchemaKind.TYPE_OF:
        return _match_type_of(subject)

    result = _call_check(subject)
    if kind is SchemaKind.ASYNC_CHECK or inspect.isawaitable(result):
        return await _await_check(result, subject)
    return _settle(result, "Sync", subject)


def validate_value_sync(
    value: Any,
    module_name: str,
    definition: ModuleDefinition,
    log: ModuleFactoryLogger | None = None,
    strategy: SchemaStrategy | None = None,
) -> Any:
    """Validate like ``validate_value`` but never return an awaitable.

    Raises:
        AsyncContractError: The check is asynchronous
        TypeMismatchError: TypeOf shortcut does not match
        SchemaValidationError: The check rejected the value
    """
    subject = _subject(value, module_name, definition, log, strategy)
    kind = subject.strategy.kind

    if kind is SchemaKind.NONE:
        return value
    if kind is SchemaKind.TYPE_OF:
        return _match_type_of(subject)
    if kind is SchemaKind.ASYNC_CHECK:
        message = f"asynchronous check cannot be used when loading {module_name} synchronously"
        subject.log.error(message)
        raise AsyncContractError(message)

    result = _call_check(subject)
    if inspect.isawaitable(result):
        discard_awaitable(result)
        message = f"check function for {module_name} returned an awaitable during synchronous loading"
        subject.log.error(message)
        raise AsyncContractError(message)
    return _settle(result, "Sync", subject)


__all__ = [
    "ModuleFactoryLogger",
    "SchemaKind",
    "SchemaStrategy",
    "classify_load_schema",
    "default_logger",
    "validate_value",
    "validate_value_async",
    "validate_value_sync",
]
