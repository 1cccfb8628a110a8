"""JSON Schema compiler producing sync or async check functions.

Schemas are JSON Schema Draft 2020-12 documents validated with :mod:`jsonschema`,
plus two extensions:

* ``"$$async": true`` at the top level compiles an asynchronous check.
* ``"custom": <callable>`` on any (sub)schema runs caller code against the
  instance at that position. In an async schema the callable may be a
  coroutine function; its errors are collected once the awaitable settles.
  Custom checks nested under ``anyOf``/``oneOf``/``not`` are only settled when
  their error reaches the top level.
"""

import inspect
from collections.abc import Awaitable, Callable, Iterator, Mapping, Sequence
from contextvars import ContextVar
from typing import Any, Literal

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError
from jsonschema.exceptions import ValidationError as JsonSchemaError
from jsonschema.validators import extend

from module_factory.constants import ASYNC_SCHEMA_FLAG, CUSTOM_KEYWORD
from module_factory.exceptions import SchemaCompileError
from module_factory.models.validation_entry import ValidationErrorEntry

CheckResult = Literal[True] | list[ValidationErrorEntry]

# (placeholder error, awaitable outcome, errors list handed to a new-style check)
_PendingCheck = tuple[JsonSchemaError, Awaitable[Any], list[Any]]

_pending_checks: ContextVar[list[_PendingCheck] | None] = ContextVar("_pending_checks", default=None)


class CheckFunction:
    """A callable check carrying the ``is_async`` capability flag.

    Calling it returns ``True`` or a list of ``ValidationErrorEntry`` (sync), or an
    awaitable of the same (async).
    """

    def __init__(self, fn: Callable[[Any], Any], *, is_async: bool, schema: Mapping[str, Any] | None = None) -> None:
        self._fn = fn
        self.is_async = is_async
        self.schema = schema

    def __call__(self, value: Any) -> Any:
        return self._fn(value)

    def __repr__(self) -> str:
        kind = "async" if self.is_async else "sync"
        return f"<CheckFunction {kind}>"


def sync_check(fn: Callable[[Any], Any]) -> CheckFunction:
    """Flag a plain callable as a synchronous check."""
    return CheckFunction(fn, is_async=False)


def async_check(fn: Callable[[Any], Awaitable[Any]]) -> CheckFunction:
    """Flag a callable returning an awaitable as an asynchronous check."""
    return CheckFunction(fn, is_async=True)


def discard_awaitable(outcome: Any) -> None:
    """Close a coroutine that will never be awaited."""
    if inspect.iscoroutine(outcome):
        outcome.close()


def _custom_failures(outcome: Any, collected: list[Any], use_new_checker_function: bool) -> list[JsonSchemaError]:
    """Interpret what a custom check produced."""
    if use_new_checker_function:
        raw_entries: Sequence[Any] = collected
    elif outcome is True:
        raw_entries = []
    elif isinstance(outcome, (str, Mapping)):
        raw_entries = [outcome]
    elif isinstance(outcome, (list, tuple)):
        raw_entries = outcome
    else:
        raw_entries = ["custom check failed"]

    failures = []
    for raw in raw_entries:
        entry = ValidationErrorEntry.from_raw(raw)
        failure = JsonSchemaError(entry.message or "custom check failed")
        failure.custom_entry = entry  # type: ignore[attr-defined]
        failures.append(failure)
    return failures


def _custom_keyword(use_new_checker_function: bool) -> Callable[..., Iterator[JsonSchemaError]]:
    def custom(validator: Any, check: Any, instance: Any, schema: Mapping[str, Any]) -> Iterator[JsonSchemaError]:
        if not callable(check):
            yield JsonSchemaError(f"custom check {check!r} is not callable")
            return

        collected: list[Any] = []
        outcome = check(instance, collected) if use_new_checker_function else check(instance)

        if inspect.isawaitable(outcome):
            pending = _pending_checks.get()
            if pending is None:
                discard_awaitable(outcome)
                yield JsonSchemaError(f"asynchronous custom check requires an async schema ({ASYNC_SCHEMA_FLAG})")
                return
            # 非同期チェックは後で評価するため、プレースホルダーを返す
            placeholder = JsonSchemaError("pending asynchronous custom check")
            pending.append((placeholder, outcome, collected))
            yield placeholder
            return

        yield from _custom_failures(outcome, collected, use_new_checker_function)

    return custom


def _required_field(error: JsonSchemaError) -> str | None:
    for name in error.validator_value or ():
        if error.message == f"{name!r} is a required property":
            return str(name)
    return None


def to_entry(error: JsonSchemaError, path: Sequence[Any] | None = None) -> ValidationErrorEntry:
    """Convert a jsonschema error into a ValidationErrorEntry.

    Args:
        error: The jsonschema error
        path: Instance path to use instead of ``error.absolute_path``

    Returns:
        The structured entry
    """
    parts = [str(part) for part in (path if path is not None else error.absolute_path)]

    custom_entry: ValidationErrorEntry | None = getattr(error, "custom_entry", None)
    if custom_entry is not None:
        if custom_entry.field != "n/a" or not parts:
            return custom_entry
        return custom_entry.model_copy(update={"field": ".".join(parts)})

    actual = error.instance
    if error.validator == "required":
        missing = _required_field(error)
        if missing is not None:
            parts.append(missing)
            actual = None

    return ValidationErrorEntry(
        field=".".join(parts) or "n/a",
        actual=actual,
        expected=error.validator_value,
        message=error.message,
        type=str(error.validator),
    )


def compile_schema(validation_schema: Mapping[str, Any], *, use_new_checker_function: bool = False) -> CheckFunction:
    """スキーマをチェック関数にコンパイルする。

    Args:
        validation_schema: JSON Schemaドキュメント（``$$async``と``custom``拡張を含む）
        use_new_checker_function: Trueの場合、custom関数は``(value, errors)``シグネチャ

    Returns:
        is_asyncフラグ付きのCheckFunction

    Raises:
        SchemaCompileError: スキーマがDraft 2020-12として不正な場合
    """
    if not isinstance(validation_schema, Mapping):
        raise SchemaCompileError(f"validation schema must be a mapping, got {type(validation_schema).__name__}")

    schema = dict(validation_schema)
    is_async = bool(schema.get(ASYNC_SCHEMA_FLAG, False))

    validator_class = extend(
        Draft202012Validator,
        validators={CUSTOM_KEYWORD: _custom_keyword(use_new_checker_function)},
    )
    try:
        validator_class.check_schema(schema)
    except SchemaError as e:
        raise SchemaCompileError(f"invalid validation schema: {e.message}") from e

    validator = validator_class(schema, format_checker=Draft202012Validator.FORMAT_CHECKER)

    if not is_async:

        def check_sync(value: Any) -> CheckResult:
            entries = [to_entry(error) for error in validator.iter_errors(value)]
            return True if not entries else entries

        return CheckFunction(check_sync, is_async=False, schema=schema)

    async def check_async(value: Any) -> CheckResult:
        pending: list[_PendingCheck] = []
        token = _pending_checks.set(pending)
        try:
            errors = list(validator.iter_errors(value))
        finally:
            _pending_checks.reset(token)

        deferred = {id(placeholder): (outcome, collected) for placeholder, outcome, collected in pending}
        entries: list[ValidationErrorEntry] = []
        try:
            for error in errors:
                if id(error) not in deferred:
                    entries.append(to_entry(error))
                    continue
                outcome, collected = deferred.pop(id(error))
                resolved = await outcome
                for failure in _custom_failures(resolved, collected, use_new_checker_function):
                    entries.append(to_entry(failure, path=list(error.absolute_path)))
        finally:
            for outcome, _ in deferred.values():
                discard_awaitable(outcome)
        return True if not entries else entries

    return CheckFunction(check_async, is_async=True, schema=schema)


__all__ = [
    "CheckFunction",
    "CheckResult",
    "async_check",
    "compile_schema",
    "discard_awaitable",
    "sync_check",
    "to_entry",
]
