"""TypeOf: the closed set of primitive type tags used as a validation shortcut.

A ``TypeOf`` member in ``ModuleDefinition.load_schema`` skips schema compilation
entirely: the produced value passes when ``type_tag(value)`` equals the member.
"""

from enum import Enum, StrEnum
from typing import Any, NoReturn

from module_factory.exceptions import ConfigurationError, ImmutableStateError

# Integers beyond this magnitude cannot round-trip through an IEEE-754 double
MAX_SAFE_INTEGER = 2**53 - 1


class TypeOf(StrEnum):
    """Primitive type tags.

    The enumeration is closed: exactly these seven members exist, and the
    set-style mutators below always raise ``ImmutableStateError``.
    """

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    BIGINT = "bigint"
    FUNCTION = "function"
    SYMBOL = "symbol"
    OBJECT = "object"

    @classmethod
    def _missing_(cls, value: object) -> NoReturn:
        raise ConfigurationError(
            f"Attempt to initialize TypeOf with {value!r}, expected one of: {', '.join(sorted(cls.tags()))}"
        )

    @property
    def type_of(self) -> str:
        """The raw tag string."""
        return self.value

    @classmethod
    def tags(cls) -> frozenset[str]:
        """Return the seven legal tag strings."""
        return frozenset(member.value for member in cls)

    @classmethod
    def add(cls, value: str) -> NoReturn:
        raise ImmutableStateError(f"TypeOf is immutable, cannot add {value!r}")

    @classmethod
    def clear(cls) -> NoReturn:
        raise ImmutableStateError("TypeOf is immutable, cannot clear")

    @classmethod
    def delete(cls, value: str) -> NoReturn:
        raise ImmutableStateError(f"TypeOf is immutable, cannot delete {value!r}")


def is_type_of(candidate: Any) -> bool:
    """Return True only for one of the seven TypeOf members (not for plain strings)."""
    return any(candidate is member for member in TypeOf)


def type_tag(value: Any) -> TypeOf:
    """値のプリミティブ型タグを返す。

    Args:
        value: 判定対象の値

    Returns:
        対応するTypeOfメンバー。boolはintより先に判定する。
    """
    if isinstance(value, bool):
        return TypeOf.BOOLEAN
    if isinstance(value, Enum):
        return TypeOf.SYMBOL
    if isinstance(value, str):
        return TypeOf.STRING
    if isinstance(value, int):
        return TypeOf.BIGINT if abs(value) > MAX_SAFE_INTEGER else TypeOf.NUMBER
    if isinstance(value, float):
        return TypeOf.NUMBER
    if callable(value):
        return TypeOf.FUNCTION
    return TypeOf.OBJECT


__all__ = ["MAX_SAFE_INTEGER", "TypeOf", "is_type_of", "type_tag"]
