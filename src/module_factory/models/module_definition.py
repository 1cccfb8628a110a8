"""ModuleDefinition: the declarative description of one load request.

Definitions usually come from configuration data, so both the snake_case field
names and their camelCase aliases (``moduleName``, ``functionName``, ...) are
accepted.
"""

from collections.abc import Callable, Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from module_factory.exceptions import ConfigurationError, DefinitionStructureError
from module_factory.models.type_of import TypeOf
from module_factory.models.validation_entry import ValidationErrorEntry

DiscriminatorName = Literal["function_name", "constructor_name", "property_name"]

DISCRIMINATORS: tuple[DiscriminatorName, ...] = ("function_name", "constructor_name", "property_name")


class LoadSchema(BaseModel):
    """A declarative (not yet compiled) schema plus compiler options."""

    validation_schema: dict[str, Any] = Field(
        ...,
        description="JSON Schema document",
    )
    use_new_checker_function: bool = Field(
        default=False,
        description="custom checks use the (value, errors) signature",
    )

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ModuleDefinition(BaseModel):
    """What to load, how to build it, and how to validate it.

    Attributes:
        module_name: File path, file URI, relative path or dotted import name
        function_name: Factory function (dotted for nested lookup)
        constructor_name: Class to instantiate (dotted for nested lookup)
        property_name: Attribute holding a JSON string (JSON loading only)
        params_array: Positional arguments for the factory or constructor
        load_schema: Post-load validation strategy
    """

    module_name: str = Field(..., description="ロード対象のモジュール")
    function_name: str | None = Field(default=None, description="ファクトリ関数名")
    constructor_name: str | None = Field(default=None, description="コンストラクタ名")
    property_name: str | None = Field(default=None, description="プロパティ名")
    params_array: list[Any] | None = Field(default=None, description="位置引数")
    load_schema: LoadSchema | TypeOf | Callable[..., Any] | None = Field(
        default=None,
        description="ロード後の検証方法",
    )

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        json_schema_extra={
            "examples": [
                {"moduleName": "./plugins/extended.py", "functionName": "create2"},
                {"moduleName": "json", "functionName": "dumps", "paramsArray": [{"a": 1}], "loadSchema": "string"},
            ]
        },
    )

    @field_validator("load_schema", mode="plain")
    @classmethod
    def classify_load_schema_input(cls, value: Any) -> Any:
        """Accept a TypeOf member or tag string, a LoadSchema (or mapping), or a check function.

        TypeOf is only consulted for strings.
        """
        if value is None or isinstance(value, (TypeOf, LoadSchema)):
            return value
        if isinstance(value, str):
            try:
                return TypeOf(value)
            except ConfigurationError as e:
                raise ValueError(str(e)) from e
        if isinstance(value, Mapping):
            try:
                return LoadSchema.model_validate(value)
            except ValidationError as e:
                raise ValueError(f"invalid loadSchema: {e}") from e
        if callable(value):
            return value
        raise ValueError(
            f"loadSchema must be a TypeOf tag, a LoadSchema or a check function, got {type(value).__name__}"
        )

    def discriminators(self) -> dict[DiscriminatorName, str]:
        """Return the discriminators that are set."""
        return {name: getattr(self, name) for name in DISCRIMINATORS if getattr(self, name) is not None}


def _present_discriminators(candidate: Any) -> list[DiscriminatorName] | None:
    """Return the discriminators present on ``candidate``, or None without a module name.

    Mappings count key presence, models count non-None values.
    """
    if isinstance(candidate, ModuleDefinition):
        return list(candidate.discriminators())
    if not isinstance(candidate, Mapping):
        return None
    if "module_name" not in candidate and "moduleName" not in candidate:
        return None
    return [name for name in DISCRIMINATORS if name in candidate or to_camel(name) in candidate]


def _set_discriminators(candidate: Any) -> list[DiscriminatorName]:
    if isinstance(candidate, ModuleDefinition):
        return list(candidate.discriminators())
    return [
        name
        for name in DISCRIMINATORS
        if candidate.get(name) is not None or candidate.get(to_camel(name)) is not None
    ]


def is_module_definition(candidate: Any) -> bool:
    """True when ``candidate`` has a module name and at most one discriminator."""
    present = _present_discriminators(candidate)
    return present is not None and len(present) <= 1


def is_constrained_module_definition(candidate: Any) -> bool:
    """True when ``candidate`` is a module definition with exactly one discriminator set."""
    return is_module_definition(candidate) and len(_set_discriminators(candidate)) == 1


def is_load_schema(candidate: Any) -> bool:
    """True for a LoadSchema or a mapping shaped like one."""
    if isinstance(candidate, LoadSchema):
        return True
    return isinstance(candidate, Mapping) and ("validationSchema" in candidate or "validation_schema" in candidate)


def _entries_from_pydantic(error: ValidationError) -> list[ValidationErrorEntry]:
    return [
        ValidationErrorEntry(
            field=".".join(str(part) for part in detail["loc"]) or "n/a",
            actual=detail.get("input"),
            expected=detail["type"],
            message=detail["msg"],
            type=detail["type"],
        )
        for detail in error.errors()
    ]


def validate_module_definition(candidate: Any) -> "bool | list[ValidationErrorEntry]":
    """Structurally validate a module definition.

    Synchronous and side-effect free: field types are checked by the pydantic
    model, and more than one discriminator adds a ``conflict`` entry.

    Args:
        candidate: ModuleDefinition or mapping

    Returns:
        True when valid, otherwise the list of problems
    """
    errors: list[ValidationErrorEntry] = []
    if isinstance(candidate, Mapping):
        try:
            ModuleDefinition.model_validate(candidate)
        except ValidationError as e:
            errors.extend(_entries_from_pydantic(e))
    elif not isinstance(candidate, ModuleDefinition):
        return [
            ValidationErrorEntry(
                actual=type(candidate).__name__,
                expected="mapping or ModuleDefinition",
                message="module definition must be a mapping or a ModuleDefinition",
                type="object",
            )
        ]

    # マッピングはキーの有無で数える
    present = _present_discriminators(candidate) or []
    if len(present) > 1:
        errors.append(
            ValidationErrorEntry(
                field=",".join(present),
                actual=present,
                expected="at most one of " + ", ".join(DISCRIMINATORS),
                message="only one of functionName, constructorName or propertyName may be specified",
                type="conflict",
            )
        )
    return True if not errors else errors


def coerce_definition(candidate: "ModuleDefinition | Mapping[str, Any]") -> ModuleDefinition:
    """Return ``candidate`` as a ModuleDefinition.

    Raises:
        DefinitionStructureError: The mapping does not describe a definition
    """
    if isinstance(candidate, ModuleDefinition):
        return candidate
    if not isinstance(candidate, Mapping):
        raise DefinitionStructureError(f"module definition must be a mapping, got {type(candidate).__name__}")
    try:
        return ModuleDefinition.model_validate(candidate)
    except ValidationError as e:
        raise DefinitionStructureError(
            f"invalid module definition: {e.error_count()} error(s)",
            errors=_entries_from_pydantic(e),
        ) from e


__all__ = [
    "DISCRIMINATORS",
    "LoadSchema",
    "ModuleDefinition",
    "coerce_definition",
    "is_constrained_module_definition",
    "is_load_schema",
    "is_module_definition",
    "validate_module_definition",
]
