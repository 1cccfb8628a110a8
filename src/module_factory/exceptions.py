"""Exception classes for module-factory."""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from module_factory.models.validation_entry import ValidationErrorEntry


class ModuleFactoryError(Exception):
    """Base exception for module-factory."""


# Definition-related exceptions


class DefinitionStructureError(ModuleFactoryError):
    """Exception raised when a module definition is malformed."""

    def __init__(self, message: str, errors: "list[ValidationErrorEntry] | None" = None) -> None:
        """DefinitionStructureErrorを初期化します。

        Args:
            message: エラーメッセージ
            errors: 構造検証で検出されたエラー一覧
        """
        self.errors = list(errors or [])
        super().__init__(message)


class DefinitionConflictError(DefinitionStructureError):
    """Exception raised when mutually exclusive discriminators are both set."""


class DefinitionIncompleteError(DefinitionStructureError):
    """Exception raised when a required part of the definition is missing."""


# Resolution-related exceptions


class ModuleResolutionError(ModuleFactoryError):
    """Exception raised when the target module cannot be located or loaded."""

    def __init__(self, message: str, module_name: str | None = None) -> None:
        self.module_name = module_name
        super().__init__(message)


class FactoryReferenceError(ModuleFactoryError):
    """Base exception for names that do not resolve to the expected callable."""


class InvalidFactoryReferenceError(FactoryReferenceError):
    """Exception raised when a function name does not resolve to a function."""


class InvalidConstructorReferenceError(FactoryReferenceError):
    """Exception raised when a constructor name does not resolve to a class."""


class MissingFactoryReferenceError(FactoryReferenceError):
    """Exception raised when no factory or constructor can be selected."""


class ContractViolationError(ModuleFactoryError):
    """Exception raised when a resolved value breaks the expected contract."""


class AsyncContractError(ContractViolationError):
    """Exception raised when the synchronous API meets a deferred value."""


# Validation-related exceptions


class ValidationFailure(ModuleFactoryError):
    """Base exception for a produced value rejected by its load schema."""

    def __init__(
        self,
        message: str,
        *,
        module_name: str,
        definition: Any = None,
        schema: Any = None,
        value: Any = None,
        errors: "list[ValidationErrorEntry] | None" = None,
    ) -> None:
        """ValidationFailureを初期化します。

        Args:
            message: エラーメッセージ
            module_name: 検証対象を生成したモジュール名
            definition: 対象のModuleDefinition
            schema: 適用したスキーマの表現
            value: 拒否された値
            errors: 構造化されたエラー一覧
        """
        self.module_name = module_name
        self.definition = definition
        self.schema = schema
        self.value = value
        self.errors = list(errors or [])
        super().__init__(message)


class TypeMismatchError(ValidationFailure):
    """Exception raised when a TypeOf shortcut does not match the value."""


class SchemaValidationError(ValidationFailure):
    """Exception raised when a check function rejects the value."""


class SchemaCompileError(ModuleFactoryError):
    """Exception raised when a declarative schema cannot be compiled."""


class ResourceLoadError(ModuleFactoryError):
    """Exception raised when a JSON resource cannot be read or parsed."""


# TypeOf registry exceptions


class TypeOfRegistryError(ModuleFactoryError):
    """Base exception for misuse of the TypeOf registry."""


class ConfigurationError(TypeOfRegistryError):
    """Exception raised when a TypeOf is requested for an unknown type tag."""


class ImmutableStateError(TypeOfRegistryError):
    """Exception raised on any attempt to mutate the TypeOf registry."""
