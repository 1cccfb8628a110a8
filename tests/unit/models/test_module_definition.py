"""ModuleDefinitionモデルのユニットテスト."""

import pytest
from pydantic import ValidationError

from module_factory.exceptions import DefinitionStructureError
from module_factory.models import (
    LoadSchema,
    ModuleDefinition,
    TypeOf,
    is_constrained_module_definition,
    is_load_schema,
    is_module_definition,
    validate_module_definition,
)
from module_factory.models.module_definition import coerce_definition
from module_factory.schema import sync_check


@pytest.mark.unit
class TestModuleDefinition:
    """ModuleDefinitionの生成テスト."""

    def test_accepts_camel_case_keys(self) -> None:
        """camelCaseのキーで生成できる."""
        definition = ModuleDefinition.model_validate(
            {"moduleName": "./extended.py", "functionName": "create2", "paramsArray": [1, "a"]}
        )
        assert definition.module_name == "./extended.py"
        assert definition.function_name == "create2"
        assert definition.params_array == [1, "a"]
        assert definition.load_schema is None

    def test_accepts_snake_case_keys(self) -> None:
        """snake_caseのキーでも生成できる."""
        definition = ModuleDefinition(module_name="json", function_name="dumps")
        assert definition.discriminators() == {"function_name": "dumps"}

    def test_tag_string_becomes_type_of_member(self) -> None:
        """文字列のタグはTypeOfメンバーに変換される."""
        definition = ModuleDefinition.model_validate({"moduleName": "json", "loadSchema": "string"})
        assert definition.load_schema is TypeOf.STRING

    def test_unknown_tag_string_is_rejected(self) -> None:
        """未知のタグはValidationErrorになる."""
        with pytest.raises(ValidationError, match="Attempt to initialize TypeOf"):
            ModuleDefinition.model_validate({"moduleName": "json", "loadSchema": "undefined"})

    def test_load_schema_from_mapping(self) -> None:
        """マッピングのloadSchemaはLoadSchemaになる."""
        definition = ModuleDefinition.model_validate(
            {
                "moduleName": "./x.json",
                "loadSchema": {"validationSchema": {"type": "object"}, "useNewCheckerFunction": True},
            }
        )
        assert isinstance(definition.load_schema, LoadSchema)
        assert definition.load_schema.validation_schema == {"type": "object"}
        assert definition.load_schema.use_new_checker_function is True

    def test_load_schema_accepts_check_function(self) -> None:
        """チェック関数をそのまま保持する."""
        check = sync_check(lambda value: True)
        definition = ModuleDefinition(module_name="json", load_schema=check)
        assert definition.load_schema is check

    def test_definition_is_frozen(self) -> None:
        """定義は変更できない."""
        definition = ModuleDefinition(module_name="json")
        with pytest.raises(ValidationError):
            definition.module_name = "other"  # type: ignore[misc]


@pytest.mark.unit
class TestDefinitionGuards:
    """型ガードのテスト."""

    @pytest.mark.parametrize(
        ("candidate", "expected"),
        [
            ({"moduleName": "m"}, True),
            ({"moduleName": "m", "functionName": "f"}, True),
            ({"module_name": "m", "constructor_name": "C"}, True),
            ({"moduleName": "m", "functionName": "f", "constructorName": "C"}, False),
            ({"moduleName": "m", "functionName": None, "propertyName": None}, False),
            ({"functionName": "f"}, False),
            ("m", False),
            (None, False),
        ],
    )
    def test_is_module_definition(self, candidate: object, expected: bool) -> None:
        """モジュール名と高々1つの識別子を持つか判定する."""
        assert is_module_definition(candidate) is expected

    def test_is_module_definition_for_model(self) -> None:
        """モデルはNoneでないフィールドを数える."""
        assert is_module_definition(ModuleDefinition(module_name="m", function_name="f"))

    @pytest.mark.parametrize(
        ("candidate", "expected"),
        [
            ({"moduleName": "m", "functionName": "f"}, True),
            ({"moduleName": "m", "propertyName": "p"}, True),
            ({"moduleName": "m"}, False),
            ({"moduleName": "m", "functionName": None}, False),
            ({"moduleName": "m", "functionName": "f", "propertyName": "p"}, False),
        ],
    )
    def test_is_constrained_module_definition(self, candidate: object, expected: bool) -> None:
        """ちょうど1つの識別子が設定されているか判定する."""
        assert is_constrained_module_definition(candidate) is expected

    def test_is_load_schema(self) -> None:
        """LoadSchemaまたは同じ形のマッピングを判定する."""
        assert is_load_schema(LoadSchema(validation_schema={}))
        assert is_load_schema({"validationSchema": {}})
        assert not is_load_schema({"type": "object"})
        assert not is_load_schema(TypeOf.OBJECT)


@pytest.mark.unit
class TestValidateModuleDefinition:
    """validate_module_definitionのテスト."""

    def test_valid_definition(self) -> None:
        """正しい定義はTrueを返す."""
        assert validate_module_definition({"moduleName": "json", "functionName": "dumps"}) is True

    def test_missing_module_name(self) -> None:
        """moduleNameがない場合はエラー一覧を返す."""
        result = validate_module_definition({"functionName": "dumps"})
        assert result is not True
        assert any("moduleName" in entry.field for entry in result)

    def test_wrong_field_type(self) -> None:
        """型が異なる場合はエラー一覧を返す."""
        result = validate_module_definition({"moduleName": "json", "paramsArray": "not-a-list"})
        assert result is not True
        assert result[0].field == "paramsArray"

    def test_conflicting_discriminators(self) -> None:
        """識別子が複数ある場合はconflictエントリを返す."""
        result = validate_module_definition({"moduleName": "m", "functionName": "f", "constructorName": "C"})
        assert result is not True
        assert [entry.type for entry in result] == ["conflict"]
        assert result[0].actual == ["function_name", "constructor_name"]

    def test_not_a_mapping(self) -> None:
        """マッピング以外はエラーを返す."""
        result = validate_module_definition(["moduleName"])
        assert result is not True
        assert result[0].actual == "list"


@pytest.mark.unit
class TestCoerceDefinition:
    """coerce_definitionのテスト."""

    def test_returns_model_unchanged(self) -> None:
        """モデルはそのまま返す."""
        definition = ModuleDefinition(module_name="json")
        assert coerce_definition(definition) is definition

    def test_invalid_mapping_raises(self) -> None:
        """不正なマッピングはDefinitionStructureErrorになる."""
        with pytest.raises(DefinitionStructureError) as exc_info:
            coerce_definition({"functionName": "f"})
        assert exc_info.value.errors


@pytest.mark.unit
class TestLoadSchemaField:
    """loadSchemaフィールドの分類テスト."""

    def test_check_function(self) -> None:
        """フラグ付きチェック関数で定義を生成できる."""
        check = sync_check(lambda value: True)
        definition = ModuleDefinition(module_name="json", function_name="dumps", load_schema=check)
        assert definition.load_schema is check

    def test_coroutine_function(self) -> None:
        """コルーチン関数もそのまま保持する."""

        async def check_value(value):
            return True

        definition = ModuleDefinition.model_validate({"moduleName": "json", "loadSchema": check_value})
        assert definition.load_schema is check_value

    def test_camel_case_mapping_with_new_checker(self) -> None:
        """camelCaseのマッピングはLoadSchemaになる."""
        definition = ModuleDefinition.model_validate(
            {
                "moduleName": "json",
                "loadSchema": {"validationSchema": {"type": "object"}, "useNewCheckerFunction": True},
            }
        )
        assert isinstance(definition.load_schema, LoadSchema)
        assert definition.load_schema.use_new_checker_function is True

    def test_unsupported_value(self) -> None:
        """未対応の値はValidationErrorになる."""
        with pytest.raises(ValidationError, match="loadSchema must be"):
            ModuleDefinition.model_validate({"moduleName": "json", "loadSchema": 42})

    def test_invalid_mapping(self) -> None:
        """不正なLoadSchemaマッピングはValidationErrorになる."""
        with pytest.raises(ValidationError, match="invalid loadSchema"):
            ModuleDefinition.model_validate({"moduleName": "json", "loadSchema": {"validationSchema": "x"}})

    def test_structural_checks_accept_check_function(self) -> None:
        """構造検証と変換はチェック関数を受け付ける."""
        candidate = {"moduleName": "json", "functionName": "dumps", "loadSchema": sync_check(lambda value: True)}
        assert validate_module_definition(candidate) is True
        assert coerce_definition(candidate).function_name == "dumps"

    def test_structural_checks_report_bad_load_schema(self) -> None:
        """不正なloadSchemaはエントリまたはDefinitionStructureErrorになる."""
        candidate = {"moduleName": "json", "loadSchema": 42}
        result = validate_module_definition(candidate)
        assert result is not True
        assert result[0].field == "loadSchema"
        with pytest.raises(DefinitionStructureError):
            coerce_definition(candidate)


@pytest.mark.unit
class TestDiscriminatorCounting:
    """識別子の数え方の一貫性テスト."""

    def test_none_valued_key_counts_in_both_checks(self) -> None:
        """Noneのキーも存在として数え、両方の判定が一致する."""
        candidate = {"moduleName": "m", "functionName": "f", "propertyName": None}
        assert is_module_definition(candidate) is False
        result = validate_module_definition(candidate)
        assert result is not True
        assert [entry.type for entry in result] == ["conflict"]
        assert result[0].actual == ["function_name", "property_name"]

    def test_model_counts_set_values(self) -> None:
        """モデルはNoneでない値だけを数える."""
        definition = ModuleDefinition(module_name="m", function_name="f")
        assert validate_module_definition(definition) is True
        assert is_module_definition(definition) is True
