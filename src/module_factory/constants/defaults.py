"""既定値の定数定義。"""

# 関数名もコンストラクタ名も指定されない場合に呼び出すファクトリ
DEFAULT_FACTORY_NAME = "default"

# 既定ロガー名
LOGGER_NAME = "module_factory"

# 設定ファイル
CONFIG_ENV_VAR = "MODULE_FACTORY_CONFIG"
CONFIG_TABLE = "module_factory"

# スキーマ拡張キーワード
ASYNC_SCHEMA_FLAG = "$$async"
CUSTOM_KEYWORD = "custom"
