"""Shared fixtures for module-factory tests."""

from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    """テスト用フィクスチャディレクトリ."""
    return FIXTURES_DIR


@pytest.fixture
def extended_path() -> str:
    """ファイルパスで読み込むフィクスチャモジュール."""
    return str(FIXTURES_DIR / "extended.py")


@pytest.fixture
def json_path() -> str:
    """name/id/labelを持つJSONファイル."""
    return str(FIXTURES_DIR / "test-json.json")


@pytest.fixture
def fixture_package(monkeypatch: pytest.MonkeyPatch) -> str:
    """ドット名でimportできるフィクスチャパッケージ."""
    monkeypatch.syspath_prepend(str(FIXTURES_DIR))
    return "mf_fixture_pkg"
