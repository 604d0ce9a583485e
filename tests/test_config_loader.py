"""ConfigLoaderのテスト"""
from pathlib import Path
from unittest.mock import patch

import pytest
import tomli

from invoicing.domain.value_objects.application_config import (
    DEFAULT_CONFIRM_MAX_ATTEMPTS,
    DEFAULT_DATABASE_URL,
    ApplicationConfig,
)
from invoicing.infrastructure.config.config_loader import ConfigLoader

ENV_KEYS = ["LOG_LEVEL", "DATABASE_URL", "CONFIRM_MAX_ATTEMPTS", "LOG_TO_FILE"]


@pytest.fixture
def loader(tmp_path: Path, monkeypatch) -> ConfigLoader:
    """.env を持たないプロジェクトルートのローダー"""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return ConfigLoader(tmp_path)


def test_defaults(loader):
    """環境変数がなければ既定値を使う"""
    config = loader.load_config()

    assert config.log_level == "INFO"
    assert config.log_to_file is True
    assert config.database_url == DEFAULT_DATABASE_URL
    assert config.confirm_max_attempts == DEFAULT_CONFIRM_MAX_ATTEMPTS


def test_values_from_environment(loader):
    """環境変数の値を読み込む"""
    env = {
        "LOG_LEVEL": "debug",
        "DATABASE_URL": "sqlite+aiosqlite:///tmp/test.db",
        "CONFIRM_MAX_ATTEMPTS": "5",
        "LOG_TO_FILE": "false",
    }
    with patch.dict("os.environ", env):
        config = loader.load_config()

    assert config.log_level == "DEBUG"
    assert config.database_url == "sqlite+aiosqlite:///tmp/test.db"
    assert config.confirm_max_attempts == 5
    assert config.log_to_file is False


def test_values_from_dotenv_file(tmp_path, loader):
    """プロジェクトルートの .env を読み込む"""
    (tmp_path / ".env").write_text("CONFIRM_MAX_ATTEMPTS=7\n", encoding="utf-8")

    with patch.dict("os.environ", {}):
        config = loader.load_config()

    assert config.confirm_max_attempts == 7


@pytest.mark.parametrize("value", ["0", "-1", "abc"])
def test_invalid_confirm_max_attempts_falls_back_to_default(loader, value):
    """不正な試行回数は既定値にする"""
    with patch.dict("os.environ", {"CONFIRM_MAX_ATTEMPTS": value}):
        config = loader.load_config()

    assert config.confirm_max_attempts == DEFAULT_CONFIRM_MAX_ATTEMPTS


def test_invalid_log_to_file_falls_back_to_default(loader):
    """不正な真偽値は既定値にする"""
    with patch.dict("os.environ", {"LOG_TO_FILE": "maybe"}):
        config = loader.load_config()

    assert config.log_to_file is True


def test_invalid_log_level_raises_error(loader):
    """不正なログレベルはエラー"""
    with patch.dict("os.environ", {"LOG_LEVEL": "VERBOSE"}):
        with pytest.raises(ValueError):
            loader.load_config()


def test_postgres_url_is_rewritten_to_async_driver():
    """postgres:// 形式のURLは非同期ドライバ付きに置き換える"""
    config = ApplicationConfig(database_url="postgres://user:pass@db:5432/invoicing")

    assert config.database_url == "postgresql+asyncpg://user:pass@db:5432/invoicing"


def test_async_postgres_driver_is_declared_as_extra():
    """書き換え先の asyncpg が postgres エクストラで宣言されている"""
    pyproject = Path(__file__).resolve().parent.parent / "pyproject.toml"
    with open(pyproject, "rb") as f:
        extras = tomli.load(f)["project"]["optional-dependencies"]

    assert any(requirement.startswith("asyncpg") for requirement in extras["postgres"])
