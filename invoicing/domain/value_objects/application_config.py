"""アプリケーション設定を表す値オブジェクト"""
from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///data/invoicing.db"
DEFAULT_CONFIRM_MAX_ATTEMPTS = 3


class ApplicationConfig(BaseModel):
    """アプリケーション設定の値オブジェクト"""

    model_config = ConfigDict(frozen=True)

    # ログ設定
    log_level: str = Field(default="INFO", description="ログレベル")
    log_to_file: bool = Field(default=True, description="ログファイルへ出力するか")

    # データベース設定
    database_url: str = Field(default=DEFAULT_DATABASE_URL, description="データベース接続URL")

    # 請求書確定時の採番リトライ回数
    confirm_max_attempts: int = Field(
        default=DEFAULT_CONFIRM_MAX_ATTEMPTS, description="請求書番号の重複時に確定を試行する最大回数"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """ログレベルのバリデーション"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"ログレベルは {valid_levels} のいずれかである必要があります")
        return v.upper()

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """データベースURLのバリデーション"""
        # Heroku/Cloud SQL 形式の postgres:// を非同期ドライバ付きに置き換える
        if v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql+asyncpg://", 1)
        return v

    @field_validator("confirm_max_attempts")
    @classmethod
    def validate_confirm_max_attempts(cls, v: int) -> int:
        """確定試行回数のバリデーション"""
        if v <= 0:
            return DEFAULT_CONFIRM_MAX_ATTEMPTS
        return v
