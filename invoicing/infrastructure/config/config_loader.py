"""設定の読み込みを行うサービス"""
import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from invoicing.domain.value_objects.application_config import (
    DEFAULT_CONFIRM_MAX_ATTEMPTS,
    DEFAULT_DATABASE_URL,
    ApplicationConfig,
)

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}


class ConfigLoader:
    """環境変数から設定を読み込むサービス"""

    def __init__(self, project_root: Path) -> None:
        """初期化

        Args:
            project_root: プロジェクトルートディレクトリ
        """
        self.project_root = project_root
        self.logger = logging.getLogger(__name__)

    def load_config(self) -> ApplicationConfig:
        """アプリケーション設定を読み込む

        Returns:
            ApplicationConfig: アプリケーション設定

        Raises:
            ValueError: 設定値が無効な場合
        """
        load_dotenv(self.project_root / ".env")

        log_level = os.getenv("LOG_LEVEL", "INFO")
        database_url = os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL

        # 確定試行回数の取得とバリデーション
        confirm_max_attempts = self._parse_confirm_max_attempts(
            os.getenv("CONFIRM_MAX_ATTEMPTS")
        )

        log_to_file = self._parse_bool("LOG_TO_FILE", os.getenv("LOG_TO_FILE"), default=True)

        try:
            config = ApplicationConfig(
                log_level=log_level,
                log_to_file=log_to_file,
                database_url=database_url,
                confirm_max_attempts=confirm_max_attempts,
            )
        except ValueError as e:
            raise ValueError(f"設定値が無効です: {str(e)}") from e

        self.logger.info(f"請求書番号の確定試行回数: {config.confirm_max_attempts} 回")
        return config

    def _parse_confirm_max_attempts(self, value: Optional[str]) -> int:
        """確定試行回数をパースする

        Args:
            value: 環境変数の値

        Returns:
            int: パースされた値、無効な場合は既定値
        """
        if not value:
            return DEFAULT_CONFIRM_MAX_ATTEMPTS

        try:
            parsed = int(value)
        except ValueError:
            parsed = 0

        if parsed <= 0:
            self.logger.warning(
                f"CONFIRM_MAX_ATTEMPTS の値が無効です: {value}。"
                f"既定値 {DEFAULT_CONFIRM_MAX_ATTEMPTS} 回で実行します。"
            )
            return DEFAULT_CONFIRM_MAX_ATTEMPTS
        return parsed

    def _parse_bool(self, name: str, value: Optional[str], default: bool) -> bool:
        """真偽値の環境変数をパースする"""
        if value is None or value == "":
            return default

        normalized = value.strip().lower()
        if normalized in TRUE_VALUES:
            return True
        if normalized in FALSE_VALUES:
            return False

        self.logger.warning(f"{name} の値が無効です: {value}。既定値 {default} を使用します。")
        return default
