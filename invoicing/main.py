"""メインエントリーポイント

設定を読み込み、ログを初期化して、請求書データベースのテーブルを作成する。
"""
import logging
from pathlib import Path

from invoicing.infrastructure.config.config_loader import ConfigLoader
from invoicing.infrastructure.logging.logging_setup import LoggingSetup
from invoicing.infrastructure.services.service_factory import ServiceFactory

project_root = Path(__file__).parent.parent


async def main() -> None:
    """メイン処理"""
    config = ConfigLoader(project_root).load_config()
    LoggingSetup.setup(config.log_level, project_root, log_to_file=config.log_to_file)
    logger = logging.getLogger(__name__)

    logger.info("=== 請求書管理 データベース初期化 開始 ===")

    factory = ServiceFactory(config, logger)
    try:
        await factory.database.init_schema()
        logger.info("=== 請求書管理 データベース初期化 完了 ===")
    except Exception as e:
        logger.error(f"データベースの初期化に失敗しました: {e}", exc_info=True)
        raise
    finally:
        await factory.close()
