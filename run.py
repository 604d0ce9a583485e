"""プロジェクトルートからの実行エントリーポイント"""
import asyncio

from invoicing.main import main

if __name__ == "__main__":
    asyncio.run(main())
