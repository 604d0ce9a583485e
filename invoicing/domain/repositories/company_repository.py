"""会社情報リポジトリのインターフェース"""
from abc import ABC, abstractmethod
from typing import Optional

from invoicing.domain.entities.company import CompanyInfo


class ICompanyRepository(ABC):
    """会社情報のリポジトリのインターフェース"""

    @abstractmethod
    async def get_current(self) -> Optional[CompanyInfo]:
        """現在の会社情報を取得する

        Returns:
            Optional[CompanyInfo]: 会社情報、未登録の場合はNone
        """
        pass

    @abstractmethod
    async def save(self, company: CompanyInfo) -> CompanyInfo:
        """会社情報を登録または更新する"""
        pass
