"""フリーランスリポジトリのインターフェース"""
from abc import ABC, abstractmethod
from typing import Optional

from invoicing.domain.entities.freelancer import Freelancer


class IFreelancerRepository(ABC):
    """フリーランスマスタのリポジトリのインターフェース"""

    @abstractmethod
    async def get(self, freelancer_id: str) -> Optional[Freelancer]:
        """フリーランスを取得する

        Args:
            freelancer_id: フリーランスID

        Returns:
            Optional[Freelancer]: フリーランス、存在しない場合はNone
        """
        pass

    @abstractmethod
    async def save(self, freelancer: Freelancer) -> Freelancer:
        """フリーランスを登録または更新する"""
        pass
