"""操作者コンテキストの値オブジェクト"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from invoicing.domain.exceptions import ValidationError


class Role(str, Enum):
    """ログインユーザーのロール"""

    COMPANY = "COMPANY"
    FREELANCER = "FREELANCER"


@dataclass(frozen=True)
class ActorContext:
    """操作を行うユーザーを表す値オブジェクト

    認証基盤から渡された内容をそのまま信頼する。
    フリーランスユーザーの場合、freelancer_id は本人のフリーランスプロフィールID。
    """

    role: Role
    user_id: str
    freelancer_id: Optional[str] = None

    def __post_init__(self):
        """バリデーション"""
        if not self.user_id:
            raise ValidationError("ユーザーIDが空です")

    @property
    def is_company(self) -> bool:
        return self.role == Role.COMPANY

    @property
    def is_freelancer(self) -> bool:
        return self.role == Role.FREELANCER

    def owns(self, freelancer_id: str) -> bool:
        """指定フリーランスの本人かどうか"""
        return self.is_freelancer and self.freelancer_id is not None and self.freelancer_id == freelancer_id
