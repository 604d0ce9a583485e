"""フリーランスエンティティ"""
import re
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class AccountType(str, Enum):
    """口座種別"""

    ORDINARY = "ORDINARY"  # 普通
    CURRENT = "CURRENT"  # 当座
    SAVINGS = "SAVINGS"  # 貯蓄


class MasterStatus(str, Enum):
    """マスタの利用状態"""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class Freelancer(BaseModel):
    """フリーランス（支払先）のマスタ"""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="フリーランスID")
    user_id: Optional[str] = Field(default=None, description="ログインユーザーID")
    name: str = Field(..., min_length=1, max_length=200, description="氏名")
    name_kana: Optional[str] = Field(default=None, max_length=200, description="氏名カナ")
    email: str = Field(..., description="メールアドレス")
    phone: str = Field(..., min_length=1, max_length=20, description="電話番号")
    postal_code: str = Field(..., pattern=r"^\d{7}$", description="郵便番号（7桁）")
    address: str = Field(..., min_length=1, description="住所")
    registration_number: Optional[str] = Field(
        default=None, description="適格請求書発行事業者登録番号（T+13桁）"
    )
    bank_name: str = Field(..., min_length=1, description="銀行名")
    bank_branch: str = Field(..., min_length=1, description="支店名")
    account_type: AccountType = Field(..., description="口座種別")
    account_number: str = Field(..., min_length=1, max_length=20, description="口座番号")
    account_holder: str = Field(..., min_length=1, description="口座名義")
    withholding_tax_default: bool = Field(default=True, description="源泉徴収対象の既定値")
    status: MasterStatus = Field(default=MasterStatus.ACTIVE, description="状態")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """メールアドレスのバリデーション"""
        if not EMAIL_PATTERN.match(v):
            raise ValueError("有効なメールアドレスを入力してください")
        return v

    @field_validator("name_kana", "registration_number", mode="before")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v == "":
            return None
        return v

    @field_validator("registration_number")
    @classmethod
    def validate_registration_number(cls, v: Optional[str]) -> Optional[str]:
        """登録番号のバリデーション"""
        if v is not None and not re.fullmatch(r"T\d{13}", v):
            raise ValueError("適格請求書登録番号はT+13桁の数字です")
        return v
