"""会社情報エンティティ"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from invoicing.domain.entities.freelancer import EMAIL_PATTERN


class CompanyInfo(BaseModel):
    """自社（請求先）の情報"""

    model_config = ConfigDict(frozen=True)

    id: Optional[int] = Field(default=None, description="ID")
    company_name: str = Field(..., min_length=1, max_length=200, description="会社名")
    postal_code: Optional[str] = Field(default=None, pattern=r"^\d{7}$", description="郵便番号（7桁）")
    address: Optional[str] = Field(default=None, max_length=500, description="住所")
    phone: Optional[str] = Field(default=None, max_length=20, description="電話番号")
    email: Optional[str] = Field(default=None, description="メールアドレス")
    additional_info: Optional[str] = Field(default=None, max_length=1000, description="補足情報")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: Optional[str]) -> Optional[str]:
        """メールアドレスのバリデーション"""
        if not v:
            return None
        if not EMAIL_PATTERN.match(v):
            raise ValueError("有効なメールアドレスを入力してください")
        return v
