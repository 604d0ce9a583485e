"""確定時点のスナップショットを表す値オブジェクト"""
from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from invoicing.domain.entities.company import CompanyInfo
    from invoicing.domain.entities.freelancer import Freelancer


class FreelancerSnapshot(BaseModel):
    """確定時点のフリーランス情報（支払先）"""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="氏名")
    postal_code: str = Field(..., description="郵便番号")
    address: str = Field(..., description="住所")
    phone: str = Field(..., description="電話番号")
    registration_number: Optional[str] = Field(default=None, description="適格請求書発行事業者登録番号")
    bank_name: str = Field(..., description="銀行名")
    bank_branch: str = Field(..., description="支店名")
    account_type: str = Field(..., description="口座種別")
    account_number: str = Field(..., description="口座番号")
    account_holder: str = Field(..., description="口座名義")

    @classmethod
    def from_freelancer(cls, freelancer: "Freelancer") -> "FreelancerSnapshot":
        """フリーランスマスタの現在値を複写する"""
        return cls(
            name=freelancer.name,
            postal_code=freelancer.postal_code,
            address=freelancer.address,
            phone=freelancer.phone,
            registration_number=freelancer.registration_number,
            bank_name=freelancer.bank_name,
            bank_branch=freelancer.bank_branch,
            account_type=freelancer.account_type.value,
            account_number=freelancer.account_number,
            account_holder=freelancer.account_holder,
        )


class CompanySnapshot(BaseModel):
    """確定時点の会社情報（請求先）"""

    model_config = ConfigDict(frozen=True)

    company_name: str = Field(..., description="会社名")
    postal_code: Optional[str] = Field(default=None, description="郵便番号")
    address: Optional[str] = Field(default=None, description="住所")
    phone: Optional[str] = Field(default=None, description="電話番号")
    email: Optional[str] = Field(default=None, description="メールアドレス")

    @classmethod
    def from_company(cls, company: "CompanyInfo") -> "CompanySnapshot":
        """会社情報の現在値を複写する"""
        return cls(
            company_name=company.company_name,
            postal_code=company.postal_code,
            address=company.address,
            phone=company.phone,
            email=company.email,
        )
