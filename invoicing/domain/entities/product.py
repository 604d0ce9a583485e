"""商品エンティティ"""
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from invoicing.domain.entities.freelancer import MasterStatus
from invoicing.domain.value_objects.tax_type import TaxType


class Product(BaseModel):
    """請求明細に使う商品のマスタ"""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="商品ID")
    name: str = Field(..., min_length=1, max_length=200, description="商品名")
    description: Optional[str] = Field(default=None, description="説明")
    unit_price: int = Field(..., ge=0, description="単価（円）")
    tax_type: TaxType = Field(..., description="課税区分")
    tax_rate: Decimal = Field(..., ge=0, le=100, description="税率（%）")
    withholding_tax_target: bool = Field(..., description="源泉徴収対象か")
    status: MasterStatus = Field(default=MasterStatus.ACTIVE, description="状態")
    freelancer_id: Optional[str] = Field(default=None, description="専用商品の場合のフリーランスID")
