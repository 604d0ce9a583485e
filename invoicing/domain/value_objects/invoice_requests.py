"""操作ごとの入力スキーマ"""
from datetime import date
from decimal import Decimal
from typing import Any, List, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from invoicing.domain.exceptions import ValidationError
from invoicing.domain.value_objects.invoice_status import InvoiceStatus
from invoicing.domain.value_objects.line_item import LineItem
from invoicing.domain.value_objects.tax_type import TaxType

NOTES_MAX_LENGTH = 1000

RequestT = TypeVar("RequestT", bound="InvoiceRequest")


class InvoiceRequest(BaseModel):
    """入力スキーマの基底クラス"""

    model_config = ConfigDict(frozen=True, extra="forbid")

    @classmethod
    def parse(cls: Type[RequestT], payload: Mapping[str, Any]) -> RequestT:
        """生の入力を検証してスキーマに変換する

        Args:
            payload: JSON由来の入力

        Returns:
            検証済みのスキーマ

        Raises:
            ValidationError: 入力が不正な場合
        """
        try:
            return cls.model_validate(payload)
        except PydanticValidationError as e:
            details = [
                {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
                for error in e.errors()
            ]
            raise ValidationError(f"入力値が不正です: {cls.__name__}", details=details) from e


class LineItemInput(InvoiceRequest):
    """明細の入力"""

    product_id: Optional[str] = Field(default=None, description="商品マスタID（手入力の場合はNone）")
    product_name: str = Field(..., min_length=1, max_length=200, description="商品名")
    unit_price: int = Field(..., ge=0, description="単価（円）")
    quantity: int = Field(..., ge=1, description="数量")
    commission_rate: Decimal = Field(default=Decimal("100"), ge=0, le=100, description="手数料率（%）")
    tax_type: TaxType = Field(..., description="課税区分")
    tax_rate: Decimal = Field(..., ge=0, le=100, description="税率（%）")
    withholding_tax_target: bool = Field(..., description="源泉徴収対象か")

    def to_line_item(self) -> LineItem:
        return LineItem(
            product_name=self.product_name,
            unit_price=self.unit_price,
            quantity=self.quantity,
            tax_type=self.tax_type,
            tax_rate=self.tax_rate,
            withholding_tax_target=self.withholding_tax_target,
            commission_rate=self.commission_rate,
            product_id=self.product_id,
        )


class CreateInvoiceRequest(InvoiceRequest):
    """請求書作成の入力"""

    freelancer_id: str = Field(..., min_length=1, description="フリーランスID")
    billing_date: date = Field(..., description="請求日")
    payment_due_date: date = Field(..., description="支払期限")
    notes: Optional[str] = Field(default=None, max_length=NOTES_MAX_LENGTH, description="備考")
    items: List[LineItemInput] = Field(..., min_length=1, description="明細")

    @model_validator(mode="after")
    def validate_dates(self) -> "CreateInvoiceRequest":
        if self.payment_due_date < self.billing_date:
            raise ValueError("支払期限は請求日以降である必要があります")
        return self

    def line_items(self) -> List[LineItem]:
        return [item.to_line_item() for item in self.items]


class UpdateInvoiceRequest(InvoiceRequest):
    """請求書編集の入力

    None の項目は変更しない。
    """

    billing_date: Optional[date] = Field(default=None, description="請求日")
    payment_due_date: Optional[date] = Field(default=None, description="支払期限")
    notes: Optional[str] = Field(default=None, max_length=NOTES_MAX_LENGTH, description="備考")
    items: Optional[List[LineItemInput]] = Field(default=None, min_length=1, description="明細")

    def line_items(self) -> Optional[List[LineItem]]:
        if self.items is None:
            return None
        return [item.to_line_item() for item in self.items]


class StatusChangeRequest(InvoiceRequest):
    """ステータス変更（承認・差し戻し・支払済み）の入力"""

    status: InvoiceStatus = Field(..., description="変更後のステータス")
    comment: Optional[str] = Field(default=None, max_length=NOTES_MAX_LENGTH, description="コメント")
    payment_date: Optional[date] = Field(default=None, description="支払日（支払済みの場合のみ）")

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: InvoiceStatus) -> InvoiceStatus:
        """変更後ステータスのバリデーション"""
        allowed = [InvoiceStatus.APPROVED, InvoiceStatus.REJECTED, InvoiceStatus.PAID]
        if v not in allowed:
            raise ValueError(f"ステータスは {[s.value for s in allowed]} のいずれかである必要があります")
        return v

    @model_validator(mode="after")
    def validate_payment_date(self) -> "StatusChangeRequest":
        if self.payment_date is not None and self.status != InvoiceStatus.PAID:
            raise ValueError("支払日は支払済みにする場合のみ指定できます")
        return self


class InvoiceSearchCriteria(InvoiceRequest):
    """請求書検索の条件"""

    status: Optional[InvoiceStatus] = Field(default=None, description="ステータス")
    freelancer_id: Optional[str] = Field(default=None, description="フリーランスID")
    billing_date_from: Optional[date] = Field(default=None, description="請求日（開始）")
    billing_date_to: Optional[date] = Field(default=None, description="請求日（終了）")
