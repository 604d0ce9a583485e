"""請求書エンティティ"""
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import List, Optional, Tuple

from invoicing.domain.exceptions import ValidationError
from invoicing.domain.services.status_transitions import EDITABLE
from invoicing.domain.value_objects.calculation import CalculatedItem, InvoiceCalculation
from invoicing.domain.value_objects.invoice_requests import NOTES_MAX_LENGTH
from invoicing.domain.value_objects.invoice_status import InvoiceStatus
from invoicing.domain.value_objects.line_item import LineItem
from invoicing.domain.value_objects.snapshots import CompanySnapshot, FreelancerSnapshot


@dataclass(frozen=True)
class Invoice:
    """請求書を表すエンティティ

    金額項目（subtotal 〜 invoice_amount）は明細から計算した値で、
    明細を変更するときは with_calculation で明細と一緒に置き換える。
    """

    id: str
    freelancer_id: str
    creator_id: str
    billing_date: date
    payment_due_date: date
    items: Tuple[CalculatedItem, ...]
    subtotal: int
    withholding_tax_subtotal: int
    total_with_tax: int
    withholding_tax: int
    invoice_amount: int
    status: InvoiceStatus = InvoiceStatus.DRAFT
    notes: Optional[str] = None
    invoice_number: Optional[str] = None
    freelancer_snapshot: Optional[FreelancerSnapshot] = None
    company_snapshot: Optional[CompanySnapshot] = None
    confirmed_at: Optional[datetime] = None
    payment_date: Optional[date] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        """バリデーション"""
        object.__setattr__(self, "items", tuple(self.items))

        if not self.items:
            raise ValidationError("明細は1行以上必要です")

        if self.billing_date > self.payment_due_date:
            raise ValidationError(
                f"請求日が支払期限より後です: {self.billing_date} > {self.payment_due_date}"
            )

        if self.notes is not None and len(self.notes) > NOTES_MAX_LENGTH:
            raise ValidationError(f"備考は{NOTES_MAX_LENGTH}文字以内で入力してください")

        if self.invoice_amount != self.total_with_tax - self.withholding_tax:
            raise ValidationError(
                f"請求金額が合計と一致しません: {self.invoice_amount} != "
                f"{self.total_with_tax} - {self.withholding_tax}"
            )

    @classmethod
    def draft(
        cls,
        invoice_id: str,
        freelancer_id: str,
        creator_id: str,
        billing_date: date,
        payment_due_date: date,
        calculation: InvoiceCalculation,
        notes: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> "Invoice":
        """計算結果から下書きの請求書を作成する"""
        return cls(
            id=invoice_id,
            freelancer_id=freelancer_id,
            creator_id=creator_id,
            billing_date=billing_date,
            payment_due_date=payment_due_date,
            items=calculation.items,
            subtotal=calculation.subtotal,
            withholding_tax_subtotal=calculation.withholding_tax_subtotal,
            total_with_tax=calculation.total_with_tax,
            withholding_tax=calculation.withholding_tax,
            invoice_amount=calculation.invoice_amount,
            status=InvoiceStatus.DRAFT,
            notes=notes,
            created_at=created_at,
        )

    def with_calculation(self, calculation: InvoiceCalculation) -> "Invoice":
        """明細と金額5項目をまとめて置き換えた請求書を返す"""
        return replace(
            self,
            items=calculation.items,
            subtotal=calculation.subtotal,
            withholding_tax_subtotal=calculation.withholding_tax_subtotal,
            total_with_tax=calculation.total_with_tax,
            withholding_tax=calculation.withholding_tax,
            invoice_amount=calculation.invoice_amount,
        )

    @property
    def line_items(self) -> List[LineItem]:
        """計算前の明細"""
        return [item.line_item for item in self.items]

    @property
    def is_editable(self) -> bool:
        return self.status in EDITABLE
