"""請求金額の計算結果を表す値オブジェクト"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Tuple

from invoicing.domain.value_objects.line_item import LineItem


@dataclass(frozen=True)
class CalculatedItem:
    """金額計算済みの明細"""

    line_item: LineItem
    amount: int  # 税抜金額
    tax_amount: int  # 参考値。請求書の消費税は税率ごとに集計して計算する


@dataclass(frozen=True)
class TaxBreakdown:
    """税率ごとの消費税集計"""

    tax_rate: Decimal
    taxable_amount: int
    tax_amount: int


@dataclass(frozen=True)
class InvoiceCalculation:
    """請求書全体の金額計算結果"""

    items: Tuple[CalculatedItem, ...]
    tax_breakdown: Tuple[TaxBreakdown, ...]
    subtotal: int
    withholding_tax_subtotal: int
    total_with_tax: int
    withholding_tax: int
    invoice_amount: int

    @property
    def tax_total(self) -> int:
        """消費税合計"""
        return sum(breakdown.tax_amount for breakdown in self.tax_breakdown)
