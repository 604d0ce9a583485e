"""請求金額の計算"""
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List

from invoicing.domain.exceptions import ValidationError
from invoicing.domain.value_objects.calculation import CalculatedItem, InvoiceCalculation, TaxBreakdown
from invoicing.domain.value_objects.line_item import HUNDRED, LineItem
from invoicing.domain.value_objects.tax_type import TaxType

# 源泉徴収税率（所得税 10% + 復興特別所得税 0.21%）
WITHHOLDING_TAX_RATE = Decimal("0.1021")

_ONE = Decimal("1")


def _round_half_up(value: Decimal) -> int:
    return int(value.quantize(_ONE, rounding=ROUND_HALF_UP))


def _floor(value: Decimal) -> int:
    return int(value.quantize(_ONE, rounding=ROUND_FLOOR))


def calculate_item(item: LineItem) -> CalculatedItem:
    """明細1行の税抜金額と参考消費税額を計算する

    税抜金額は四捨五入、消費税は切り捨て。
    """
    gross_amount = Decimal(item.unit_price) * item.quantity * item.commission_rate / HUNDRED

    if item.tax_type == TaxType.INCLUSIVE:
        amount = _round_half_up(gross_amount / (_ONE + item.tax_rate / HUNDRED))
        tax_amount = _floor(gross_amount - amount)
    else:
        amount = _round_half_up(gross_amount)
        tax_amount = _floor(amount * item.tax_rate / HUNDRED)

    return CalculatedItem(line_item=item, amount=amount, tax_amount=tax_amount)


def calculate_invoice(items: Iterable[LineItem]) -> InvoiceCalculation:
    """明細の一覧から請求金額を計算する

    消費税は明細ごとに合計せず、税率ごとに税抜金額を合計してから
    税率を掛けて切り捨てる（適格請求書の端数処理）。

    Args:
        items: 明細の一覧（順序は結果に保持される）

    Returns:
        InvoiceCalculation: 計算結果

    Raises:
        ValidationError: 明細が空、または明細の値が範囲外の場合
    """
    line_items: List[LineItem] = list(items)
    if not line_items:
        raise ValidationError("明細は1行以上必要です")

    for line_item in line_items:
        if not isinstance(line_item, LineItem):
            raise ValidationError(f"明細の型が不正です: {type(line_item).__name__}")

    calculated = tuple(calculate_item(line_item) for line_item in line_items)

    # 税率ごとに税抜金額を集計する（出現順を保持）
    taxable_by_rate: Dict[Decimal, int] = {}
    for item in calculated:
        rate = item.line_item.tax_rate
        taxable_by_rate[rate] = taxable_by_rate.get(rate, 0) + item.amount

    tax_breakdown = tuple(
        TaxBreakdown(
            tax_rate=rate,
            taxable_amount=taxable_amount,
            tax_amount=_floor(taxable_amount * rate / HUNDRED),
        )
        for rate, taxable_amount in taxable_by_rate.items()
    )

    subtotal = sum(item.amount for item in calculated)
    total_with_tax = subtotal + sum(breakdown.tax_amount for breakdown in tax_breakdown)

    withholding_tax_subtotal = sum(
        item.amount for item in calculated if item.line_item.withholding_tax_target
    )
    withholding_tax = _floor(withholding_tax_subtotal * WITHHOLDING_TAX_RATE)

    return InvoiceCalculation(
        items=calculated,
        tax_breakdown=tax_breakdown,
        subtotal=subtotal,
        withholding_tax_subtotal=withholding_tax_subtotal,
        total_with_tax=total_with_tax,
        withholding_tax=withholding_tax,
        invoice_amount=total_with_tax - withholding_tax,
    )
