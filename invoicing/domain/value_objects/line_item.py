"""請求書明細の値オブジェクト"""
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Optional, Union

from invoicing.domain.exceptions import ValidationError
from invoicing.domain.value_objects.tax_type import TaxType

if TYPE_CHECKING:
    from invoicing.domain.entities.product import Product

HUNDRED = Decimal("100")


def _to_decimal(value: Union[Decimal, int, float, str], field_name: str) -> Decimal:
    if isinstance(value, float):
        value = str(value)
    try:
        return Decimal(value)
    except (InvalidOperation, TypeError) as e:
        raise ValidationError(f"{field_name} が数値ではありません: {value}") from e


@dataclass(frozen=True)
class LineItem:
    """請求書の各明細を表す値オブジェクト

    金額はすべて円単位の整数。手数料率・税率はパーセント（例: 10 = 10%）。
    """

    product_name: str
    unit_price: int
    quantity: int
    tax_type: TaxType
    tax_rate: Decimal
    withholding_tax_target: bool
    commission_rate: Decimal = HUNDRED
    product_id: Optional[str] = None

    def __post_init__(self):
        """バリデーション"""
        object.__setattr__(self, "tax_type", TaxType(self.tax_type))
        object.__setattr__(self, "tax_rate", _to_decimal(self.tax_rate, "税率"))
        object.__setattr__(self, "commission_rate", _to_decimal(self.commission_rate, "手数料率"))

        if not self.product_name:
            raise ValidationError("商品名が空です")

        if isinstance(self.unit_price, bool) or not isinstance(self.unit_price, int):
            raise ValidationError(f"単価は整数である必要があります: {self.unit_price}")

        if self.unit_price < 0:
            raise ValidationError(f"単価が負の値です: {self.unit_price}")

        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise ValidationError(f"数量は整数である必要があります: {self.quantity}")

        if self.quantity < 1:
            raise ValidationError(f"数量は1以上である必要があります: {self.quantity}")

        if not Decimal(0) <= self.commission_rate <= HUNDRED:
            raise ValidationError(f"手数料率は0〜100の範囲である必要があります: {self.commission_rate}")

        if not Decimal(0) <= self.tax_rate <= HUNDRED:
            raise ValidationError(f"税率は0〜100の範囲である必要があります: {self.tax_rate}")

    @classmethod
    def from_product(
        cls,
        product: "Product",
        quantity: int,
        commission_rate: Decimal = HUNDRED,
    ) -> "LineItem":
        """商品マスタの既定値から明細を作成する

        Args:
            product: 商品マスタ
            quantity: 数量
            commission_rate: 手数料率（パーセント）

        Returns:
            LineItem: 作成された明細
        """
        return cls(
            product_name=product.name,
            unit_price=product.unit_price,
            quantity=quantity,
            tax_type=product.tax_type,
            tax_rate=product.tax_rate,
            withholding_tax_target=product.withholding_tax_target,
            commission_rate=commission_rate,
            product_id=product.id,
        )
