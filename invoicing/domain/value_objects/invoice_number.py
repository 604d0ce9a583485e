"""請求書番号の値オブジェクト"""
import re
from dataclasses import dataclass
from datetime import date
from typing import Optional

from invoicing.domain.exceptions import InvoiceNumberExhaustedError, ValidationError

INVOICE_NUMBER_PATTERN = re.compile(r"^(\d{6})-(\d{4})$")
MAX_SEQUENCE = 9999


@dataclass(frozen=True)
class InvoiceNumber:
    """YYYYMM-NNNN 形式の請求書番号

    YYYYMM は請求日の年月、NNNN は年月ごとの連番（4桁ゼロ埋め）。
    """

    year_month: str
    sequence: int

    def __post_init__(self):
        """バリデーション"""
        if not re.fullmatch(r"\d{6}", self.year_month):
            raise ValidationError(f"年月の形式が不正です: {self.year_month}")

        if not 1 <= self.sequence <= MAX_SEQUENCE:
            raise ValidationError(f"連番が範囲外です: {self.sequence}")

    def __str__(self) -> str:
        return f"{self.year_month}-{self.sequence:04d}"

    @staticmethod
    def prefix_for(billing_date: date) -> str:
        """請求日から年月プレフィックスを求める"""
        return billing_date.strftime("%Y%m")

    @classmethod
    def parse(cls, value: str) -> "InvoiceNumber":
        """文字列から請求書番号を復元する

        Raises:
            ValidationError: 形式が不正な場合
        """
        match = INVOICE_NUMBER_PATTERN.match(value)
        if not match:
            raise ValidationError(f"請求書番号の形式が不正です: {value}")
        return cls(year_month=match.group(1), sequence=int(match.group(2)))

    @classmethod
    def next_after(cls, billing_date: date, latest: Optional[str]) -> "InvoiceNumber":
        """当月の最大番号の次の番号を求める

        Args:
            billing_date: 請求日
            latest: 同じ年月で採番済みの最大番号（未採番ならNone）

        Returns:
            InvoiceNumber: 次の請求書番号

        Raises:
            InvoiceNumberExhaustedError: 当月の連番が上限に達している場合
        """
        year_month = cls.prefix_for(billing_date)
        if latest is None:
            return cls(year_month=year_month, sequence=1)

        current = cls.parse(latest)
        if current.year_month != year_month:
            raise ValidationError(
                f"年月が一致しません: {current.year_month} != {year_month}"
            )
        if current.sequence >= MAX_SEQUENCE:
            raise InvoiceNumberExhaustedError(
                f"{year_month} の請求書番号が上限({MAX_SEQUENCE})に達しました"
            )
        return cls(year_month=year_month, sequence=current.sequence + 1)
