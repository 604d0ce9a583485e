"""課税区分の値オブジェクト"""
from enum import Enum


class TaxType(str, Enum):
    """明細単価の課税区分"""

    INCLUSIVE = "INCLUSIVE"  # 税込
    EXCLUSIVE = "EXCLUSIVE"  # 税抜
