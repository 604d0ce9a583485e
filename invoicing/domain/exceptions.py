"""請求書ドメインの例外"""
from typing import Any, Dict, List, Optional


class InvoicingError(Exception):
    """請求書処理の基底例外"""


class ValidationError(InvoicingError, ValueError):
    """入力値が不正な場合の例外

    呼び出し側が入力を修正して再送する必要がある（リトライ不可）。
    """

    def __init__(self, message: str, details: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.details = details or []


class InvalidTransitionError(InvoicingError):
    """現在のステータスでは許可されない操作の例外"""

    def __init__(self, current_status: Optional[str], action: str):
        self.current_status = current_status
        self.action = action
        super().__init__(
            f"ステータス {current_status} では操作 {action} を実行できません"
        )


class ForbiddenError(InvoicingError):
    """操作者のロールまたは所有者が一致しない場合の例外"""


class NotFoundError(InvoicingError):
    """参照先の請求書・フリーランス・会社情報が存在しない場合の例外"""

    def __init__(self, resource: str, resource_id: Optional[str] = None):
        self.resource = resource
        self.resource_id = resource_id
        if resource_id:
            super().__init__(f"{resource} が見つかりません: {resource_id}")
        else:
            super().__init__(f"{resource} が見つかりません")


class NumberConflictError(InvoicingError):
    """請求書番号の一意制約に違反した場合の例外"""

    def __init__(self, invoice_number: Optional[str] = None):
        self.invoice_number = invoice_number
        super().__init__(f"請求書番号が重複しました: {invoice_number}")


class InvoiceNumberExhaustedError(InvoicingError):
    """同一年月の請求書番号が上限に達した場合の例外"""
