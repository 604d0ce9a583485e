"""請求書ステータスと操作の値オブジェクト"""
from enum import Enum


class InvoiceStatus(str, Enum):
    """請求書のライフサイクル上の状態"""

    DRAFT = "DRAFT"
    PENDING_APPROVAL = "PENDING_APPROVAL"
    REJECTED = "REJECTED"
    APPROVED = "APPROVED"
    PAID = "PAID"


class InvoiceAction(str, Enum):
    """請求書に対する操作"""

    CREATE = "CREATE"
    EDIT = "EDIT"
    CONFIRM = "CONFIRM"
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    MARK_PAID = "MARK_PAID"
    DELETE = "DELETE"
    DUPLICATE = "DUPLICATE"
    VIEW = "VIEW"
