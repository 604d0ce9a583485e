"""監査ログエンティティ"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


class AuditAction:
    """監査ログのアクション名の定数"""
    INVOICE_CREATE = "INVOICE_CREATE"
    INVOICE_UPDATE = "INVOICE_UPDATE"
    INVOICE_CONFIRM = "INVOICE_CONFIRM"
    INVOICE_APPROVED = "INVOICE_APPROVED"
    INVOICE_REJECTED = "INVOICE_REJECTED"
    INVOICE_PAID = "INVOICE_PAID"
    INVOICE_DELETE = "INVOICE_DELETE"
    INVOICE_DUPLICATE = "INVOICE_DUPLICATE"


@dataclass(frozen=True)
class AuditEntry:
    """請求書に対する操作の監査ログ"""

    user_id: str
    action: str
    invoice_id: Optional[str] = None
    details: Optional[str] = None
    created_at: Optional[datetime] = None
