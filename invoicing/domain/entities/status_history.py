"""請求書ステータス履歴エンティティ"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from invoicing.domain.value_objects.invoice_status import InvoiceStatus


@dataclass(frozen=True)
class InvoiceStatusHistory:
    """ステータス遷移1回分の記録

    追記のみ。作成後に更新・削除しない。
    """

    invoice_id: str
    from_status: Optional[InvoiceStatus]
    to_status: InvoiceStatus
    changed_by: str
    comment: Optional[str] = None
    created_at: Optional[datetime] = None
    id: Optional[int] = None
