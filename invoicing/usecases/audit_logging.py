"""監査ログの出力"""
import logging

from invoicing.domain.entities.audit_entry import AuditEntry

# 監査イベント専用のロガー
audit_logger = logging.getLogger("invoicing.audit")


def log_audit(entry: AuditEntry) -> None:
    """保存済みの監査ログをロガーにも出力する"""
    audit_logger.info(
        f"{entry.action}: {entry.details or ''}",
        extra={
            "context": {
                "event_type": entry.action,
                "user_id": entry.user_id,
                "invoice_id": entry.invoice_id,
            }
        },
    )
