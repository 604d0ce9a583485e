"""下書きの請求書を削除するユースケース"""
import logging

from invoicing.domain.entities.audit_entry import AuditAction, AuditEntry
from invoicing.domain.exceptions import InvoicingError, NotFoundError
from invoicing.domain.repositories.invoice_repository import IInvoiceRepository
from invoicing.domain.services.status_transitions import resolve_transition
from invoicing.domain.value_objects.actor import ActorContext
from invoicing.domain.value_objects.invoice_status import InvoiceAction
from invoicing.usecases.audit_logging import log_audit

logger = logging.getLogger(__name__)


class DeleteInvoiceUseCase:
    """下書きの請求書を明細・履歴ごと削除するユースケース"""

    def __init__(self, invoice_repository: IInvoiceRepository):
        self.invoice_repository = invoice_repository

    async def execute(self, actor: ActorContext, invoice_id: str) -> None:
        """請求書を削除する

        監査ログは請求書との関連を持たず、削除した請求書IDを詳細に残す。

        Raises:
            NotFoundError: 請求書が存在しない場合
            ForbiddenError: 会社ユーザー以外が操作した場合
            InvalidTransitionError: 下書き以外の請求書を削除しようとした場合
        """
        logger.info(f"請求書の削除を開始します: {invoice_id}")

        try:
            invoice = await self.invoice_repository.get(invoice_id)
            if invoice is None:
                raise NotFoundError("請求書", invoice_id)

            resolve_transition(InvoiceAction.DELETE, actor, invoice.status, invoice.freelancer_id)

            audit_entry = AuditEntry(
                user_id=actor.user_id,
                action=AuditAction.INVOICE_DELETE,
                invoice_id=None,
                details=f"請求書を削除しました: {invoice_id}",
            )
            await self.invoice_repository.delete(
                invoice_id, expected_status=invoice.status, audit_entry=audit_entry
            )
            log_audit(audit_entry)

            logger.info(f"請求書を削除しました: {invoice_id}")

        except InvoicingError as e:
            logger.error(f"請求書の削除に失敗しました: {e}")
            raise
        except Exception as e:
            logger.error(f"請求書の削除中にエラーが発生しました: {e}")
            raise
