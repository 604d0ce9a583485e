"""請求書のステータスを変更するユースケース"""
import logging
from dataclasses import replace
from datetime import date, datetime, timezone
from typing import Callable, Optional

from invoicing.domain.entities.audit_entry import AuditEntry
from invoicing.domain.entities.invoice import Invoice
from invoicing.domain.entities.status_history import InvoiceStatusHistory
from invoicing.domain.exceptions import InvoicingError, NotFoundError
from invoicing.domain.repositories.invoice_repository import IInvoiceRepository
from invoicing.domain.services.status_transitions import resolve_transition
from invoicing.domain.value_objects.actor import ActorContext
from invoicing.domain.value_objects.invoice_requests import StatusChangeRequest
from invoicing.domain.value_objects.invoice_status import InvoiceAction, InvoiceStatus
from invoicing.usecases.audit_logging import log_audit

logger = logging.getLogger(__name__)

ACTIONS_BY_STATUS = {
    InvoiceStatus.APPROVED: InvoiceAction.APPROVE,
    InvoiceStatus.REJECTED: InvoiceAction.REJECT,
    InvoiceStatus.PAID: InvoiceAction.MARK_PAID,
}


def _today() -> date:
    return datetime.now(timezone.utc).date()


class ChangeInvoiceStatusUseCase:
    """承認・差し戻し・支払済みへのステータス変更を行うユースケース

    - フリーランス（本人）: 承認待ち -> 承認 / 差し戻し
    - 会社: 承認待ち -> 差し戻し、承認済み -> 支払済み
    """

    def __init__(
        self,
        invoice_repository: IInvoiceRepository,
        today: Optional[Callable[[], date]] = None,
    ):
        self.invoice_repository = invoice_repository
        self.today = today or _today

    async def execute(
        self, actor: ActorContext, invoice_id: str, request: StatusChangeRequest
    ) -> Invoice:
        """請求書のステータスを変更する

        Args:
            actor: 操作者
            invoice_id: 請求書ID
            request: 検証済みの変更内容

        Returns:
            Invoice: 変更後の請求書

        Raises:
            NotFoundError: 請求書が存在しない場合
            ForbiddenError: 操作者のロール・所有者が一致しない場合
            InvalidTransitionError: 現在のステータスから遷移できない場合
        """
        action = ACTIONS_BY_STATUS[request.status]
        logger.info(f"請求書のステータス変更を開始します: {invoice_id} ({action.value})")

        try:
            invoice = await self.invoice_repository.get(invoice_id)
            if invoice is None:
                raise NotFoundError("請求書", invoice_id)

            to_status = resolve_transition(action, actor, invoice.status, invoice.freelancer_id)

            payment_date = invoice.payment_date
            if to_status == InvoiceStatus.PAID:
                payment_date = request.payment_date or self.today()

            updated = replace(invoice, status=to_status, payment_date=payment_date)
            history = InvoiceStatusHistory(
                invoice_id=invoice.id,
                from_status=invoice.status,
                to_status=to_status,
                changed_by=actor.user_id,
                comment=request.comment,
            )
            audit_entry = AuditEntry(
                user_id=actor.user_id,
                action=f"INVOICE_{to_status.value}",
                invoice_id=invoice.id,
                details=request.comment,
            )
            saved = await self.invoice_repository.update(
                updated, expected_status=invoice.status, audit_entry=audit_entry, history=history
            )
            log_audit(audit_entry)

            logger.info(
                f"請求書のステータスを変更しました: {invoice_id} "
                f"({invoice.status.value} -> {to_status.value})"
            )
            return saved

        except InvoicingError as e:
            logger.error(f"請求書のステータス変更に失敗しました: {e}")
            raise
        except Exception as e:
            logger.error(f"請求書のステータス変更中にエラーが発生しました: {e}")
            raise

    async def approve(
        self, actor: ActorContext, invoice_id: str, comment: Optional[str] = None
    ) -> Invoice:
        """フリーランス本人が請求書を承認する"""
        request = StatusChangeRequest.parse({"status": InvoiceStatus.APPROVED, "comment": comment})
        return await self.execute(actor, invoice_id, request)

    async def reject(
        self, actor: ActorContext, invoice_id: str, comment: Optional[str] = None
    ) -> Invoice:
        """請求書を差し戻す（フリーランス本人または会社）"""
        request = StatusChangeRequest.parse({"status": InvoiceStatus.REJECTED, "comment": comment})
        return await self.execute(actor, invoice_id, request)

    async def mark_paid(
        self,
        actor: ActorContext,
        invoice_id: str,
        payment_date: Optional[date] = None,
        comment: Optional[str] = None,
    ) -> Invoice:
        """会社が承認済みの請求書を支払済みにする"""
        request = StatusChangeRequest.parse(
            {"status": InvoiceStatus.PAID, "payment_date": payment_date, "comment": comment}
        )
        return await self.execute(actor, invoice_id, request)
