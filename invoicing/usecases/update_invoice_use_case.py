"""請求書を編集するユースケース"""
import logging
from dataclasses import replace

from invoicing.domain.entities.audit_entry import AuditAction, AuditEntry
from invoicing.domain.entities.invoice import Invoice
from invoicing.domain.exceptions import InvoicingError, NotFoundError
from invoicing.domain.repositories.invoice_repository import IInvoiceRepository
from invoicing.domain.services.invoice_calculator import calculate_invoice
from invoicing.domain.services.status_transitions import resolve_transition
from invoicing.domain.value_objects.actor import ActorContext
from invoicing.domain.value_objects.invoice_requests import UpdateInvoiceRequest
from invoicing.domain.value_objects.invoice_status import InvoiceAction
from invoicing.usecases.audit_logging import log_audit

logger = logging.getLogger(__name__)


class UpdateInvoiceUseCase:
    """下書き・差し戻し中の請求書の明細・日付・備考を編集するユースケース"""

    def __init__(self, invoice_repository: IInvoiceRepository):
        self.invoice_repository = invoice_repository

    async def execute(
        self, actor: ActorContext, invoice_id: str, request: UpdateInvoiceRequest
    ) -> Invoice:
        """請求書を編集する

        明細が指定された場合は金額を再計算し、明細と金額をまとめて置き換える。

        Args:
            actor: 操作者（会社ユーザー）
            invoice_id: 請求書ID
            request: 検証済みの編集内容

        Returns:
            Invoice: 更新後の請求書

        Raises:
            NotFoundError: 請求書が存在しない場合
            ForbiddenError: 会社ユーザー以外が操作した場合
            InvalidTransitionError: 編集できないステータスの場合
            ValidationError: 編集内容が不正な場合
        """
        logger.info(f"請求書の編集を開始します: {invoice_id}")

        try:
            current = await self.invoice_repository.get(invoice_id)
            if current is None:
                raise NotFoundError("請求書", invoice_id)

            resolve_transition(InvoiceAction.EDIT, actor, current.status, current.freelancer_id)

            notes = request.notes if "notes" in request.model_fields_set else current.notes
            updated = replace(
                current,
                billing_date=request.billing_date or current.billing_date,
                payment_due_date=request.payment_due_date or current.payment_due_date,
                notes=notes,
            )

            line_items = request.line_items()
            if line_items is not None:
                logger.info(f"明細 {len(line_items)} 行で金額を再計算します")
                updated = updated.with_calculation(calculate_invoice(line_items))

            audit_entry = AuditEntry(
                user_id=actor.user_id,
                action=AuditAction.INVOICE_UPDATE,
                invoice_id=invoice_id,
                details="請求書を編集しました",
            )
            saved = await self.invoice_repository.update(
                updated, expected_status=current.status, audit_entry=audit_entry
            )
            log_audit(audit_entry)

            logger.info(f"請求書を更新しました: {invoice_id} (請求金額: ¥{saved.invoice_amount:,})")
            return saved

        except InvoicingError as e:
            logger.error(f"請求書の編集に失敗しました: {e}")
            raise
        except Exception as e:
            logger.error(f"請求書の編集中にエラーが発生しました: {e}")
            raise
