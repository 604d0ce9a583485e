"""請求書を複製するユースケース"""
import calendar
import logging
import uuid
from datetime import date

from invoicing.domain.entities.audit_entry import AuditAction, AuditEntry
from invoicing.domain.entities.invoice import Invoice
from invoicing.domain.entities.status_history import InvoiceStatusHistory
from invoicing.domain.exceptions import InvoicingError, NotFoundError
from invoicing.domain.repositories.invoice_repository import IInvoiceRepository
from invoicing.domain.services.invoice_calculator import calculate_invoice
from invoicing.domain.services.status_transitions import resolve_transition
from invoicing.domain.value_objects.actor import ActorContext
from invoicing.domain.value_objects.invoice_status import InvoiceAction, InvoiceStatus
from invoicing.usecases.audit_logging import log_audit

logger = logging.getLogger(__name__)


def end_of_next_month(value: date) -> date:
    """翌月の末日を返す"""
    year, month = (value.year + 1, 1) if value.month == 12 else (value.year, value.month + 1)
    return date(year, month, calendar.monthrange(year, month)[1])


class DuplicateInvoiceUseCase:
    """既存の請求書から翌月分の下書きを作成するユースケース

    請求日・支払期限は翌月末日にずらし、請求書番号・スナップショットは引き継がない。
    """

    def __init__(self, invoice_repository: IInvoiceRepository):
        self.invoice_repository = invoice_repository

    async def execute(self, actor: ActorContext, invoice_id: str) -> Invoice:
        """請求書を複製する

        Args:
            actor: 操作者（会社ユーザー）
            invoice_id: 複製元の請求書ID

        Returns:
            Invoice: 複製された下書きの請求書

        Raises:
            NotFoundError: 複製元の請求書が存在しない場合
            ForbiddenError: 会社ユーザー以外が操作した場合
        """
        logger.info(f"請求書の複製を開始します: {invoice_id}")

        try:
            source = await self.invoice_repository.get(invoice_id)
            if source is None:
                raise NotFoundError("請求書", invoice_id)

            resolve_transition(InvoiceAction.DUPLICATE, actor, source.status, source.freelancer_id)

            # 明細は現在の計算規則で再計算する
            calculation = calculate_invoice(source.line_items)
            duplicated = Invoice.draft(
                invoice_id=str(uuid.uuid4()),
                freelancer_id=source.freelancer_id,
                creator_id=actor.user_id,
                billing_date=end_of_next_month(source.billing_date),
                payment_due_date=end_of_next_month(source.payment_due_date),
                calculation=calculation,
                notes=source.notes,
            )

            history = InvoiceStatusHistory(
                invoice_id=duplicated.id,
                from_status=None,
                to_status=InvoiceStatus.DRAFT,
                changed_by=actor.user_id,
                comment=f"複製元: {source.id}",
            )
            audit_entry = AuditEntry(
                user_id=actor.user_id,
                action=AuditAction.INVOICE_DUPLICATE,
                invoice_id=duplicated.id,
                details=f"複製元: {source.id}",
            )
            created = await self.invoice_repository.add(duplicated, audit_entry, history=history)
            log_audit(audit_entry)

            logger.info(f"請求書を複製しました: {source.id} -> {created.id}")
            return created

        except InvoicingError as e:
            logger.error(f"請求書の複製に失敗しました: {e}")
            raise
        except Exception as e:
            logger.error(f"請求書の複製中にエラーが発生しました: {e}")
            raise
