"""請求書を作成するユースケース"""
import logging
import uuid

from invoicing.domain.entities.audit_entry import AuditAction, AuditEntry
from invoicing.domain.entities.invoice import Invoice
from invoicing.domain.entities.status_history import InvoiceStatusHistory
from invoicing.domain.exceptions import InvoicingError, NotFoundError
from invoicing.domain.repositories.freelancer_repository import IFreelancerRepository
from invoicing.domain.repositories.invoice_repository import IInvoiceRepository
from invoicing.domain.services.invoice_calculator import calculate_invoice
from invoicing.domain.services.status_transitions import resolve_transition
from invoicing.domain.value_objects.actor import ActorContext
from invoicing.domain.value_objects.invoice_requests import CreateInvoiceRequest
from invoicing.domain.value_objects.invoice_status import InvoiceAction, InvoiceStatus
from invoicing.usecases.audit_logging import log_audit

logger = logging.getLogger(__name__)


class CreateInvoiceUseCase:
    """明細から金額を計算し、下書きの請求書を登録するユースケース"""

    def __init__(
        self,
        invoice_repository: IInvoiceRepository,
        freelancer_repository: IFreelancerRepository,
    ):
        self.invoice_repository = invoice_repository
        self.freelancer_repository = freelancer_repository

    async def execute(self, actor: ActorContext, request: CreateInvoiceRequest) -> Invoice:
        """下書きの請求書を作成する

        Args:
            actor: 操作者（会社ユーザー）
            request: 検証済みの作成内容

        Returns:
            Invoice: 登録された請求書

        Raises:
            ForbiddenError: 会社ユーザー以外が操作した場合
            NotFoundError: フリーランスが存在しない場合
            ValidationError: 明細が不正な場合
        """
        logger.info(f"請求書の作成を開始します: フリーランス {request.freelancer_id}")

        try:
            resolve_transition(InvoiceAction.CREATE, actor, None)

            freelancer = await self.freelancer_repository.get(request.freelancer_id)
            if freelancer is None:
                raise NotFoundError("フリーランス", request.freelancer_id)

            calculation = calculate_invoice(request.line_items())
            invoice = Invoice.draft(
                invoice_id=str(uuid.uuid4()),
                freelancer_id=freelancer.id,
                creator_id=actor.user_id,
                billing_date=request.billing_date,
                payment_due_date=request.payment_due_date,
                calculation=calculation,
                notes=request.notes,
            )

            history = InvoiceStatusHistory(
                invoice_id=invoice.id,
                from_status=None,
                to_status=InvoiceStatus.DRAFT,
                changed_by=actor.user_id,
            )
            audit_entry = AuditEntry(
                user_id=actor.user_id,
                action=AuditAction.INVOICE_CREATE,
                invoice_id=invoice.id,
                details="下書きの請求書を作成しました",
            )
            created = await self.invoice_repository.add(invoice, audit_entry, history=history)
            log_audit(audit_entry)

            logger.info(
                f"請求書を作成しました: {created.id} (請求金額: ¥{created.invoice_amount:,})"
            )
            return created

        except InvoicingError as e:
            logger.error(f"請求書の作成に失敗しました: {e}")
            raise
        except Exception as e:
            logger.error(f"請求書の作成中にエラーが発生しました: {e}")
            raise
