"""請求書を確定するユースケース"""
import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Optional

from tenacity import AsyncRetrying, before_sleep_log, retry_if_exception_type, stop_after_attempt

from invoicing.domain.entities.audit_entry import AuditAction, AuditEntry
from invoicing.domain.entities.invoice import Invoice
from invoicing.domain.entities.status_history import InvoiceStatusHistory
from invoicing.domain.exceptions import InvoicingError, NotFoundError, NumberConflictError
from invoicing.domain.repositories.company_repository import ICompanyRepository
from invoicing.domain.repositories.freelancer_repository import IFreelancerRepository
from invoicing.domain.repositories.invoice_repository import IInvoiceRepository
from invoicing.domain.services.status_transitions import resolve_transition
from invoicing.domain.value_objects.actor import ActorContext
from invoicing.domain.value_objects.application_config import DEFAULT_CONFIRM_MAX_ATTEMPTS
from invoicing.domain.value_objects.invoice_number import InvoiceNumber
from invoicing.domain.value_objects.invoice_status import InvoiceAction
from invoicing.domain.value_objects.snapshots import CompanySnapshot, FreelancerSnapshot
from invoicing.usecases.audit_logging import log_audit

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ConfirmInvoiceUseCase:
    """請求書番号を採番し、支払先・請求先のスナップショットを固定して承認依頼に回すユースケース"""

    def __init__(
        self,
        invoice_repository: IInvoiceRepository,
        freelancer_repository: IFreelancerRepository,
        company_repository: ICompanyRepository,
        max_attempts: int = DEFAULT_CONFIRM_MAX_ATTEMPTS,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.invoice_repository = invoice_repository
        self.freelancer_repository = freelancer_repository
        self.company_repository = company_repository
        self.max_attempts = max_attempts
        self.clock = clock or _utcnow

    async def execute(self, actor: ActorContext, invoice_id: str) -> Invoice:
        """請求書を確定する

        請求書番号が他の確定処理と重複した場合は、請求書と最大番号を
        読み直して max_attempts 回まで確定をやり直す。

        Args:
            actor: 操作者（会社ユーザー）
            invoice_id: 請求書ID

        Returns:
            Invoice: 確定後の請求書

        Raises:
            NotFoundError: 請求書・フリーランス・会社情報が存在しない場合
            ForbiddenError: 会社ユーザー以外が操作した場合
            InvalidTransitionError: 確定できないステータスの場合
            NumberConflictError: 試行回数内に番号を確保できなかった場合
        """
        logger.info(f"請求書の確定を開始します: {invoice_id}")

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_attempts),
                retry=retry_if_exception_type(NumberConflictError),
                before_sleep=before_sleep_log(logger, logging.WARNING),
                reraise=True,
            ):
                with attempt:
                    confirmed = await self._confirm_once(actor, invoice_id)

            logger.info(f"請求書を確定しました: {invoice_id} (請求書番号: {confirmed.invoice_number})")
            return confirmed

        except InvoicingError as e:
            logger.error(f"請求書の確定に失敗しました: {e}")
            raise
        except Exception as e:
            logger.error(f"請求書の確定中にエラーが発生しました: {e}")
            raise

    async def _confirm_once(self, actor: ActorContext, invoice_id: str) -> Invoice:
        invoice = await self.invoice_repository.get(invoice_id)
        if invoice is None:
            raise NotFoundError("請求書", invoice_id)

        to_status = resolve_transition(
            InvoiceAction.CONFIRM, actor, invoice.status, invoice.freelancer_id
        )

        # ステップ1: スナップショットの元になるマスタを取得
        freelancer = await self.freelancer_repository.get(invoice.freelancer_id)
        if freelancer is None:
            raise NotFoundError("フリーランス", invoice.freelancer_id)

        company = await self.company_repository.get_current()
        if company is None:
            raise NotFoundError("会社情報")

        # ステップ2: 請求書番号を採番
        invoice_number = await self._assign_invoice_number(invoice)
        logger.info(f"請求書番号を採番しました: {invoice_number}")

        # ステップ3: スナップショットを固定してステータスを更新
        confirmed = replace(
            invoice,
            status=to_status,
            invoice_number=invoice_number,
            freelancer_snapshot=FreelancerSnapshot.from_freelancer(freelancer),
            company_snapshot=CompanySnapshot.from_company(company),
            confirmed_at=self.clock(),
        )
        history = InvoiceStatusHistory(
            invoice_id=invoice.id,
            from_status=invoice.status,
            to_status=to_status,
            changed_by=actor.user_id,
            comment="請求書を確定し承認依頼しました",
        )
        audit_entry = AuditEntry(
            user_id=actor.user_id,
            action=AuditAction.INVOICE_CONFIRM,
            invoice_id=invoice.id,
            details=f"請求書を確定しました: {invoice_number}",
        )
        saved = await self.invoice_repository.update(
            confirmed, expected_status=invoice.status, audit_entry=audit_entry, history=history
        )
        log_audit(audit_entry)
        return saved

    async def _assign_invoice_number(self, invoice: Invoice) -> str:
        """請求日の年月で次の請求書番号を求める

        差し戻し後の再確定で、採番済みの番号が請求日の年月と一致する場合はそのまま使う。
        """
        year_month = InvoiceNumber.prefix_for(invoice.billing_date)
        if invoice.invoice_number and InvoiceNumber.parse(invoice.invoice_number).year_month == year_month:
            return invoice.invoice_number

        latest = await self.invoice_repository.find_latest_invoice_number(year_month)
        return str(InvoiceNumber.next_after(invoice.billing_date, latest))
