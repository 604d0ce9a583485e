"""月次の請求サマリーを集計するユースケース"""
import calendar
import logging
from dataclasses import dataclass
from datetime import date

from invoicing.domain.exceptions import ForbiddenError
from invoicing.domain.repositories.invoice_repository import IInvoiceRepository
from invoicing.domain.value_objects.actor import ActorContext
from invoicing.domain.value_objects.invoice_number import InvoiceNumber
from invoicing.domain.value_objects.invoice_requests import InvoiceSearchCriteria
from invoicing.domain.value_objects.invoice_status import InvoiceStatus

logger = logging.getLogger(__name__)

SETTLED_STATUSES = frozenset({InvoiceStatus.APPROVED, InvoiceStatus.PAID})


@dataclass(frozen=True)
class MonthlySummary:
    """請求月ごとの件数と承認済み・支払済みの請求金額合計

    pending_payment_count は請求月によらず、承認済みで未払いの件数。
    """

    year_month: str
    invoice_count: int
    approved_paid_amount: int
    pending_payment_count: int


class MonthlySummaryUseCase:
    """請求日の年月で請求書を集計するユースケース"""

    def __init__(self, invoice_repository: IInvoiceRepository):
        self.invoice_repository = invoice_repository

    async def execute(self, actor: ActorContext, target: date) -> MonthlySummary:
        """target を含む月の請求書を集計する

        Raises:
            ForbiddenError: 会社ユーザー以外が操作した場合
        """
        if not actor.is_company:
            raise ForbiddenError("月次サマリーは会社ユーザーのみ参照できます")

        last_day = calendar.monthrange(target.year, target.month)[1]
        criteria = InvoiceSearchCriteria(
            billing_date_from=target.replace(day=1),
            billing_date_to=target.replace(day=last_day),
        )
        invoices = await self.invoice_repository.search(criteria)
        pending_payments = await self.invoice_repository.search(
            InvoiceSearchCriteria(status=InvoiceStatus.APPROVED)
        )

        summary = MonthlySummary(
            year_month=InvoiceNumber.prefix_for(target),
            invoice_count=len(invoices),
            approved_paid_amount=sum(
                invoice.invoice_amount for invoice in invoices if invoice.status in SETTLED_STATUSES
            ),
            pending_payment_count=len(pending_payments),
        )
        logger.info(
            f"月次サマリーを集計しました: {summary.year_month} "
            f"({summary.invoice_count}件, ¥{summary.approved_paid_amount:,}, 支払待ち {summary.pending_payment_count}件)"
        )
        return summary
