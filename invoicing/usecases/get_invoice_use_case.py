"""請求書の詳細を取得するユースケース"""
import logging
from dataclasses import dataclass, field
from typing import List

from invoicing.domain.entities.invoice import Invoice
from invoicing.domain.entities.status_history import InvoiceStatusHistory
from invoicing.domain.exceptions import InvoicingError, NotFoundError
from invoicing.domain.repositories.invoice_repository import IInvoiceRepository
from invoicing.domain.services.status_transitions import resolve_transition
from invoicing.domain.value_objects.actor import ActorContext
from invoicing.domain.value_objects.invoice_status import InvoiceAction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InvoiceDetail:
    """請求書とステータス履歴（新しい順）"""

    invoice: Invoice
    history: List[InvoiceStatusHistory] = field(default_factory=list)


class GetInvoiceUseCase:
    """請求書の詳細を取得するユースケース"""

    def __init__(self, invoice_repository: IInvoiceRepository):
        self.invoice_repository = invoice_repository

    async def execute(self, actor: ActorContext, invoice_id: str) -> InvoiceDetail:
        """請求書を履歴付きで取得する

        Raises:
            NotFoundError: 請求書が存在しない場合
            ForbiddenError: フリーランスが本人以外の請求書を参照した場合
        """
        try:
            invoice = await self.invoice_repository.get(invoice_id)
            if invoice is None:
                raise NotFoundError("請求書", invoice_id)

            resolve_transition(InvoiceAction.VIEW, actor, invoice.status, invoice.freelancer_id)

            history = await self.invoice_repository.list_history(invoice_id)
            return InvoiceDetail(invoice=invoice, history=history)

        except InvoicingError as e:
            logger.error(f"請求書の取得に失敗しました: {e}")
            raise
