"""請求書を検索するユースケース"""
import logging
from typing import List

from invoicing.domain.entities.invoice import Invoice
from invoicing.domain.repositories.invoice_repository import IInvoiceRepository
from invoicing.domain.value_objects.actor import ActorContext
from invoicing.domain.value_objects.invoice_requests import InvoiceSearchCriteria

logger = logging.getLogger(__name__)


def scope_criteria(actor: ActorContext, criteria: InvoiceSearchCriteria) -> InvoiceSearchCriteria:
    """フリーランスの検索条件を本人の請求書に限定する"""
    if actor.is_company:
        return criteria
    return criteria.model_copy(update={"freelancer_id": actor.freelancer_id})


class SearchInvoicesUseCase:
    """請求書を検索するユースケース

    会社は全件、フリーランスは本人の請求書のみを対象にする。
    """

    def __init__(self, invoice_repository: IInvoiceRepository):
        self.invoice_repository = invoice_repository

    async def execute(self, actor: ActorContext, criteria: InvoiceSearchCriteria) -> List[Invoice]:
        """条件に一致する請求書を作成日の新しい順に返す"""
        if actor.is_freelancer and actor.freelancer_id is None:
            logger.warning(f"フリーランス情報が紐付いていないユーザーです: {actor.user_id}")
            return []

        invoices = await self.invoice_repository.search(scope_criteria(actor, criteria))
        logger.info(f"請求書を検索しました: {len(invoices)}件")
        return invoices
