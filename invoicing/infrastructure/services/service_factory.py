"""サービスの初期化を行うファクトリ"""
import logging
from typing import Optional

from invoicing.domain.value_objects.application_config import ApplicationConfig
from invoicing.infrastructure.persistence.database import Database
from invoicing.infrastructure.persistence.invoice_repository import SqlAlchemyInvoiceRepository
from invoicing.infrastructure.persistence.master_data_repository import (
    SqlAlchemyCompanyRepository,
    SqlAlchemyFreelancerRepository,
)
from invoicing.usecases.change_invoice_status_use_case import ChangeInvoiceStatusUseCase
from invoicing.usecases.confirm_invoice_use_case import ConfirmInvoiceUseCase
from invoicing.usecases.create_invoice_use_case import CreateInvoiceUseCase
from invoicing.usecases.delete_invoice_use_case import DeleteInvoiceUseCase
from invoicing.usecases.duplicate_invoice_use_case import DuplicateInvoiceUseCase
from invoicing.usecases.get_invoice_use_case import GetInvoiceUseCase
from invoicing.usecases.monthly_summary_use_case import MonthlySummaryUseCase
from invoicing.usecases.search_invoices_use_case import SearchInvoicesUseCase
from invoicing.usecases.update_invoice_use_case import UpdateInvoiceUseCase


class ServiceFactory:
    """データベース・リポジトリ・ユースケースの初期化を行うファクトリ"""

    def __init__(self, config: ApplicationConfig, logger: Optional[logging.Logger] = None) -> None:
        """初期化

        Args:
            config: アプリケーション設定
            logger: ロガー
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self._database: Optional[Database] = None

    @property
    def database(self) -> Database:
        """データベース（初回アクセス時に作成）"""
        if self._database is None:
            self.logger.info("データベース接続を初期化します...")
            self._database = Database(self.config.database_url)
        return self._database

    @property
    def invoice_repository(self) -> SqlAlchemyInvoiceRepository:
        return SqlAlchemyInvoiceRepository(self.database)

    @property
    def freelancer_repository(self) -> SqlAlchemyFreelancerRepository:
        return SqlAlchemyFreelancerRepository(self.database)

    @property
    def company_repository(self) -> SqlAlchemyCompanyRepository:
        return SqlAlchemyCompanyRepository(self.database)

    def create_invoice_use_case(self) -> CreateInvoiceUseCase:
        return CreateInvoiceUseCase(
            invoice_repository=self.invoice_repository,
            freelancer_repository=self.freelancer_repository,
        )

    def update_invoice_use_case(self) -> UpdateInvoiceUseCase:
        return UpdateInvoiceUseCase(invoice_repository=self.invoice_repository)

    def confirm_invoice_use_case(self) -> ConfirmInvoiceUseCase:
        return ConfirmInvoiceUseCase(
            invoice_repository=self.invoice_repository,
            freelancer_repository=self.freelancer_repository,
            company_repository=self.company_repository,
            max_attempts=self.config.confirm_max_attempts,
        )

    def change_invoice_status_use_case(self) -> ChangeInvoiceStatusUseCase:
        return ChangeInvoiceStatusUseCase(invoice_repository=self.invoice_repository)

    def delete_invoice_use_case(self) -> DeleteInvoiceUseCase:
        return DeleteInvoiceUseCase(invoice_repository=self.invoice_repository)

    def duplicate_invoice_use_case(self) -> DuplicateInvoiceUseCase:
        return DuplicateInvoiceUseCase(invoice_repository=self.invoice_repository)

    def get_invoice_use_case(self) -> GetInvoiceUseCase:
        return GetInvoiceUseCase(invoice_repository=self.invoice_repository)

    def search_invoices_use_case(self) -> SearchInvoicesUseCase:
        return SearchInvoicesUseCase(invoice_repository=self.invoice_repository)

    def monthly_summary_use_case(self) -> MonthlySummaryUseCase:
        return MonthlySummaryUseCase(invoice_repository=self.invoice_repository)

    async def close(self) -> None:
        """データベース接続を破棄する"""
        if self._database is not None:
            await self._database.dispose()
            self._database = None
