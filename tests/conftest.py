"""pytest共通設定"""
from dataclasses import replace
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Callable, List, Optional

import pytest
import pytest_asyncio

from invoicing.domain.entities.company import CompanyInfo
from invoicing.domain.entities.freelancer import AccountType, Freelancer
from invoicing.domain.entities.invoice import Invoice
from invoicing.domain.services.invoice_calculator import calculate_invoice
from invoicing.domain.value_objects.actor import ActorContext, Role
from invoicing.domain.value_objects.invoice_status import InvoiceStatus
from invoicing.domain.value_objects.line_item import LineItem
from invoicing.domain.value_objects.tax_type import TaxType
from invoicing.infrastructure.persistence.database import Database
from invoicing.infrastructure.persistence.invoice_repository import SqlAlchemyInvoiceRepository
from invoicing.infrastructure.persistence.master_data_repository import (
    SqlAlchemyCompanyRepository,
    SqlAlchemyFreelancerRepository,
)

FREELANCER_ID = "fl-001"


@pytest.fixture
def company_actor() -> ActorContext:
    """テスト用の会社ユーザー"""
    return ActorContext(role=Role.COMPANY, user_id="company-user")


@pytest.fixture
def freelancer_actor() -> ActorContext:
    """テスト用のフリーランスユーザー（請求書の本人）"""
    return ActorContext(role=Role.FREELANCER, user_id="freelancer-user", freelancer_id=FREELANCER_ID)


@pytest.fixture
def other_freelancer_actor() -> ActorContext:
    """テスト用のフリーランスユーザー（他人）"""
    return ActorContext(role=Role.FREELANCER, user_id="other-user", freelancer_id="fl-999")


@pytest.fixture
def freelancer() -> Freelancer:
    """テスト用のフリーランス"""
    return Freelancer(
        id=FREELANCER_ID,
        user_id="freelancer-user",
        name="山田 太郎",
        name_kana="ヤマダ タロウ",
        email="taro@example.com",
        phone="09012345678",
        postal_code="1500001",
        address="東京都渋谷区神宮前1-1-1",
        registration_number="T1234567890123",
        bank_name="みずほ銀行",
        bank_branch="渋谷支店",
        account_type=AccountType.ORDINARY,
        account_number="1234567",
        account_holder="ヤマダ タロウ",
    )


@pytest.fixture
def company() -> CompanyInfo:
    """テスト用の会社情報"""
    return CompanyInfo(
        id=1,
        company_name="株式会社テスト",
        postal_code="1000001",
        address="東京都千代田区千代田1-1",
        phone="0312345678",
        email="billing@example.co.jp",
    )


@pytest.fixture
def make_line_item() -> Callable[..., LineItem]:
    """明細を作成するファクトリ"""

    def _make(
        unit_price: int = 10000,
        quantity: int = 1,
        tax_type: TaxType = TaxType.EXCLUSIVE,
        tax_rate: str = "10",
        withholding_tax_target: bool = True,
        commission_rate: str = "100",
        product_name: str = "システム開発支援",
    ) -> LineItem:
        return LineItem(
            product_name=product_name,
            unit_price=unit_price,
            quantity=quantity,
            tax_type=tax_type,
            tax_rate=Decimal(tax_rate),
            withholding_tax_target=withholding_tax_target,
            commission_rate=Decimal(commission_rate),
        )

    return _make


@pytest.fixture
def make_invoice(make_line_item) -> Callable[..., Invoice]:
    """請求書を作成するファクトリ"""

    def _make(
        invoice_id: str = "inv-001",
        status: InvoiceStatus = InvoiceStatus.DRAFT,
        billing_date: date = date(2024, 5, 31),
        payment_due_date: date = date(2024, 6, 30),
        items: Optional[List[LineItem]] = None,
        freelancer_id: str = FREELANCER_ID,
        invoice_number: Optional[str] = None,
    ) -> Invoice:
        calculation = calculate_invoice(items or [make_line_item()])
        invoice = Invoice.draft(
            invoice_id=invoice_id,
            freelancer_id=freelancer_id,
            creator_id="company-user",
            billing_date=billing_date,
            payment_due_date=payment_due_date,
            calculation=calculation,
        )
        if status != InvoiceStatus.DRAFT or invoice_number is not None:
            invoice = replace(invoice, status=status, invoice_number=invoice_number)
        return invoice

    return _make


@pytest_asyncio.fixture
async def database(tmp_path: Path):
    """テストごとに新しいSQLiteデータベースを作成する"""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await db.init_schema()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def repositories(database: Database, freelancer: Freelancer, company: CompanyInfo):
    """マスタ登録済みのリポジトリ一式"""
    freelancer_repository = SqlAlchemyFreelancerRepository(database)
    company_repository = SqlAlchemyCompanyRepository(database)
    await freelancer_repository.save(freelancer)
    await company_repository.save(company)
    return (
        SqlAlchemyInvoiceRepository(database),
        freelancer_repository,
        company_repository,
    )
