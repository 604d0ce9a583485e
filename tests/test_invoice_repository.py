"""SQLAlchemyリポジトリと請求書ワークフローの結合テスト"""
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import select

from invoicing.domain.entities.audit_entry import AuditAction, AuditEntry
from invoicing.domain.exceptions import InvalidTransitionError, NotFoundError
from invoicing.domain.value_objects.invoice_requests import (
    CreateInvoiceRequest,
    InvoiceSearchCriteria,
    UpdateInvoiceRequest,
)
from invoicing.domain.value_objects.invoice_status import InvoiceStatus
from invoicing.domain.value_objects.tax_type import TaxType
from invoicing.infrastructure.persistence.master_data_repository import SqlAlchemyCompanyRepository
from invoicing.infrastructure.persistence.models import (
    AuditLogRecord,
    InvoiceItemRecord,
    InvoiceStatusHistoryRecord,
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


def _create_request(billing_date="2024-05-31", payment_due_date="2024-06-30", unit_price=10000):
    return CreateInvoiceRequest.parse(
        {
            "freelancer_id": "fl-001",
            "billing_date": billing_date,
            "payment_due_date": payment_due_date,
            "notes": "5月分",
            "items": [
                {
                    "product_name": "システム開発支援",
                    "unit_price": unit_price,
                    "quantity": 1,
                    "tax_type": "EXCLUSIVE",
                    "tax_rate": "10",
                    "withholding_tax_target": True,
                },
                {
                    "product_name": "書籍代",
                    "unit_price": 1080,
                    "quantity": 2,
                    "commission_rate": "100",
                    "tax_type": "INCLUSIVE",
                    "tax_rate": "8",
                    "withholding_tax_target": False,
                },
            ],
        }
    )


async def _audit_logs(database):
    async with database.session() as session:
        result = await session.execute(select(AuditLogRecord).order_by(AuditLogRecord.id))
        return result.scalars().all()


@pytest.mark.asyncio
async def test_created_invoice_round_trips_through_database(company_actor, repositories):
    """登録した請求書を明細・金額ごと読み出せる"""
    invoice_repository, freelancer_repository, _ = repositories

    created = await CreateInvoiceUseCase(invoice_repository, freelancer_repository).execute(
        company_actor, _create_request()
    )
    stored = await invoice_repository.get(created.id)

    assert stored.status == InvoiceStatus.DRAFT
    assert stored.notes == "5月分"
    assert [item.line_item.product_name for item in stored.items] == ["システム開発支援", "書籍代"]
    assert stored.items[1].line_item.tax_type == TaxType.INCLUSIVE
    assert stored.items[1].line_item.tax_rate == Decimal("8")
    assert stored.items[1].amount == 2000
    assert stored.subtotal == 12000
    assert stored.total_with_tax == 13160
    assert stored.withholding_tax == 1021
    assert stored.invoice_amount == 12139


@pytest.mark.asyncio
async def test_get_missing_invoice_returns_none(repositories):
    """存在しない請求書は None"""
    invoice_repository, _, _ = repositories

    assert await invoice_repository.get("missing") is None


@pytest.mark.asyncio
async def test_create_records_initial_history(company_actor, repositories):
    """作成時に下書きへの履歴が1件記録される"""
    invoice_repository, freelancer_repository, _ = repositories

    created = await CreateInvoiceUseCase(invoice_repository, freelancer_repository).execute(
        company_actor, _create_request()
    )
    history = await invoice_repository.list_history(created.id)

    assert len(history) == 1
    assert history[0].invoice_id == created.id
    assert history[0].from_status is None
    assert history[0].to_status == InvoiceStatus.DRAFT
    assert history[0].changed_by == company_actor.user_id


@pytest.mark.asyncio
async def test_update_replaces_items(company_actor, repositories):
    """編集で明細を置き換えると古い明細は残らない"""
    invoice_repository, freelancer_repository, _ = repositories
    created = await CreateInvoiceUseCase(invoice_repository, freelancer_repository).execute(
        company_actor, _create_request()
    )

    request = UpdateInvoiceRequest.parse(
        {
            "items": [
                {
                    "product_name": "保守",
                    "unit_price": 50000,
                    "quantity": 1,
                    "tax_type": "EXCLUSIVE",
                    "tax_rate": "10",
                    "withholding_tax_target": True,
                }
            ]
        }
    )
    updated = await UpdateInvoiceUseCase(invoice_repository).execute(company_actor, created.id, request)

    assert len(updated.items) == 1
    assert updated.subtotal == 50000
    assert updated.invoice_amount == 55000 - 5105


@pytest.mark.asyncio
async def test_full_lifecycle_records_history_newest_first(
    company_actor, freelancer_actor, repositories
):
    """下書きから支払済みまでの遷移が履歴に新しい順で残る"""
    invoice_repository, freelancer_repository, company_repository = repositories
    created = await CreateInvoiceUseCase(invoice_repository, freelancer_repository).execute(
        company_actor, _create_request()
    )

    await ConfirmInvoiceUseCase(invoice_repository, freelancer_repository, company_repository).execute(
        company_actor, created.id
    )
    status_use_case = ChangeInvoiceStatusUseCase(invoice_repository, today=lambda: date(2024, 6, 28))
    await status_use_case.approve(freelancer_actor, created.id)
    paid = await status_use_case.mark_paid(company_actor, created.id)

    assert paid.status == InvoiceStatus.PAID
    assert paid.payment_date == date(2024, 6, 28)

    detail = await GetInvoiceUseCase(invoice_repository).execute(freelancer_actor, created.id)
    assert [h.to_status for h in detail.history] == [
        InvoiceStatus.PAID,
        InvoiceStatus.APPROVED,
        InvoiceStatus.PENDING_APPROVAL,
        InvoiceStatus.DRAFT,
    ]
    assert detail.history[-2].from_status == InvoiceStatus.DRAFT
    assert detail.history[-2].comment == "請求書を確定し承認依頼しました"
    assert detail.history[-1].from_status is None

    actions = [log.action for log in await _audit_logs(invoice_repository.database)]
    assert actions == [
        AuditAction.INVOICE_CREATE,
        AuditAction.INVOICE_CONFIRM,
        AuditAction.INVOICE_APPROVED,
        AuditAction.INVOICE_PAID,
    ]


@pytest.mark.asyncio
async def test_failed_transition_leaves_no_trace(company_actor, repositories):
    """失敗した遷移では履歴も監査ログも増えない"""
    invoice_repository, freelancer_repository, _ = repositories
    created = await CreateInvoiceUseCase(invoice_repository, freelancer_repository).execute(
        company_actor, _create_request()
    )

    with pytest.raises(InvalidTransitionError):
        await ChangeInvoiceStatusUseCase(invoice_repository).mark_paid(company_actor, created.id)

    assert [h.to_status for h in await invoice_repository.list_history(created.id)] == [
        InvoiceStatus.DRAFT
    ]
    assert len(await _audit_logs(invoice_repository.database)) == 1
    assert (await invoice_repository.get(created.id)).status == InvoiceStatus.DRAFT


@pytest.mark.asyncio
async def test_delete_removes_items_and_keeps_audit(company_actor, repositories, database):
    """削除すると明細も消え、請求書IDを持たない監査ログが残る"""
    invoice_repository, freelancer_repository, _ = repositories
    created = await CreateInvoiceUseCase(invoice_repository, freelancer_repository).execute(
        company_actor, _create_request()
    )

    await DeleteInvoiceUseCase(invoice_repository).execute(company_actor, created.id)

    assert await invoice_repository.get(created.id) is None
    async with database.session() as session:
        items = (
            await session.execute(
                select(InvoiceItemRecord).where(InvoiceItemRecord.invoice_id == created.id)
            )
        ).scalars().all()
        history = (await session.execute(select(InvoiceStatusHistoryRecord))).scalars().all()
    assert items == []
    assert history == []

    delete_log = (await _audit_logs(database))[-1]
    assert delete_log.action == AuditAction.INVOICE_DELETE
    assert delete_log.invoice_id is None
    assert created.id in delete_log.details


@pytest.mark.asyncio
async def test_repository_delete_of_missing_invoice(repositories):
    """存在しない請求書の削除は NotFoundError"""
    invoice_repository, _, _ = repositories

    with pytest.raises(NotFoundError):
        await invoice_repository.delete(
            "missing",
            expected_status=InvoiceStatus.DRAFT,
            audit_entry=AuditEntry(user_id="company-user", action=AuditAction.INVOICE_DELETE),
        )


@pytest.mark.asyncio
async def test_duplicate_creates_next_month_draft(company_actor, repositories):
    """確定済みの請求書を複製すると翌月末日付の下書きができる"""
    invoice_repository, freelancer_repository, company_repository = repositories
    created = await CreateInvoiceUseCase(invoice_repository, freelancer_repository).execute(
        company_actor, _create_request()
    )
    await ConfirmInvoiceUseCase(invoice_repository, freelancer_repository, company_repository).execute(
        company_actor, created.id
    )

    duplicated = await DuplicateInvoiceUseCase(invoice_repository).execute(company_actor, created.id)
    stored = await invoice_repository.get(duplicated.id)

    assert stored.status == InvoiceStatus.DRAFT
    assert stored.invoice_number is None
    assert stored.freelancer_snapshot is None
    assert stored.company_snapshot is None
    assert stored.billing_date == date(2024, 6, 30)
    assert stored.payment_due_date == date(2024, 7, 31)
    assert stored.invoice_amount == created.invoice_amount

    history = await invoice_repository.list_history(duplicated.id)
    assert [(h.from_status, h.to_status) for h in history] == [(None, InvoiceStatus.DRAFT)]
    assert history[0].comment == f"複製元: {created.id}"


@pytest.mark.asyncio
async def test_search_filters_and_scoping(
    company_actor, freelancer_actor, other_freelancer_actor, repositories
):
    """検索条件と操作者による絞り込み"""
    invoice_repository, freelancer_repository, company_repository = repositories
    create = CreateInvoiceUseCase(invoice_repository, freelancer_repository)
    may = await create.execute(company_actor, _create_request())
    june = await create.execute(
        company_actor, _create_request(billing_date="2024-06-30", payment_due_date="2024-07-31")
    )
    await ConfirmInvoiceUseCase(invoice_repository, freelancer_repository, company_repository).execute(
        company_actor, june.id
    )

    search = SearchInvoicesUseCase(invoice_repository)

    all_invoices = await search.execute(company_actor, InvoiceSearchCriteria())
    assert {invoice.id for invoice in all_invoices} == {may.id, june.id}

    pending = await search.execute(
        company_actor, InvoiceSearchCriteria(status=InvoiceStatus.PENDING_APPROVAL)
    )
    assert [invoice.id for invoice in pending] == [june.id]

    in_may = await search.execute(
        company_actor,
        InvoiceSearchCriteria(billing_date_from=date(2024, 5, 1), billing_date_to=date(2024, 5, 31)),
    )
    assert [invoice.id for invoice in in_may] == [may.id]

    own = await search.execute(freelancer_actor, InvoiceSearchCriteria())
    assert len(own) == 2

    others = await search.execute(other_freelancer_actor, InvoiceSearchCriteria())
    assert others == []


@pytest.mark.asyncio
async def test_monthly_summary_on_database(company_actor, freelancer_actor, repositories):
    """月次サマリーは承認済み・支払済みの請求金額のみ合計し、支払待ちは全期間で数える"""
    invoice_repository, freelancer_repository, company_repository = repositories
    create = CreateInvoiceUseCase(invoice_repository, freelancer_repository)
    confirm = ConfirmInvoiceUseCase(invoice_repository, freelancer_repository, company_repository)
    status_use_case = ChangeInvoiceStatusUseCase(invoice_repository)

    approved = await create.execute(company_actor, _create_request())
    await confirm.execute(company_actor, approved.id)
    await status_use_case.approve(freelancer_actor, approved.id)

    await create.execute(company_actor, _create_request(unit_price=20000))

    april = await create.execute(
        company_actor, _create_request(billing_date="2024-04-30", payment_due_date="2024-05-31")
    )
    await confirm.execute(company_actor, april.id)
    await status_use_case.approve(freelancer_actor, april.id)

    summary = await MonthlySummaryUseCase(invoice_repository).execute(company_actor, date(2024, 5, 1))

    assert summary.year_month == "202405"
    assert summary.invoice_count == 2
    assert summary.approved_paid_amount == approved.invoice_amount
    assert summary.pending_payment_count == 2


@pytest.mark.asyncio
async def test_find_latest_invoice_number_is_scoped_to_month(company_actor, repositories):
    """最大番号は年月ごとに求める"""
    invoice_repository, freelancer_repository, company_repository = repositories
    create = CreateInvoiceUseCase(invoice_repository, freelancer_repository)
    confirm = ConfirmInvoiceUseCase(invoice_repository, freelancer_repository, company_repository)

    for _ in range(2):
        created = await create.execute(company_actor, _create_request())
        await confirm.execute(company_actor, created.id)

    assert await invoice_repository.find_latest_invoice_number("202405") == "202405-0002"
    assert await invoice_repository.find_latest_invoice_number("202406") is None


@pytest.mark.asyncio
async def test_company_info_save_and_get(database, company):
    """会社情報の登録と取得"""
    repository = SqlAlchemyCompanyRepository(database)
    assert await repository.get_current() is None

    saved = await repository.save(company.model_copy(update={"id": None}))
    assert saved.id is not None

    updated = await repository.save(saved.model_copy(update={"address": "大阪府大阪市北区1-1"}))
    current = await repository.get_current()
    assert current.id == updated.id
    assert current.address == "大阪府大阪市北区1-1"
