"""SQLAlchemy による請求書リポジトリの実装"""
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from invoicing.domain.entities.audit_entry import AuditEntry
from invoicing.domain.entities.invoice import Invoice
from invoicing.domain.entities.status_history import InvoiceStatusHistory
from invoicing.domain.exceptions import InvalidTransitionError, NotFoundError, NumberConflictError
from invoicing.domain.repositories.invoice_repository import IInvoiceRepository
from invoicing.domain.value_objects.calculation import CalculatedItem
from invoicing.domain.value_objects.invoice_requests import InvoiceSearchCriteria
from invoicing.domain.value_objects.invoice_status import InvoiceStatus
from invoicing.domain.value_objects.line_item import LineItem
from invoicing.domain.value_objects.snapshots import CompanySnapshot, FreelancerSnapshot
from invoicing.domain.value_objects.tax_type import TaxType
from invoicing.infrastructure.persistence.database import Database
from invoicing.infrastructure.persistence.models import (
    AuditLogRecord,
    InvoiceItemRecord,
    InvoiceRecord,
    InvoiceStatusHistoryRecord,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _header_values(invoice: Invoice) -> Dict[str, Any]:
    return {
        "invoice_number": invoice.invoice_number,
        "freelancer_id": invoice.freelancer_id,
        "creator_id": invoice.creator_id,
        "billing_date": invoice.billing_date,
        "payment_due_date": invoice.payment_due_date,
        "status": invoice.status.value,
        "subtotal": invoice.subtotal,
        "withholding_tax_subtotal": invoice.withholding_tax_subtotal,
        "total_with_tax": invoice.total_with_tax,
        "withholding_tax": invoice.withholding_tax,
        "invoice_amount": invoice.invoice_amount,
        "notes": invoice.notes,
        "freelancer_snapshot": (
            invoice.freelancer_snapshot.model_dump_json() if invoice.freelancer_snapshot else None
        ),
        "company_snapshot": (
            invoice.company_snapshot.model_dump_json() if invoice.company_snapshot else None
        ),
        "confirmed_at": invoice.confirmed_at,
        "payment_date": invoice.payment_date,
    }


def _item_records(invoice: Invoice) -> List[InvoiceItemRecord]:
    return [
        InvoiceItemRecord(
            invoice_id=invoice.id,
            line_number=line_number,
            product_id=item.line_item.product_id,
            product_name=item.line_item.product_name,
            unit_price=item.line_item.unit_price,
            quantity=item.line_item.quantity,
            commission_rate=str(item.line_item.commission_rate),
            tax_type=item.line_item.tax_type.value,
            tax_rate=str(item.line_item.tax_rate),
            withholding_tax_target=item.line_item.withholding_tax_target,
            amount=item.amount,
            tax_amount=item.tax_amount,
        )
        for line_number, item in enumerate(invoice.items, start=1)
    ]


def _to_entity(record: InvoiceRecord) -> Invoice:
    items = tuple(
        CalculatedItem(
            line_item=LineItem(
                product_name=item.product_name,
                unit_price=item.unit_price,
                quantity=item.quantity,
                tax_type=TaxType(item.tax_type),
                tax_rate=Decimal(item.tax_rate),
                withholding_tax_target=item.withholding_tax_target,
                commission_rate=Decimal(item.commission_rate),
                product_id=item.product_id,
            ),
            amount=item.amount,
            tax_amount=item.tax_amount,
        )
        for item in record.items
    )
    return Invoice(
        id=record.id,
        freelancer_id=record.freelancer_id,
        creator_id=record.creator_id,
        billing_date=record.billing_date,
        payment_due_date=record.payment_due_date,
        items=items,
        subtotal=record.subtotal,
        withholding_tax_subtotal=record.withholding_tax_subtotal,
        total_with_tax=record.total_with_tax,
        withholding_tax=record.withholding_tax,
        invoice_amount=record.invoice_amount,
        status=InvoiceStatus(record.status),
        notes=record.notes,
        invoice_number=record.invoice_number,
        freelancer_snapshot=(
            FreelancerSnapshot.model_validate_json(record.freelancer_snapshot)
            if record.freelancer_snapshot
            else None
        ),
        company_snapshot=(
            CompanySnapshot.model_validate_json(record.company_snapshot)
            if record.company_snapshot
            else None
        ),
        confirmed_at=record.confirmed_at,
        payment_date=record.payment_date,
        created_at=record.created_at,
    )


def _history_to_entity(record: InvoiceStatusHistoryRecord) -> InvoiceStatusHistory:
    return InvoiceStatusHistory(
        id=record.id,
        invoice_id=record.invoice_id,
        from_status=InvoiceStatus(record.from_status) if record.from_status else None,
        to_status=InvoiceStatus(record.to_status),
        changed_by=record.changed_by,
        comment=record.comment,
        created_at=record.created_at,
    )


def _audit_record(entry: AuditEntry) -> AuditLogRecord:
    return AuditLogRecord(
        user_id=entry.user_id,
        invoice_id=entry.invoice_id,
        action=entry.action,
        details=entry.details,
        created_at=entry.created_at or _utcnow(),
    )


def _history_record(history: InvoiceStatusHistory) -> InvoiceStatusHistoryRecord:
    return InvoiceStatusHistoryRecord(
        invoice_id=history.invoice_id,
        from_status=history.from_status.value if history.from_status else None,
        to_status=history.to_status.value,
        changed_by=history.changed_by,
        comment=history.comment,
        created_at=history.created_at or _utcnow(),
    )


def _is_number_conflict(error: IntegrityError) -> bool:
    return "invoice_number" in str(error.orig)


class SqlAlchemyInvoiceRepository(IInvoiceRepository):
    """請求書・明細・履歴・監査ログを1トランザクションで保存するリポジトリ"""

    def __init__(self, database: Database):
        self.database = database

    async def get(self, invoice_id: str) -> Optional[Invoice]:
        async with self.database.session() as session:
            record = await self._load(session, invoice_id)
            return _to_entity(record) if record else None

    async def add(
        self,
        invoice: Invoice,
        audit_entry: AuditEntry,
        history: Optional[InvoiceStatusHistory] = None,
    ) -> Invoice:
        async with self.database.session() as session:
            record = InvoiceRecord(
                id=invoice.id,
                created_at=invoice.created_at or _utcnow(),
                **_header_values(invoice),
            )
            record.items = _item_records(invoice)
            session.add(record)
            if history is not None:
                session.add(_history_record(history))
            session.add(_audit_record(audit_entry))
            await session.flush()

            logger.debug(f"請求書を登録しました: {invoice.id}")
            return _to_entity(await self._load(session, invoice.id))

    async def update(
        self,
        invoice: Invoice,
        expected_status: InvoiceStatus,
        audit_entry: AuditEntry,
        history: Optional[InvoiceStatusHistory] = None,
    ) -> Invoice:
        try:
            async with self.database.session() as session:
                result = await session.execute(
                    update(InvoiceRecord)
                    .where(
                        InvoiceRecord.id == invoice.id,
                        InvoiceRecord.status == expected_status.value,
                    )
                    .values(**_header_values(invoice))
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount == 0:
                    await self._raise_for_missing_row(session, invoice.id, audit_entry.action)

                await session.execute(
                    delete(InvoiceItemRecord).where(InvoiceItemRecord.invoice_id == invoice.id)
                )
                session.add_all(_item_records(invoice))

                if history is not None:
                    session.add(_history_record(history))
                session.add(_audit_record(audit_entry))
                await session.flush()

                return _to_entity(await self._load(session, invoice.id, populate_existing=True))

        except IntegrityError as e:
            if _is_number_conflict(e):
                logger.warning(f"請求書番号が重複しました: {invoice.invoice_number}")
                raise NumberConflictError(invoice.invoice_number) from e
            raise

    async def delete(
        self, invoice_id: str, expected_status: InvoiceStatus, audit_entry: AuditEntry
    ) -> None:
        async with self.database.session() as session:
            result = await session.execute(
                delete(InvoiceRecord)
                .where(
                    InvoiceRecord.id == invoice_id,
                    InvoiceRecord.status == expected_status.value,
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                await self._raise_for_missing_row(session, invoice_id, audit_entry.action)

            session.add(_audit_record(audit_entry))

    async def find_latest_invoice_number(self, year_month: str) -> Optional[str]:
        async with self.database.session() as session:
            result = await session.execute(
                select(func.max(InvoiceRecord.invoice_number)).where(
                    InvoiceRecord.invoice_number.like(f"{year_month}-%")
                )
            )
            return result.scalar_one_or_none()

    async def list_history(self, invoice_id: str) -> List[InvoiceStatusHistory]:
        async with self.database.session() as session:
            result = await session.execute(
                select(InvoiceStatusHistoryRecord)
                .where(InvoiceStatusHistoryRecord.invoice_id == invoice_id)
                .order_by(
                    InvoiceStatusHistoryRecord.created_at.desc(),
                    InvoiceStatusHistoryRecord.id.desc(),
                )
            )
            return [_history_to_entity(record) for record in result.scalars().all()]

    async def search(self, criteria: InvoiceSearchCriteria) -> List[Invoice]:
        stmt = select(InvoiceRecord).options(selectinload(InvoiceRecord.items))

        if criteria.status is not None:
            stmt = stmt.where(InvoiceRecord.status == criteria.status.value)
        if criteria.freelancer_id is not None:
            stmt = stmt.where(InvoiceRecord.freelancer_id == criteria.freelancer_id)
        if criteria.billing_date_from is not None:
            stmt = stmt.where(InvoiceRecord.billing_date >= criteria.billing_date_from)
        if criteria.billing_date_to is not None:
            stmt = stmt.where(InvoiceRecord.billing_date <= criteria.billing_date_to)

        stmt = stmt.order_by(InvoiceRecord.created_at.desc())

        async with self.database.session() as session:
            result = await session.execute(stmt)
            return [_to_entity(record) for record in result.scalars().all()]

    async def _load(
        self, session: AsyncSession, invoice_id: str, populate_existing: bool = False
    ) -> Optional[InvoiceRecord]:
        stmt = (
            select(InvoiceRecord)
            .options(selectinload(InvoiceRecord.items))
            .where(InvoiceRecord.id == invoice_id)
        )
        if populate_existing:
            stmt = stmt.execution_options(populate_existing=True)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def _raise_for_missing_row(
        self, session: AsyncSession, invoice_id: str, action: str
    ) -> None:
        """条件付き更新・削除が0件だった理由を例外にする"""
        result = await session.execute(
            select(InvoiceRecord.status).where(InvoiceRecord.id == invoice_id)
        )
        current_status = result.scalar_one_or_none()
        if current_status is None:
            raise NotFoundError("請求書", invoice_id)
        raise InvalidTransitionError(current_status, action)
