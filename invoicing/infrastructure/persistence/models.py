"""請求書データベースのテーブル定義

SQLAlchemy 2.0 の宣言的マッピング。SQLite（aiosqlite）と PostgreSQL の両方で動作する。
"""
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """全テーブルの基底クラス"""
    pass


class FreelancerRecord(Base):
    """フリーランス（支払先）マスタ"""

    __tablename__ = "freelancers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[Optional[str]] = mapped_column(String(100), unique=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    name_kana: Mapped[Optional[str]] = mapped_column(String(200))
    email: Mapped[str] = mapped_column(String(200), nullable=False)
    phone: Mapped[str] = mapped_column(String(20), nullable=False)
    postal_code: Mapped[str] = mapped_column(String(7), nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    registration_number: Mapped[Optional[str]] = mapped_column(String(14))
    bank_name: Mapped[str] = mapped_column(String(100), nullable=False)
    bank_branch: Mapped[str] = mapped_column(String(100), nullable=False)
    account_type: Mapped[str] = mapped_column(String(20), nullable=False)
    account_number: Mapped[str] = mapped_column(String(20), nullable=False)
    account_holder: Mapped[str] = mapped_column(String(200), nullable=False)
    withholding_tax_default: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="ACTIVE", nullable=False)

    def __repr__(self) -> str:
        return f"<FreelancerRecord(id='{self.id}', name='{self.name}')>"


class CompanyInfoRecord(Base):
    """自社（請求先）情報"""

    __tablename__ = "company_info"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    company_name: Mapped[str] = mapped_column(String(200), nullable=False)
    postal_code: Mapped[Optional[str]] = mapped_column(String(7))
    address: Mapped[Optional[str]] = mapped_column(String(500))
    phone: Mapped[Optional[str]] = mapped_column(String(20))
    email: Mapped[Optional[str]] = mapped_column(String(200))
    additional_info: Mapped[Optional[str]] = mapped_column(Text)


class InvoiceRecord(Base):
    """請求書ヘッダー"""

    __tablename__ = "invoices"
    __table_args__ = (UniqueConstraint("invoice_number", name="uq_invoices_invoice_number"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    invoice_number: Mapped[Optional[str]] = mapped_column(String(11))
    freelancer_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("freelancers.id"), nullable=False, index=True
    )
    creator_id: Mapped[str] = mapped_column(String(100), nullable=False)
    billing_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    payment_due_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, index=True)

    # --- 金額（円） ---
    subtotal: Mapped[int] = mapped_column(Integer, nullable=False)
    withholding_tax_subtotal: Mapped[int] = mapped_column(Integer, nullable=False)
    total_with_tax: Mapped[int] = mapped_column(Integer, nullable=False)
    withholding_tax: Mapped[int] = mapped_column(Integer, nullable=False)
    invoice_amount: Mapped[int] = mapped_column(Integer, nullable=False)

    notes: Mapped[Optional[str]] = mapped_column(Text)

    # --- 確定時のスナップショット（JSON文字列） ---
    freelancer_snapshot: Mapped[Optional[str]] = mapped_column(Text)
    company_snapshot: Mapped[Optional[str]] = mapped_column(Text)

    confirmed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    payment_date: Mapped[Optional[date]] = mapped_column(Date)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    items: Mapped[List["InvoiceItemRecord"]] = relationship(
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceItemRecord.line_number",
    )
    history: Mapped[List["InvoiceStatusHistoryRecord"]] = relationship(
        back_populates="invoice", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return (
            f"<InvoiceRecord(id='{self.id}', number={self.invoice_number}, "
            f"status='{self.status}')>"
        )


class InvoiceItemRecord(Base):
    """請求書明細"""

    __tablename__ = "invoice_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    invoice_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True
    )
    line_number: Mapped[int] = mapped_column(Integer, nullable=False)
    product_id: Mapped[Optional[str]] = mapped_column(String(36))
    product_name: Mapped[str] = mapped_column(String(200), nullable=False)
    unit_price: Mapped[int] = mapped_column(Integer, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    # 率は Decimal の文字列表現で保持する（例: "10", "8", "100"）
    commission_rate: Mapped[str] = mapped_column(String(10), nullable=False)
    tax_type: Mapped[str] = mapped_column(String(20), nullable=False)
    tax_rate: Mapped[str] = mapped_column(String(10), nullable=False)
    withholding_tax_target: Mapped[bool] = mapped_column(Boolean, nullable=False)
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    tax_amount: Mapped[int] = mapped_column(Integer, nullable=False)

    invoice: Mapped["InvoiceRecord"] = relationship(back_populates="items")


class InvoiceStatusHistoryRecord(Base):
    """請求書ステータスの遷移履歴（追記のみ）"""

    __tablename__ = "invoice_status_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    invoice_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True
    )
    from_status: Mapped[Optional[str]] = mapped_column(String(20))
    to_status: Mapped[str] = mapped_column(String(20), nullable=False)
    changed_by: Mapped[str] = mapped_column(String(100), nullable=False)
    comment: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    invoice: Mapped["InvoiceRecord"] = relationship(back_populates="history")

    def __repr__(self) -> str:
        return f"<InvoiceStatusHistoryRecord({self.from_status} -> {self.to_status})>"


class AuditLogRecord(Base):
    """監査ログ

    請求書の削除後も残すため、invoice_id は外部キーにしない。
    """

    __tablename__ = "audit_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(100), nullable=False)
    invoice_id: Mapped[Optional[str]] = mapped_column(String(36), index=True)
    action: Mapped[str] = mapped_column(String(50), nullable=False)
    details: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
