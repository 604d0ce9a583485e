"""請求書リポジトリのインターフェース"""
from abc import ABC, abstractmethod
from typing import List, Optional

from invoicing.domain.entities.audit_entry import AuditEntry
from invoicing.domain.entities.invoice import Invoice
from invoicing.domain.entities.status_history import InvoiceStatusHistory
from invoicing.domain.value_objects.invoice_requests import InvoiceSearchCriteria
from invoicing.domain.value_objects.invoice_status import InvoiceStatus


class IInvoiceRepository(ABC):
    """請求書リポジトリのインターフェース

    書き込み系のメソッドは、請求書・明細・履歴・監査ログを
    1トランザクションでまとめて反映する。
    """

    @abstractmethod
    async def get(self, invoice_id: str) -> Optional[Invoice]:
        """請求書を明細付きで取得する

        Args:
            invoice_id: 請求書ID

        Returns:
            Optional[Invoice]: 請求書、存在しない場合はNone
        """
        pass

    @abstractmethod
    async def add(
        self,
        invoice: Invoice,
        audit_entry: AuditEntry,
        history: Optional[InvoiceStatusHistory] = None,
    ) -> Invoice:
        """請求書を新規登録する

        Args:
            invoice: 登録する請求書
            audit_entry: 監査ログ
            history: 下書き作成の履歴（同じトランザクションで追記）

        Returns:
            Invoice: 登録された請求書
        """
        pass

    @abstractmethod
    async def update(
        self,
        invoice: Invoice,
        expected_status: InvoiceStatus,
        audit_entry: AuditEntry,
        history: Optional[InvoiceStatusHistory] = None,
    ) -> Invoice:
        """請求書のヘッダーと明細を置き換える

        Args:
            invoice: 更新後の請求書
            expected_status: 読み込み時点のステータス
            audit_entry: 監査ログ
            history: ステータス履歴（遷移しない更新ではNone）

        Returns:
            Invoice: 更新された請求書

        Raises:
            NotFoundError: 請求書が存在しない場合
            InvalidTransitionError: ステータスが expected_status から変わっていた場合
            NumberConflictError: 請求書番号が他の請求書と重複した場合
        """
        pass

    @abstractmethod
    async def delete(
        self, invoice_id: str, expected_status: InvoiceStatus, audit_entry: AuditEntry
    ) -> None:
        """請求書を明細・履歴ごと削除する

        Raises:
            NotFoundError: 請求書が存在しない場合
            InvalidTransitionError: ステータスが expected_status から変わっていた場合
        """
        pass

    @abstractmethod
    async def find_latest_invoice_number(self, year_month: str) -> Optional[str]:
        """指定年月で採番済みの最大の請求書番号を取得する

        Args:
            year_month: YYYYMM 形式の年月

        Returns:
            Optional[str]: 最大の請求書番号、未採番の場合はNone
        """
        pass

    @abstractmethod
    async def list_history(self, invoice_id: str) -> List[InvoiceStatusHistory]:
        """ステータス履歴を新しい順に取得する"""
        pass

    @abstractmethod
    async def search(self, criteria: InvoiceSearchCriteria) -> List[Invoice]:
        """条件に一致する請求書を作成日の新しい順に取得する"""
        pass
