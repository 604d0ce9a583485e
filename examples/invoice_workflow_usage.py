"""請求書ワークフローの使用例

インメモリのSQLiteで、請求書の作成から支払済みまでを一通り実行する。
"""
import asyncio
import logging
from datetime import date

from invoicing.domain.entities.company import CompanyInfo
from invoicing.domain.entities.freelancer import AccountType, Freelancer
from invoicing.domain.value_objects.actor import ActorContext, Role
from invoicing.domain.value_objects.application_config import ApplicationConfig
from invoicing.domain.value_objects.invoice_requests import CreateInvoiceRequest
from invoicing.infrastructure.services.service_factory import ServiceFactory

# ロギングの設定
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


async def example_invoice_workflow():
    """作成 -> 確定 -> 承認 -> 支払済み の例"""
    config = ApplicationConfig(database_url="sqlite+aiosqlite:///:memory:", log_to_file=False)
    factory = ServiceFactory(config, logger)
    await factory.database.init_schema()

    company_user = ActorContext(role=Role.COMPANY, user_id="accounting@example.co.jp")
    freelancer_user = ActorContext(role=Role.FREELANCER, user_id="taro", freelancer_id="fl-001")

    try:
        # マスタを登録
        await factory.freelancer_repository.save(
            Freelancer(
                id="fl-001",
                user_id="taro",
                name="山田 太郎",
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
        )
        await factory.company_repository.save(CompanyInfo(company_name="株式会社サンプル"))

        # 請求書を作成
        request = CreateInvoiceRequest.parse(
            {
                "freelancer_id": "fl-001",
                "billing_date": "2024-05-31",
                "payment_due_date": "2024-06-30",
                "items": [
                    {
                        "product_name": "システム開発支援",
                        "unit_price": 10000,
                        "quantity": 1,
                        "tax_type": "EXCLUSIVE",
                        "tax_rate": "10",
                        "withholding_tax_target": True,
                    }
                ],
            }
        )
        invoice = await factory.create_invoice_use_case().execute(company_user, request)
        print(f"小計: ¥{invoice.subtotal:,}")
        print(f"税込合計: ¥{invoice.total_with_tax:,}")
        print(f"源泉徴収税額: ¥{invoice.withholding_tax:,}")
        print(f"請求金額: ¥{invoice.invoice_amount:,}")

        # 確定・承認・支払
        invoice = await factory.confirm_invoice_use_case().execute(company_user, invoice.id)
        print(f"請求書番号: {invoice.invoice_number}")

        status_use_case = factory.change_invoice_status_use_case()
        await status_use_case.approve(freelancer_user, invoice.id, comment="確認しました")
        await status_use_case.mark_paid(company_user, invoice.id, payment_date=date(2024, 6, 28))

        detail = await factory.get_invoice_use_case().execute(company_user, invoice.id)
        print(f"\nステータス: {detail.invoice.status.value}")
        for history in detail.history:
            from_status = history.from_status.value if history.from_status else "-"
            print(f"  - {from_status} -> {history.to_status.value} ({history.comment or ''})")

    finally:
        await factory.close()


if __name__ == "__main__":
    asyncio.run(example_invoice_workflow())
