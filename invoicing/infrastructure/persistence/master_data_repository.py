"""SQLAlchemy によるマスタデータ（フリーランス・会社情報）リポジトリの実装"""
import logging
from typing import Optional

from sqlalchemy import select

from invoicing.domain.entities.company import CompanyInfo
from invoicing.domain.entities.freelancer import Freelancer
from invoicing.domain.repositories.company_repository import ICompanyRepository
from invoicing.domain.repositories.freelancer_repository import IFreelancerRepository
from invoicing.infrastructure.persistence.database import Database
from invoicing.infrastructure.persistence.models import CompanyInfoRecord, FreelancerRecord

logger = logging.getLogger(__name__)


class SqlAlchemyFreelancerRepository(IFreelancerRepository):
    """フリーランスマスタのリポジトリ"""

    def __init__(self, database: Database):
        self.database = database

    async def get(self, freelancer_id: str) -> Optional[Freelancer]:
        async with self.database.session() as session:
            record = await session.get(FreelancerRecord, freelancer_id)
            if record is None:
                return None
            return Freelancer.model_validate(record, from_attributes=True)

    async def save(self, freelancer: Freelancer) -> Freelancer:
        async with self.database.session() as session:
            record = await session.merge(FreelancerRecord(**freelancer.model_dump(mode="json")))
            await session.flush()
            logger.debug(f"フリーランスを保存しました: {record.id}")
            return Freelancer.model_validate(record, from_attributes=True)


class SqlAlchemyCompanyRepository(ICompanyRepository):
    """会社情報のリポジトリ

    会社情報は1件のみ扱い、最初に登録された行を現在の会社情報とする。
    """

    def __init__(self, database: Database):
        self.database = database

    async def get_current(self) -> Optional[CompanyInfo]:
        async with self.database.session() as session:
            result = await session.execute(
                select(CompanyInfoRecord).order_by(CompanyInfoRecord.id).limit(1)
            )
            record = result.scalar_one_or_none()
            if record is None:
                return None
            return CompanyInfo.model_validate(record, from_attributes=True)

    async def save(self, company: CompanyInfo) -> CompanyInfo:
        async with self.database.session() as session:
            values = company.model_dump(mode="json")
            if company.id is None:
                values.pop("id")
                record = CompanyInfoRecord(**values)
                session.add(record)
            else:
                record = await session.merge(CompanyInfoRecord(**values))
            await session.flush()
            logger.debug(f"会社情報を保存しました: {record.id}")
            return CompanyInfo.model_validate(record, from_attributes=True)
