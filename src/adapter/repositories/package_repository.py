"""SQLAlchemy implementation of PackageRepository"""

from datetime import datetime
from typing import List, Sequence
from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.package_repository import PackageRepository
from src.domain.package import Package, PackageStatus


class SqlAlchemyPackageRepository(PackageRepository):
    """
    SQLAlchemy implementation of PackageRepository

    Packages are locked in ID order so two settlements touching overlapping
    package sets always acquire the locks in the same sequence.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_ids(self, package_ids: Sequence[int], for_update: bool = False) -> List[Package]:
        if not package_ids:
            return []

        stmt = select(Package).where(Package.id.in_(list(package_ids))).order_by(Package.id)

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_ready_by_customer_id(self, customer_id: int) -> List[Package]:
        stmt = (
            select(Package)
            .where(Package.customer_id == customer_id)
            .where(Package.status == PackageStatus.READY)
            .order_by(Package.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def mark_distributed(self, package_ids: Sequence[int]) -> None:
        """
        Move packages to DELIVERED

        Note:
            Must run inside the settlement transaction, after the rows were locked
        """
        stmt = (
            update(Package)
            .where(Package.id.in_(list(package_ids)))
            .values(status=PackageStatus.DELIVERED, updated_at=datetime.utcnow())
        )
        await self.session.execute(stmt)
        await self.session.flush()
