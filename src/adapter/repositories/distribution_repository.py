"""SQLAlchemy Distribution Repository Implementation

Implements distribution persistence and revenue reporting using an
SQLAlchemy async session.
"""

from datetime import datetime
from typing import List, Optional, Tuple
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.distribution_repository import DistributionRepository, RevenueTotals
from src.domain.distribution import Distribution, DistributionItem
from src.domain.money import to_money

RECEIPT_PREFIX = "RCP"


class SqlAlchemyDistributionRepository(DistributionRepository):
    """
    SQLAlchemy implementation of DistributionRepository

    Post-creation writes go through the ORM (load, set, flush) so the
    immutability listeners see them.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, distribution: Distribution) -> Distribution:
        """
        Create a new distribution

        Args:
            distribution: Distribution entity to persist

        Returns:
            Created Distribution with generated ID
        """
        self.session.add(distribution)
        await self.session.flush()
        await self.session.refresh(distribution)
        return distribution

    async def create_item(self, item: DistributionItem) -> DistributionItem:
        self.session.add(item)
        await self.session.flush()
        await self.session.refresh(item)
        return item

    async def get_by_id(self, distribution_id: int) -> Optional[Distribution]:
        statement = select(Distribution).where(Distribution.id == distribution_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_items(self, distribution_id: int) -> List[DistributionItem]:
        statement = (
            select(DistributionItem)
            .where(DistributionItem.distribution_id == distribution_id)
            .order_by(DistributionItem.id)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def get_by_customer_id(
        self, customer_id: int, limit: int = 20, offset: int = 0
    ) -> Tuple[List[Distribution], int]:
        count_statement = (
            select(func.count())
            .select_from(Distribution)
            .where(Distribution.customer_id == customer_id)
        )
        count_result = await self.session.execute(count_statement)
        total = count_result.scalar_one()

        statement = (
            select(Distribution)
            .where(Distribution.customer_id == customer_id)
            .order_by(Distribution.distributed_at.desc(), Distribution.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all()), total

    async def attach_receipt(self, distribution_id: int, receipt_path: str) -> None:
        distribution = await self.get_by_id(distribution_id)
        if distribution is None:
            raise LookupError(f"Distribution {distribution_id} not found")
        distribution.receipt_path = receipt_path
        self.session.add(distribution)
        await self.session.flush()

    async def mark_email_sent(self, distribution_id: int) -> None:
        distribution = await self.get_by_id(distribution_id)
        if distribution is None:
            raise LookupError(f"Distribution {distribution_id} not found")
        distribution.email_sent = True
        self.session.add(distribution)
        await self.session.flush()

    async def generate_receipt_number(self) -> str:
        """
        Generate a unique receipt number

        Format: RCPYYYYMMDDNNNN (e.g., RCP202401150001), sequence restarts daily

        Returns:
            Receipt number string; a concurrent duplicate is rejected by the
            unique index and the settlement is retried
        """
        prefix = f"{RECEIPT_PREFIX}{datetime.utcnow():%Y%m%d}"

        # Get the highest receipt number for today
        statement = (
            select(func.max(Distribution.receipt_number))
            .where(Distribution.receipt_number.like(f"{prefix}%"))
        )
        result = await self.session.execute(statement)
        max_number = result.scalar_one_or_none()

        if max_number:
            sequence = int(max_number[len(prefix):]) + 1
        else:
            sequence = 1

        return f"{prefix}{sequence:04d}"

    async def summarize(self, start: datetime, end: datetime) -> RevenueTotals:
        statement = (
            select(
                func.count(Distribution.id),
                func.coalesce(func.sum(Distribution.total_amount), 0),
                func.coalesce(func.sum(Distribution.write_off_amount), 0),
                func.coalesce(func.sum(Distribution.net_amount), 0),
                func.coalesce(func.sum(Distribution.amount_collected), 0),
            )
            .where(Distribution.distributed_at >= start)
            .where(Distribution.distributed_at < end)
        )
        result = await self.session.execute(statement)
        count, total_amount, write_off_amount, net_amount, amount_collected = result.one()

        return RevenueTotals(
            distribution_count=count,
            total_amount=to_money(total_amount),
            write_off_amount=to_money(write_off_amount),
            net_amount=to_money(net_amount),
            amount_collected=to_money(amount_collected),
        )
