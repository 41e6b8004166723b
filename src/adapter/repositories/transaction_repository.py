"""SQLAlchemy implementation of TransactionRepository

Transactions are append-only: this repository never updates or deletes.
"""

from typing import List, Optional, Tuple
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.transaction_repository import TransactionRepository
from src.domain.transaction import Transaction


class SqlAlchemyTransactionRepository(TransactionRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, transaction: Transaction) -> Transaction:
        """
        Append a transaction

        Args:
            transaction: Transaction entity to persist

        Returns:
            Created Transaction with generated ID
        """
        self.session.add(transaction)
        await self.session.flush()
        await self.session.refresh(transaction)
        return transaction

    async def get_by_id(self, transaction_id: int) -> Optional[Transaction]:
        stmt = select(Transaction).where(Transaction.id == transaction_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_distribution_id(self, distribution_id: int) -> List[Transaction]:
        stmt = (
            select(Transaction)
            .where(Transaction.distribution_id == distribution_id)
            .order_by(Transaction.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_customer_id(
        self, customer_id: int, limit: int = 20, offset: int = 0
    ) -> Tuple[List[Transaction], int]:
        """
        Retrieve a customer's transactions with pagination

        Args:
            customer_id: Customer identifier
            limit: Maximum number of transactions to return
            offset: Number of transactions to skip

        Returns:
            Tuple of (transactions list, total count)
        """
        count_stmt = (
            select(func.count())
            .select_from(Transaction)
            .where(Transaction.customer_id == customer_id)
        )
        count_result = await self.session.execute(count_stmt)
        total = count_result.scalar_one()

        stmt = (
            select(Transaction)
            .where(Transaction.customer_id == customer_id)
            .order_by(Transaction.created_at.desc(), Transaction.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def get_history(self, customer_id: int) -> List[Transaction]:
        stmt = (
            select(Transaction)
            .where(Transaction.customer_id == customer_id)
            .order_by(Transaction.created_at, Transaction.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
