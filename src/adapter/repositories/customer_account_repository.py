"""SQLAlchemy implementation of CustomerAccountRepository

Provides persistence for CustomerAccount entities with pessimistic locking
and a version-checked balance update to prevent lost updates between
concurrent settlements.
"""

from typing import List, Optional
from decimal import Decimal
from datetime import datetime
from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.customer_account_repository import CustomerAccountRepository
from src.domain.customer_account import CustomerAccount


class SqlAlchemyCustomerAccountRepository(CustomerAccountRepository):
    """
    SQLAlchemy implementation of CustomerAccountRepository

    Features:
    - Pessimistic locking via SELECT FOR UPDATE
    - Compare-and-swap on the version column (works where row locks are
      unavailable, e.g. SQLite)
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_customer_id(self, customer_id: int, for_update: bool = False) -> Optional[CustomerAccount]:
        """
        Retrieve account by customer ID with optional row-level locking

        Args:
            customer_id: Customer identifier
            for_update: If True, locks the row with SELECT FOR UPDATE (prevents concurrent modifications)

        Returns:
            CustomerAccount if found, None otherwise
        """
        stmt = select(CustomerAccount).where(CustomerAccount.customer_id == customer_id)

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_all(self) -> List[CustomerAccount]:
        stmt = select(CustomerAccount).order_by(CustomerAccount.customer_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, account: CustomerAccount) -> CustomerAccount:
        """
        Create a new customer account

        Args:
            account: CustomerAccount entity to persist

        Returns:
            Created CustomerAccount with generated ID
        """
        self.session.add(account)
        await self.session.flush()
        await self.session.refresh(account)
        return account

    async def update_balances(
        self,
        account_id: int,
        expected_version: int,
        account_balance: Decimal,
        credit_balance: Decimal,
    ) -> bool:
        """
        Update both balances if the version is still expected_version

        Note:
            Should be called within the settlement transaction with the
            account already locked
        """
        stmt = (
            update(CustomerAccount)
            .where(CustomerAccount.id == account_id)
            .where(CustomerAccount.version == expected_version)
            .values(
                account_balance=account_balance,
                credit_balance=credit_balance,
                version=expected_version + 1,
                updated_at=datetime.utcnow(),
            )
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount == 1
