"""Customer Account Repository Interface

Defines the contract for customer balance persistence.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Optional
from src.domain.customer_account import CustomerAccount


class CustomerAccountRepository(ABC):
    """
    Repository interface for CustomerAccount persistence

    Reads can take a row lock (SELECT FOR UPDATE); writes are
    compare-and-swap on the account version.
    """

    @abstractmethod
    async def get_by_customer_id(self, customer_id: int, for_update: bool = False) -> Optional[CustomerAccount]:
        """
        Retrieve account by customer ID

        Args:
            customer_id: Customer identifier
            for_update: If True, lock the row with SELECT FOR UPDATE (pessimistic lock)

        Returns:
            CustomerAccount if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_all(self) -> List[CustomerAccount]:
        """Retrieve every customer account (used by reconciliation)"""
        pass

    @abstractmethod
    async def create(self, account: CustomerAccount) -> CustomerAccount:
        """
        Create a new customer account

        Args:
            account: CustomerAccount entity to persist

        Returns:
            Created CustomerAccount with generated ID
        """
        pass

    @abstractmethod
    async def update_balances(
        self,
        account_id: int,
        expected_version: int,
        account_balance: Decimal,
        credit_balance: Decimal,
    ) -> bool:
        """
        Compare-and-swap both balances

        Args:
            account_id: Account ID
            expected_version: Version read before computing the new balances
            account_balance: New account balance
            credit_balance: New credit balance

        Returns:
            True if the row still had expected_version and was updated,
            False if another writer got there first
        """
        pass
