"""Transaction Repository Interface

Defines the contract for ledger transaction persistence.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple
from src.domain.transaction import Transaction


class TransactionRepository(ABC):
    """
    Repository interface for Transaction persistence

    Transactions are immutable and append-only.
    """

    @abstractmethod
    async def create(self, transaction: Transaction) -> Transaction:
        """
        Append a transaction

        Args:
            transaction: Transaction entity to persist

        Returns:
            Created Transaction with generated ID
        """
        pass

    @abstractmethod
    async def get_by_id(self, transaction_id: int) -> Optional[Transaction]:
        pass

    @abstractmethod
    async def get_by_distribution_id(self, distribution_id: int) -> List[Transaction]:
        """
        Retrieve the transactions written by one settlement, in emission order
        """
        pass

    @abstractmethod
    async def get_by_customer_id(
        self, customer_id: int, limit: int = 20, offset: int = 0
    ) -> Tuple[List[Transaction], int]:
        """
        Retrieve a customer's statement, newest first

        Args:
            customer_id: Customer identifier
            limit: Maximum number of transactions to return
            offset: Number of transactions to skip

        Returns:
            Tuple of (transactions, total count)
        """
        pass

    @abstractmethod
    async def get_history(self, customer_id: int) -> List[Transaction]:
        """
        Retrieve every transaction of a customer in creation order (oldest first)

        Used for ledger replay.
        """
        pass
