"""Package Repository Interface

Defines the contract for package lookup and lifecycle transitions.
"""

from abc import ABC, abstractmethod
from typing import List, Sequence
from src.domain.package import Package


class PackageRepository(ABC):
    """
    Repository interface for Package persistence

    The settlement engine only reads packages and moves settled ones to
    their terminal state.
    """

    @abstractmethod
    async def get_by_ids(self, package_ids: Sequence[int], for_update: bool = False) -> List[Package]:
        """
        Retrieve packages by ID

        Args:
            package_ids: Package identifiers
            for_update: If True, lock the rows with SELECT FOR UPDATE

        Returns:
            Packages found (missing IDs are simply absent)
        """
        pass

    @abstractmethod
    async def get_ready_by_customer_id(self, customer_id: int) -> List[Package]:
        """
        Retrieve a customer's packages that are ready for release

        Args:
            customer_id: Customer identifier

        Returns:
            List of READY packages
        """
        pass

    @abstractmethod
    async def mark_distributed(self, package_ids: Sequence[int]) -> None:
        """
        Move packages to the terminal DELIVERED state

        Args:
            package_ids: Settled package identifiers
        """
        pass
