"""Distribution Repository Interface

Defines the contract for distribution persistence and reporting.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Tuple
from src.domain.distribution import Distribution, DistributionItem


@dataclass(frozen=True)
class RevenueTotals:
    distribution_count: int
    total_amount: Decimal
    write_off_amount: Decimal
    net_amount: Decimal
    amount_collected: Decimal


class DistributionRepository(ABC):
    """
    Repository interface for Distribution persistence

    Monetary fields are never updated after creation. The only writes after
    the fact are the receipt reference and the notification flag.
    """

    @abstractmethod
    async def create(self, distribution: Distribution) -> Distribution:
        pass

    @abstractmethod
    async def create_item(self, item: DistributionItem) -> DistributionItem:
        pass

    @abstractmethod
    async def get_by_id(self, distribution_id: int) -> Optional[Distribution]:
        pass

    @abstractmethod
    async def get_items(self, distribution_id: int) -> List[DistributionItem]:
        pass

    @abstractmethod
    async def get_by_customer_id(
        self, customer_id: int, limit: int = 20, offset: int = 0
    ) -> Tuple[List[Distribution], int]:
        """
        Retrieve a customer's distribution history, newest first

        Returns:
            Tuple of (distributions, total count)
        """
        pass

    @abstractmethod
    async def attach_receipt(self, distribution_id: int, receipt_path: str) -> None:
        pass

    @abstractmethod
    async def mark_email_sent(self, distribution_id: int) -> None:
        pass

    @abstractmethod
    async def generate_receipt_number(self) -> str:
        """
        Generate the next receipt number

        Format: RCPYYYYMMDDNNNN (e.g., RCP202401150001)
        """
        pass

    @abstractmethod
    async def summarize(self, start: datetime, end: datetime) -> RevenueTotals:
        """
        Sum settlements distributed in [start, end)

        Revenue is net_amount; amount_collected is reported separately.
        """
        pass
