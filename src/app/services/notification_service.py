"""Notification Service Interface

Defines the contract for telling a customer their packages were released.
"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.distribution import Distribution


class NotificationService(ABC):
    """
    Abstract notification service for distribution receipts

    Implementations can send notifications via:
    - Webhook (HTTP POST to the mailer)
    - Log output
    - etc.
    """

    @abstractmethod
    async def send_distribution_receipt(
        self, distribution: Distribution, receipt_path: Optional[str] = None
    ) -> bool:
        """
        Notify the customer about a completed distribution

        Args:
            distribution: Settled Distribution
            receipt_path: Receipt reference, if one was generated

        Returns:
            True if notification sent successfully, False otherwise
        """
        pass
