"""Notification Service Implementations

Provides concrete implementations for telling customers their packages
were released.
"""

import logging
from typing import Optional
import httpx
from src.app.services.notification_service import NotificationService
from src.domain.distribution import Distribution

logger = logging.getLogger(__name__)


class LoggingNotificationService(NotificationService):
    """
    Notification service that logs receipts

    Useful for development and testing, or as a fallback.
    """

    async def send_distribution_receipt(
        self, distribution: Distribution, receipt_path: Optional[str] = None
    ) -> bool:
        """
        Log the distribution receipt

        Returns:
            Always True (logging never fails)
        """
        logger.info(
            f"[RECEIPT] Customer: {distribution.customer_id}, "
            f"Receipt: {distribution.receipt_number}, "
            f"Net: {distribution.net_amount}, "
            f"Collected: {distribution.amount_collected}, "
            f"Status: {distribution.payment_status.value}, "
            f"Document: {receipt_path or 'n/a'}"
        )
        return True


class WebhookNotificationService(NotificationService):
    """
    Notification service that hands receipts to a mailer via HTTP webhook

    Sends JSON payload to configured webhook URL.
    """

    def __init__(self, webhook_url: str, timeout: float = 10.0):
        """
        Initialize webhook notification service

        Args:
            webhook_url: URL to POST receipts to
            timeout: Request timeout in seconds
        """
        self.webhook_url = webhook_url
        self.timeout = timeout

    async def send_distribution_receipt(
        self, distribution: Distribution, receipt_path: Optional[str] = None
    ) -> bool:
        """
        Send the distribution receipt via webhook

        Returns:
            True if webhook call succeeded, False otherwise
        """
        payload = {
            "type": "distribution_receipt",
            "distribution_id": distribution.id,
            "receipt_number": distribution.receipt_number,
            "customer_id": distribution.customer_id,
            "distributed_at": distribution.distributed_at.isoformat(),
            "total_amount": str(distribution.total_amount),
            "write_off_amount": str(distribution.write_off_amount),
            "net_amount": str(distribution.net_amount),
            "amount_collected": str(distribution.amount_collected),
            "credit_applied": str(distribution.credit_applied),
            "account_balance_applied": str(distribution.account_balance_applied),
            "overpayment": str(distribution.overpayment),
            "payment_status": distribution.payment_status.value,
            "receipt_path": receipt_path,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.webhook_url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                logger.info(
                    f"Webhook notification sent for receipt {distribution.receipt_number} "
                    f"to {self.webhook_url}"
                )
                return True
        except httpx.HTTPError as e:
            logger.error(
                f"Failed to send webhook notification for receipt {distribution.receipt_number}: {e}"
            )
            return False


class CompositeNotificationService(NotificationService):
    """
    Notification service that delegates to multiple services

    Useful for sending to multiple channels (e.g., log + webhook).
    """

    def __init__(self, services: list[NotificationService]):
        self.services = services

    async def send_distribution_receipt(
        self, distribution: Distribution, receipt_path: Optional[str] = None
    ) -> bool:
        """
        Send to every configured service

        Returns:
            True only if every service succeeded
        """
        success = True
        for service in self.services:
            try:
                if not await service.send_distribution_receipt(distribution, receipt_path):
                    success = False
            except Exception as e:
                logger.error(f"Notification service {type(service).__name__} failed: {e}")
                success = False
        return success


def create_notification_service(webhook_url: Optional[str] = None) -> NotificationService:
    """
    Factory function to create appropriate notification service

    Args:
        webhook_url: Optional webhook URL. If provided, creates composite
                     service with logging + webhook. Otherwise, just logging.

    Returns:
        Configured NotificationService
    """
    services: list[NotificationService] = [LoggingNotificationService()]

    if webhook_url:
        services.append(WebhookNotificationService(webhook_url))

    if len(services) == 1:
        return services[0]

    return CompositeNotificationService(services)
