"""Post-commit settlement handlers

Subscribers to DistributionCompleted. Each one runs after the settlement has
committed, commits its own small write, and raises on failure so the
publisher can report it. Neither can undo the settlement.
"""

import logging

from src.app.repositories.distribution_repository import DistributionRepository
from src.app.services.event_publisher import DistributionCompleted, EventHandler
from src.app.services.notification_service import NotificationService
from src.app.services.pdf_service import PdfService
from src.app.services.receipt_store import ReceiptStore
from src.app.services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class ReceiptGenerationHandler(EventHandler):
    """Renders the receipt PDF, stores it and records its reference"""

    name = "receipt"

    def __init__(
        self,
        pdf_service: PdfService,
        receipt_store: ReceiptStore,
        distribution_repo: DistributionRepository,
        uow: UnitOfWork,
        company_name: str = "Package Forwarding Co.",
        company_address: str = "1 Harbour Road, Kingston",
    ):
        self.pdf_service = pdf_service
        self.receipt_store = receipt_store
        self.distribution_repo = distribution_repo
        self.uow = uow
        self.company_name = company_name
        self.company_address = company_address

    async def handle(self, event: DistributionCompleted) -> None:
        distribution = event.distribution

        document = self.pdf_service.generate_distribution_receipt(
            distribution,
            list(event.items),
            company_name=self.company_name,
            company_address=self.company_address,
        )
        receipt_path = self.receipt_store.save(distribution.receipt_number, document)

        try:
            await self.distribution_repo.attach_receipt(distribution.id, receipt_path)
            await self.uow.commit()
        except Exception:
            await self.uow.rollback()
            raise

        distribution.receipt_path = receipt_path
        logger.info(
            f"Receipt {distribution.receipt_number} stored at {receipt_path} "
            f"({len(document)} bytes)"
        )


class ReceiptNotificationHandler(EventHandler):
    """Tells the customer the packages were released and flags the distribution"""

    name = "notification"

    def __init__(
        self,
        notification_service: NotificationService,
        distribution_repo: DistributionRepository,
        uow: UnitOfWork,
    ):
        self.notification_service = notification_service
        self.distribution_repo = distribution_repo
        self.uow = uow

    async def handle(self, event: DistributionCompleted) -> None:
        distribution = event.distribution

        sent = await self.notification_service.send_distribution_receipt(
            distribution, receipt_path=distribution.receipt_path
        )
        if not sent:
            raise RuntimeError(
                f"Notification for receipt {distribution.receipt_number} was not delivered"
            )

        try:
            await self.distribution_repo.mark_email_sent(distribution.id)
            await self.uow.commit()
        except Exception:
            await self.uow.rollback()
            raise

        distribution.email_sent = True
