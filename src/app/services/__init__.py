from .unit_of_work import UnitOfWork
from .notification_service import NotificationService
from .pdf_service import PdfService
from .receipt_store import ReceiptStore
from .event_publisher import DistributionCompleted, EventHandler, EventPublisher

__all__ = [
    "UnitOfWork",
    "NotificationService",
    "PdfService",
    "ReceiptStore",
    "DistributionCompleted",
    "EventHandler",
    "EventPublisher",
]
