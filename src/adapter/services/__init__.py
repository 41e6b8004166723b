from .unit_of_work import SqlAlchemyUnitOfWork
from .notification_service import (
    LoggingNotificationService,
    WebhookNotificationService,
    CompositeNotificationService,
    create_notification_service,
)
from .pdf_service import ReportLabPdfService
from .receipt_store import LocalReceiptStore

__all__ = [
    "SqlAlchemyUnitOfWork",
    "LoggingNotificationService",
    "WebhookNotificationService",
    "CompositeNotificationService",
    "create_notification_service",
    "ReportLabPdfService",
    "LocalReceiptStore",
]
