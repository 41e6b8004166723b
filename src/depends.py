from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.repositories.distribution_repository import SqlAlchemyDistributionRepository
from src.adapter.services.notification_service import create_notification_service
from src.adapter.services.pdf_service import ReportLabPdfService
from src.adapter.services.receipt_store import LocalReceiptStore
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.event_publisher import EventPublisher
from src.app.use_cases.distribution.side_effects import (
    ReceiptGenerationHandler,
    ReceiptNotificationHandler,
)

engine = create_async_engine(ApplicationConfig.DB_URI, echo=ApplicationConfig.DB_ECHO, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def build_event_publisher(session: AsyncSession, config=ApplicationConfig) -> EventPublisher:
    """
    Post-commit handlers for a settlement, bound to the request session

    Receipt generation runs before notification so the notification can
    reference the stored receipt.
    """
    uow = SqlAlchemyUnitOfWork(session)
    distribution_repo = SqlAlchemyDistributionRepository(session)

    publisher = EventPublisher()
    if config.RECEIPT_ENABLED:
        publisher.subscribe(
            ReceiptGenerationHandler(
                pdf_service=ReportLabPdfService(),
                receipt_store=LocalReceiptStore(config.RECEIPT_STORAGE_PATH),
                distribution_repo=distribution_repo,
                uow=uow,
                company_name=config.RECEIPT_COMPANY_NAME,
                company_address=config.RECEIPT_COMPANY_ADDRESS,
            )
        )
    publisher.subscribe(
        ReceiptNotificationHandler(
            notification_service=create_notification_service(config.RECEIPT_NOTIFICATION_WEBHOOK),
            distribution_repo=distribution_repo,
            uow=uow,
        )
    )
    return publisher
