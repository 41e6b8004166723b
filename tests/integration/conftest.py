from decimal import Decimal

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain  # noqa: F401  registers the tables on SQLModel.metadata
from src.adapter.db import register_immutability_listeners
from src.adapter.repositories.customer_account_repository import SqlAlchemyCustomerAccountRepository
from src.adapter.repositories.distribution_repository import SqlAlchemyDistributionRepository
from src.adapter.repositories.package_repository import SqlAlchemyPackageRepository
from src.adapter.repositories.transaction_repository import SqlAlchemyTransactionRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.distribution.distribute_packages import DistributePackages
from src.depends import get_session
from src.domain.customer_account import CustomerAccount
from src.domain.package import Package, PackageStatus


@pytest_asyncio.fixture(scope="function")
async def engine():
    """In-memory SQLite database, one per test"""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    register_immutability_listeners()

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    """Create a new database session for each test"""
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
async def seed_account(db_session):
    """Create a customer account with the given opening balances"""

    async def _seed(customer_id, account_balance="0.00", credit_balance="0.00"):
        account = await SqlAlchemyCustomerAccountRepository(db_session).create(
            CustomerAccount(
                customer_id=customer_id,
                account_balance=Decimal(account_balance),
                credit_balance=Decimal(credit_balance),
            )
        )
        await db_session.commit()
        return account

    return _seed


@pytest_asyncio.fixture
async def seed_package(db_session):
    """Create a package; fees default to zero, status to READY"""

    async def _seed(customer_id, freight_price=None, clearance_fee=None, storage_fee=None,
                    delivery_fee=None, status=PackageStatus.READY, tracking_number=None):
        package = Package(
            customer_id=customer_id,
            tracking_number=tracking_number or f"TRK-{customer_id}",
            freight_price=Decimal(freight_price) if freight_price is not None else None,
            clearance_fee=Decimal(clearance_fee) if clearance_fee is not None else None,
            storage_fee=Decimal(storage_fee) if storage_fee is not None else None,
            delivery_fee=Decimal(delivery_fee) if delivery_fee is not None else None,
            status=status,
        )
        db_session.add(package)
        await db_session.flush()
        await db_session.refresh(package)
        await db_session.commit()
        return package

    return _seed


@pytest_asyncio.fixture
async def distribute(db_session):
    """DistributePackages wired to the test session, without side effects"""
    return DistributePackages(
        SqlAlchemyUnitOfWork(db_session),
        SqlAlchemyPackageRepository(db_session),
        SqlAlchemyCustomerAccountRepository(db_session),
        SqlAlchemyTransactionRepository(db_session),
        SqlAlchemyDistributionRepository(db_session),
        retry_base_delay=0,
        retry_max_delay=0,
    )


@pytest_asyncio.fixture
async def client(db_session, tmp_path, monkeypatch):
    """Create test client with database session override"""
    from src.api.app import create_app
    from config import ApplicationConfig

    monkeypatch.setattr(ApplicationConfig, "RECEIPT_STORAGE_PATH", str(tmp_path / "receipts"))
    monkeypatch.setattr(ApplicationConfig, "RECEIPT_NOTIFICATION_WEBHOOK", None)

    app = create_app(ApplicationConfig)

    # Override the session dependency to use test session
    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
