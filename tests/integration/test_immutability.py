"""Integration tests for append-only settlement records"""

import pytest
import pytest_asyncio
from decimal import Decimal

from src.adapter.repositories.distribution_repository import SqlAlchemyDistributionRepository
from src.adapter.repositories.transaction_repository import SqlAlchemyTransactionRepository
from src.app.use_cases.distribution.dtos import DistributeCommandDTO
from src.domain.exceptions import ImmutabilityViolationError


@pytest_asyncio.fixture
async def settled(seed_account, seed_package, distribute):
    await seed_account(7, "875.00")
    package = await seed_package(7, freight_price="100.00")
    result = await distribute.execute(
        DistributeCommandDTO(package_ids=[package.id], cash_tendered=Decimal("150.00"), performed_by=3)
    )
    return result.value


class TestTransactionImmutability:
    @pytest.mark.asyncio
    async def test_update_blocked(self, db_session, settled):
        transaction = await SqlAlchemyTransactionRepository(db_session).get_by_id(
            settled.transactions[0].id
        )
        transaction.amount = Decimal("1.00")
        db_session.add(transaction)

        with pytest.raises(ImmutabilityViolationError) as exc_info:
            await db_session.flush()

        assert exc_info.value.entity_type == "Transaction"
        await db_session.rollback()

    @pytest.mark.asyncio
    async def test_delete_blocked(self, db_session, settled):
        transaction = await SqlAlchemyTransactionRepository(db_session).get_by_id(
            settled.transactions[0].id
        )
        await db_session.delete(transaction)

        with pytest.raises(ImmutabilityViolationError):
            await db_session.flush()

        await db_session.rollback()


class TestDistributionImmutability:
    @pytest.mark.asyncio
    async def test_settled_amounts_frozen(self, db_session, settled):
        distribution = await SqlAlchemyDistributionRepository(db_session).get_by_id(
            settled.distribution_id
        )
        distribution.net_amount = Decimal("0.00")
        db_session.add(distribution)

        with pytest.raises(ImmutabilityViolationError) as exc_info:
            await db_session.flush()

        assert exc_info.value.entity_type == "Distribution"
        await db_session.rollback()

    @pytest.mark.asyncio
    async def test_receipt_fields_may_be_filled_in(self, db_session, settled):
        """
        Given: A committed distribution
        When: The receipt path and email flag are recorded
        Then: The write succeeds
        """
        repo = SqlAlchemyDistributionRepository(db_session)

        await repo.attach_receipt(settled.distribution_id, "/receipts/r.pdf")
        await repo.mark_email_sent(settled.distribution_id)
        await db_session.commit()

        distribution = await repo.get_by_id(settled.distribution_id)
        assert distribution.receipt_path == "/receipts/r.pdf"
        assert distribution.email_sent is True

    @pytest.mark.asyncio
    async def test_item_snapshot_frozen(self, db_session, settled):
        items = await SqlAlchemyDistributionRepository(db_session).get_items(settled.distribution_id)
        items[0].total_cost = Decimal("0.00")
        db_session.add(items[0])

        with pytest.raises(ImmutabilityViolationError) as exc_info:
            await db_session.flush()

        assert exc_info.value.entity_type == "DistributionItem"
        await db_session.rollback()
