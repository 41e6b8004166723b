"""Integration tests for DistributePackages against a real database"""

import pytest
from decimal import Decimal

from src.adapter.repositories.customer_account_repository import SqlAlchemyCustomerAccountRepository
from src.adapter.repositories.distribution_repository import SqlAlchemyDistributionRepository
from src.adapter.repositories.package_repository import SqlAlchemyPackageRepository
from src.adapter.repositories.transaction_repository import SqlAlchemyTransactionRepository
from src.app.use_cases.distribution.dtos import (
    AdjustmentsDTO,
    BalanceOptionsDTO,
    DistributeCommandDTO,
)
from src.app.use_cases.distribution.reconcile_ledger import ReconcileLedger
from src.domain.package import PackageStatus

D = Decimal


def _command(package_ids, cash, use_credit=False, write_off=None):
    return DistributeCommandDTO(
        package_ids=package_ids,
        cash_tendered=D(cash),
        performed_by=3,
        options=BalanceOptionsDTO(use_credit=use_credit),
        adjustments=AdjustmentsDTO(write_off=D(write_off) if write_off else None),
    )


class TestDistributePackagesIntegration:
    """Settlement scenarios end to end"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "opening_account,opening_credit,fees,cash,use_credit,write_off,"
        "expected_account,expected_credit,expected_types,expected_status",
        [
            ("875.00", "0.00", "100.00", "100.00", False, None,
             "875.00", "0.00", ["charge", "payment"], "paid"),
            ("875.00", "0.00", "100.00", "150.00", False, None,
             "875.00", "50.00", ["charge", "payment", "credit"], "paid"),
            ("875.00", "0.00", "100.00", "50.00", False, None,
             "825.00", "0.00", ["charge", "payment"], "partial"),
            ("500.00", "200.00", "150.00", "0.00", True, None,
             "500.00", "50.00", ["charge", "payment"], "paid"),
            ("500.00", "50.00", "150.00", "0.00", True, None,
             "400.00", "0.00", ["charge", "payment"], "partial"),
            ("0.00", "0.00", "100.00", "60.00", False, "25.00",
             "-15.00", "0.00", ["charge", "payment"], "partial"),
        ],
    )
    async def test_settlement_scenarios(
        self, db_session, seed_account, seed_package, distribute,
        opening_account, opening_credit, fees, cash, use_credit, write_off,
        expected_account, expected_credit, expected_types, expected_status,
    ):
        # Arrange
        await seed_account(7, opening_account, opening_credit)
        package = await seed_package(7, freight_price=fees)

        # Act
        result = await distribute.execute(
            _command([package.id], cash, use_credit=use_credit, write_off=write_off)
        )

        # Assert
        assert result.is_ok(), result.error
        response = result.value
        assert response.payment_status == expected_status
        assert response.account_balance == D(expected_account)
        assert response.credit_balance == D(expected_credit)
        assert [t.transaction_type for t in response.transactions] == expected_types

        account = await SqlAlchemyCustomerAccountRepository(db_session).get_by_customer_id(7)
        assert account.account_balance == D(expected_account)
        assert account.credit_balance == D(expected_credit)
        assert account.version == 2

    @pytest.mark.asyncio
    async def test_write_off_reduces_net_amount(self, seed_account, seed_package, distribute):
        await seed_account(7)
        package = await seed_package(7, freight_price="100.00")

        result = await distribute.execute(_command([package.id], "60.00", write_off="25.00"))

        response = result.value
        assert response.total_amount == D("100.00")
        assert response.write_off_amount == D("25.00")
        assert response.net_amount == D("75.00")
        assert response.account_balance_applied == D("15.00")

    @pytest.mark.asyncio
    async def test_records_distribution_items_and_delivers_packages(
        self, db_session, seed_account, seed_package, distribute
    ):
        """
        Given: Two ready packages with mixed fee components
        When: They are settled together
        Then: One distribution, one fee snapshot per package, packages delivered
        """
        # Arrange
        await seed_account(7, "875.00")
        first = await seed_package(7, freight_price="60.00", clearance_fee="25.00", tracking_number="A")
        second = await seed_package(7, storage_fee="5.00", delivery_fee="10.00", tracking_number="B")

        # Act
        result = await distribute.execute(_command([first.id, second.id], "100.00"))

        # Assert
        response = result.value
        assert response.total_amount == D("100.00")
        assert response.receipt_number.startswith("RCP")
        assert len(response.receipt_number) == len("RCP") + 8 + 4

        distribution_repo = SqlAlchemyDistributionRepository(db_session)
        items = await distribution_repo.get_items(response.distribution_id)
        assert [item.package_id for item in items] == [first.id, second.id]
        assert [item.total_cost for item in items] == [D("85.00"), D("15.00")]

        packages = await SqlAlchemyPackageRepository(db_session).get_by_ids([first.id, second.id])
        for package in packages:
            await db_session.refresh(package)
        assert {package.status for package in packages} == {PackageStatus.DELIVERED}

        transactions = await SqlAlchemyTransactionRepository(db_session).get_by_distribution_id(
            response.distribution_id
        )
        assert all(t.distribution_id == response.distribution_id for t in transactions)
        assert transactions[0].details["package_distribution_id"] == response.distribution_id

    @pytest.mark.asyncio
    async def test_second_settlement_of_same_package_is_rejected(
        self, db_session, seed_account, seed_package, distribute
    ):
        await seed_account(7, "875.00")
        package = await seed_package(7, freight_price="100.00")
        first = await distribute.execute(_command([package.id], "100.00"))
        assert first.is_ok()

        second = await distribute.execute(_command([package.id], "100.00"))

        assert second.is_err()
        assert second.error.code == "INELIGIBLE_PACKAGE"
        transactions, total = await SqlAlchemyTransactionRepository(db_session).get_by_customer_id(7)
        assert total == 2

    @pytest.mark.asyncio
    async def test_missing_account_writes_nothing(self, db_session, seed_package, distribute):
        package = await seed_package(8, freight_price="100.00")

        result = await distribute.execute(_command([package.id], "100.00"))

        assert result.error.code == "CUSTOMER_ACCOUNT_NOT_FOUND"
        await db_session.refresh(package)
        assert package.status == PackageStatus.READY
        distributions, total = await SqlAlchemyDistributionRepository(db_session).get_by_customer_id(8)
        assert total == 0

    @pytest.mark.asyncio
    async def test_write_off_above_total_rejected(self, db_session, seed_account, seed_package, distribute):
        await seed_account(7)
        package = await seed_package(7, freight_price="100.00")

        result = await distribute.execute(_command([package.id], "0.00", write_off="120.00"))

        assert result.error.code == "VALIDATION_ERROR"
        await db_session.refresh(package)
        assert package.status == PackageStatus.READY

    @pytest.mark.asyncio
    async def test_receipt_numbers_increment(self, seed_account, seed_package, distribute):
        await seed_account(7)
        first = await seed_package(7, freight_price="10.00", tracking_number="A")
        second = await seed_package(7, freight_price="10.00", tracking_number="B")

        one = await distribute.execute(_command([first.id], "10.00"))
        two = await distribute.execute(_command([second.id], "10.00"))

        assert int(two.value.receipt_number[-4:]) == int(one.value.receipt_number[-4:]) + 1

    @pytest.mark.asyncio
    async def test_ledger_replays_to_stored_balances(
        self, db_session, seed_account, seed_package, distribute
    ):
        """
        Given: A zero-opened account settled several times with overpayment,
               shortfall and credit use
        When: The ledger is reconciled
        Then: Replaying the transactions reproduces the stored balances
        """
        # Arrange
        await seed_account(7)
        first = await seed_package(7, freight_price="100.00", tracking_number="A")
        second = await seed_package(7, freight_price="80.00", tracking_number="B")
        third = await seed_package(7, freight_price="40.00", tracking_number="C")

        # Act
        assert (await distribute.execute(_command([first.id], "150.00"))).is_ok()
        assert (await distribute.execute(_command([second.id], "0.00", use_credit=True))).is_ok()
        assert (await distribute.execute(_command([third.id], "10.00"))).is_ok()

        result = await ReconcileLedger(
            SqlAlchemyCustomerAccountRepository(db_session),
            SqlAlchemyTransactionRepository(db_session),
        ).execute()

        # Assert
        account = await SqlAlchemyCustomerAccountRepository(db_session).get_by_customer_id(7)
        assert account.credit_balance == D("0.00")
        assert account.account_balance == D("-60.00")
        assert result.value.total_accounts_checked == 1
        assert result.value.discrepancies_found == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "opening_account,opening_credit,fees,cash,use_credit",
        [
            ("875.00", "0.00", "100.00", "100.00", False),
            ("875.00", "0.00", "100.00", "150.00", False),
            ("875.00", "0.00", "100.00", "50.00", False),
            ("500.00", "200.00", "150.00", "0.00", True),
            ("500.00", "50.00", "150.00", "0.00", True),
        ],
    )
    async def test_opening_balances_reconcile(
        self, db_session, seed_account, seed_package, distribute,
        opening_account, opening_credit, fees, cash, use_credit,
    ):
        """
        Given: An account opened with non-zero balances outside the ledger
        When: Two settlements run and the ledger is reconciled
        Then: No discrepancy is reported
        """
        # Arrange
        await seed_account(7, opening_account, opening_credit)
        first = await seed_package(7, freight_price=fees, tracking_number="A")
        second = await seed_package(7, freight_price="20.00", tracking_number="B")

        # Act
        assert (await distribute.execute(_command([first.id], cash, use_credit=use_credit))).is_ok()
        assert (await distribute.execute(_command([second.id], "25.00"))).is_ok()

        result = await ReconcileLedger(
            SqlAlchemyCustomerAccountRepository(db_session),
            SqlAlchemyTransactionRepository(db_session),
        ).execute()

        # Assert
        assert result.value.total_accounts_checked == 1
        assert result.value.discrepancies == []

    @pytest.mark.asyncio
    async def test_tampered_balance_detected(self, db_session, seed_account, seed_package, distribute):
        account = await seed_account(7, "875.00")
        package = await seed_package(7, freight_price="100.00")
        assert (await distribute.execute(_command([package.id], "100.00"))).is_ok()

        await db_session.refresh(account)
        repo = SqlAlchemyCustomerAccountRepository(db_session)
        assert await repo.update_balances(account.id, account.version, D("900.00"), D("0.00"))
        await db_session.commit()

        result = await ReconcileLedger(repo, SqlAlchemyTransactionRepository(db_session)).execute()

        assert result.value.discrepancies_found == 1
        assert result.value.discrepancies[0].replayed_account_balance == D("875.00")
        assert result.value.discrepancies[0].stored_account_balance == D("900.00")


class TestCustomerAccountVersioning:
    @pytest.mark.asyncio
    async def test_stale_version_does_not_update(self, db_session, seed_account):
        account = await seed_account(7, "100.00")
        repo = SqlAlchemyCustomerAccountRepository(db_session)

        assert await repo.update_balances(account.id, 1, D("90.00"), D("0.00")) is True
        assert await repo.update_balances(account.id, 1, D("80.00"), D("0.00")) is False
        await db_session.commit()

        await db_session.refresh(account)
        assert account.account_balance == D("90.00")
        assert account.version == 2
