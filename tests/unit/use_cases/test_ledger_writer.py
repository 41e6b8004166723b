"""Unit tests for ledger planning and writing"""

import json
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from src.app.use_cases.distribution.funding_resolver import resolve_funding
from src.app.use_cases.distribution.ledger_writer import LedgerWriter, plan_ledger
from src.domain.customer_account import CustomerAccount
from src.domain.distribution import Distribution, PaymentStatus
from src.domain.exceptions import ConcurrencyConflictError
from src.domain.ledger import Balances, replay
from src.domain.transaction import TransactionType

D = Decimal


def _plan(net, cash, credit, account, use_credit=False):
    balances = Balances(account_balance=account, credit_balance=credit)
    decision = resolve_funding(net, cash, credit, account, use_credit=use_credit)
    return decision, balances, plan_ledger(decision, balances)


class TestPlanLedger:
    def test_exact_payment_emits_charge_and_payment(self):
        _, _, plan = _plan(D("100.00"), D("100.00"), D("0.00"), D("875.00"))

        assert [t.transaction_type for t in plan.transactions] == [
            TransactionType.CHARGE,
            TransactionType.PAYMENT,
        ]
        assert [t.amount for t in plan.transactions] == [D("100.00"), D("100.00")]
        assert plan.balances_after == Balances(D("875.00"), D("0.00"))

    def test_overpayment_emits_credit_last(self):
        _, _, plan = _plan(D("100.00"), D("150.00"), D("0.00"), D("875.00"))

        types = [t.transaction_type for t in plan.transactions]
        assert types == [TransactionType.CHARGE, TransactionType.PAYMENT, TransactionType.CREDIT]
        credit = plan.transactions[2]
        assert credit.amount == D("50.00")
        assert credit.balance_before == D("0.00")
        assert credit.balance_after == D("50.00")
        assert plan.balances_after == Balances(D("875.00"), D("50.00"))

    def test_snapshots_chain(self):
        _, _, plan = _plan(D("100.00"), D("50.00"), D("0.00"), D("875.00"))

        charge, payment = plan.transactions
        assert (charge.balance_before, charge.balance_after) == (D("875.00"), D("775.00"))
        assert (payment.balance_before, payment.balance_after) == (D("775.00"), D("825.00"))

    def test_payment_metadata_records_credit(self):
        _, _, plan = _plan(D("150.00"), D("0.00"), D("200.00"), D("500.00"), use_credit=True)

        payment = plan.transactions[1]
        assert payment.metadata["credit_applied"] == "150.00"
        assert payment.metadata["cash_applied"] == "0.00"
        assert payment.metadata["credit_balance_before"] == "200.00"
        assert payment.metadata["credit_balance_after"] == "50.00"

    def test_full_write_off_emits_nothing(self):
        _, balances, plan = _plan(D("0.00"), D("0.00"), D("0.00"), D("875.00"))

        assert plan.transactions == []
        assert plan.balances_after == balances

    def test_unpaid_emits_charge_only(self):
        decision, _, plan = _plan(D("100.00"), D("0.00"), D("0.00"), D("0.00"))

        assert decision.payment_status == PaymentStatus.UNPAID
        assert [t.transaction_type for t in plan.transactions] == [TransactionType.CHARGE]
        assert plan.balances_after.account_balance == D("-100.00")

    @pytest.mark.parametrize(
        "net,cash,credit,account,use_credit",
        [
            (D("100.00"), D("100.00"), D("0.00"), D("875.00"), False),
            (D("100.00"), D("150.00"), D("0.00"), D("875.00"), False),
            (D("100.00"), D("50.00"), D("0.00"), D("875.00"), False),
            (D("150.00"), D("0.00"), D("200.00"), D("500.00"), True),
            (D("150.00"), D("0.00"), D("50.00"), D("500.00"), True),
            (D("75.00"), D("60.00"), D("0.00"), D("0.00"), False),
            (D("80.00"), D("100.00"), D("30.00"), D("-20.00"), True),
        ],
    )
    def test_balance_identities(self, net, cash, credit, account, use_credit):
        """
        Given: Any settlement
        When: Its ledger is planned
        Then: The account moves by -account_balance_applied, the credit pool
              by overpayment - credit_applied, and replay reproduces the result
        """
        decision, balances, plan = _plan(net, cash, credit, account, use_credit)

        after = plan.balances_after
        assert after.account_balance - balances.account_balance == -decision.account_balance_applied
        assert after.credit_balance - balances.credit_balance == decision.overpayment - decision.credit_applied
        assert replay(balances, plan.entries) == after
        assert all(t.amount > 0 for t in plan.transactions)


class TestLedgerWriter:
    @pytest.fixture
    def account_repo(self):
        repo = AsyncMock()
        repo.update_balances.return_value = True
        return repo

    @pytest.fixture
    def transaction_repo(self):
        repo = AsyncMock()
        repo.create.side_effect = lambda txn: txn
        return repo

    @pytest.fixture
    def account(self):
        return CustomerAccount(
            id=1,
            customer_id=7,
            account_balance=D("875.00"),
            credit_balance=D("0.00"),
            version=4,
        )

    @pytest.fixture
    def distribution(self):
        return Distribution(
            id=12,
            receipt_number="RCP202401150001",
            customer_id=7,
            distributed_by=3,
            total_amount=D("100.00"),
            net_amount=D("100.00"),
            amount_collected=D("150.00"),
            payment_status=PaymentStatus.PAID,
        )

    @pytest.mark.asyncio
    async def test_writes_balances_then_transactions(
        self, account_repo, transaction_repo, account, distribution
    ):
        # Arrange
        _, _, plan = _plan(D("100.00"), D("150.00"), D("0.00"), D("875.00"))
        writer = LedgerWriter(account_repo, transaction_repo)

        # Act
        created = await writer.write(account, plan, distribution, performed_by=3)

        # Assert
        account_repo.update_balances.assert_called_once_with(
            1,
            expected_version=4,
            account_balance=D("875.00"),
            credit_balance=D("50.00"),
        )
        assert len(created) == 3
        assert all(t.distribution_id == 12 for t in created)
        assert all(t.created_by == 3 for t in created)
        assert created[0].description == "Package distribution charge - Receipt #RCP202401150001"
        assert created[1].description == "Payment received for package distribution - Receipt #RCP202401150001"
        assert created[2].description == "Overpayment credit from package distribution - Receipt #RCP202401150001"
        assert json.loads(created[2].metadata_json)["package_distribution_id"] == 12

    @pytest.mark.asyncio
    async def test_version_mismatch_raises_conflict(
        self, account_repo, transaction_repo, account, distribution
    ):
        # Arrange
        account_repo.update_balances.return_value = False
        _, _, plan = _plan(D("100.00"), D("100.00"), D("0.00"), D("875.00"))
        writer = LedgerWriter(account_repo, transaction_repo)

        # Act & Assert
        with pytest.raises(ConcurrencyConflictError):
            await writer.write(account, plan, distribution, performed_by=3)
        transaction_repo.create.assert_not_called()
