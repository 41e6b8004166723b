"""Ledger Writer

Turns a FundingDecision into the ordered charge / payment / credit
transactions of a settlement and applies the matching balance changes.
Planning is pure; writing happens inside the caller's unit of work.
"""

import json
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List

from src.app.repositories.customer_account_repository import CustomerAccountRepository
from src.app.repositories.transaction_repository import TransactionRepository
from src.domain.customer_account import CustomerAccount
from src.domain.distribution import Distribution
from src.domain.exceptions import ConcurrencyConflictError
from src.domain.ledger import (
    Balances,
    ChargeEntry,
    CreditEntry,
    LedgerEntry,
    PaymentEntry,
    apply_entry,
)
from src.domain.money import ZERO
from src.domain.transaction import Transaction, TransactionType
from .funding_resolver import FundingDecision

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlannedTransaction:
    entry: LedgerEntry
    transaction_type: TransactionType
    amount: Decimal
    balance_before: Decimal
    balance_after: Decimal
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class LedgerPlan:
    balances_before: Balances
    balances_after: Balances
    transactions: List[PlannedTransaction]

    @property
    def entries(self) -> List[LedgerEntry]:
        return [planned.entry for planned in self.transactions]


def plan_ledger(decision: FundingDecision, balances: Balances) -> LedgerPlan:
    """
    Build the settlement's ledger entries

    Emission order, each skipped when its amount is zero:
    1. CHARGE net_amount against the account balance
    2. PAYMENT min(cash + credit_applied, net_amount) to the account balance;
       consumed credit leaves the credit balance and is recorded in metadata
    3. CREDIT overpayment to the credit balance

    The account balance moves by exactly -account_balance_applied.
    """
    planned: List[PlannedTransaction] = []
    current = balances

    if decision.net_amount > ZERO:
        entry = ChargeEntry(amount=decision.net_amount)
        after = apply_entry(current, entry)
        planned.append(
            PlannedTransaction(
                entry=entry,
                transaction_type=TransactionType.CHARGE,
                amount=entry.amount,
                balance_before=current.account_balance,
                balance_after=after.account_balance,
                metadata={"net_amount": str(decision.net_amount)},
            )
        )
        current = after

    payment_amount = decision.payment_amount
    if payment_amount > ZERO:
        entry = PaymentEntry(amount=payment_amount, credit_consumed=decision.credit_applied)
        after = apply_entry(current, entry)
        planned.append(
            PlannedTransaction(
                entry=entry,
                transaction_type=TransactionType.PAYMENT,
                amount=entry.amount,
                balance_before=current.account_balance,
                balance_after=after.account_balance,
                metadata={
                    "cash_applied": str(payment_amount - decision.credit_applied),
                    "credit_applied": str(decision.credit_applied),
                    "credit_balance_before": str(current.credit_balance),
                    "credit_balance_after": str(after.credit_balance),
                },
            )
        )
        current = after

    if decision.overpayment > ZERO:
        entry = CreditEntry(amount=decision.overpayment)
        after = apply_entry(current, entry)
        planned.append(
            PlannedTransaction(
                entry=entry,
                transaction_type=TransactionType.CREDIT,
                amount=entry.amount,
                balance_before=current.credit_balance,
                balance_after=after.credit_balance,
                metadata={
                    "amount_collected": str(decision.cash_tendered),
                    "overpayment": str(decision.overpayment),
                },
            )
        )
        current = after

    return LedgerPlan(balances_before=balances, balances_after=current, transactions=planned)


_DESCRIPTIONS = {
    TransactionType.CHARGE: "Package distribution charge - Receipt #{receipt}",
    TransactionType.PAYMENT: "Payment received for package distribution - Receipt #{receipt}",
    TransactionType.CREDIT: "Overpayment credit from package distribution - Receipt #{receipt}",
}


class LedgerWriter:
    """
    Persists a LedgerPlan

    Writes the balances with a compare-and-swap on the account version and
    appends the planned transactions. Does not commit: the caller's unit of
    work owns the transaction boundary.
    """

    def __init__(
        self,
        account_repo: CustomerAccountRepository,
        transaction_repo: TransactionRepository,
    ):
        self.account_repo = account_repo
        self.transaction_repo = transaction_repo

    async def write(
        self,
        account: CustomerAccount,
        plan: LedgerPlan,
        distribution: Distribution,
        performed_by: int,
    ) -> List[Transaction]:
        """
        Apply the plan to the customer's account

        Raises:
            ConcurrencyConflictError: the account changed since it was read
        """
        after = plan.balances_after
        swapped = await self.account_repo.update_balances(
            account.id,
            expected_version=account.version,
            account_balance=after.account_balance,
            credit_balance=after.credit_balance,
        )
        if not swapped:
            raise ConcurrencyConflictError(
                f"Balances of customer {account.customer_id} changed during settlement",
                reason=f"account_id={account.id}, expected_version={account.version}",
            )

        created: List[Transaction] = []
        for planned in plan.transactions:
            metadata = dict(planned.metadata)
            metadata["package_distribution_id"] = distribution.id
            transaction = Transaction(
                customer_id=account.customer_id,
                transaction_type=planned.transaction_type,
                amount=planned.amount,
                balance_before=planned.balance_before,
                balance_after=planned.balance_after,
                description=_DESCRIPTIONS[planned.transaction_type].format(
                    receipt=distribution.receipt_number
                ),
                distribution_id=distribution.id,
                created_by=performed_by,
                metadata_json=json.dumps(metadata),
            )
            created.append(await self.transaction_repo.create(transaction))

        logger.debug(
            f"Ledger written for customer {account.customer_id}: "
            f"{len(created)} transactions, "
            f"account {plan.balances_before.account_balance} -> {after.account_balance}, "
            f"credit {plan.balances_before.credit_balance} -> {after.credit_balance}"
        )
        return created
