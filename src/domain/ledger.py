"""Ledger entries and replay

In-memory form of the three settlement transaction kinds. A settlement
produces a sequence of entries; applying them in order to the balances the
customer had before the settlement yields the balances after it. Replaying a
customer's whole history from zero yields the stored balances.
"""

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Iterable, Union

from src.domain.money import ZERO


@dataclass(frozen=True)
class Balances:
    """Snapshot of a customer's two balances"""

    account_balance: Decimal = ZERO
    credit_balance: Decimal = ZERO


@dataclass(frozen=True)
class ChargeEntry:
    """Amount owed, debited from the account balance"""

    amount: Decimal


@dataclass(frozen=True)
class PaymentEntry:
    """
    Cash plus consumed credit covering a charge, credited to the account balance

    ``credit_consumed`` is the part of ``amount`` drawn from the credit pool;
    the credit balance drops by that much.
    """

    amount: Decimal
    credit_consumed: Decimal = ZERO


@dataclass(frozen=True)
class CreditEntry:
    """Overpayment moved into the credit pool"""

    amount: Decimal


LedgerEntry = Union[ChargeEntry, PaymentEntry, CreditEntry]


def apply_entry(balances: Balances, entry: LedgerEntry) -> Balances:
    if isinstance(entry, ChargeEntry):
        return replace(balances, account_balance=balances.account_balance - entry.amount)
    if isinstance(entry, PaymentEntry):
        return Balances(
            account_balance=balances.account_balance + entry.amount,
            credit_balance=balances.credit_balance - entry.credit_consumed,
        )
    if isinstance(entry, CreditEntry):
        return replace(balances, credit_balance=balances.credit_balance + entry.amount)
    raise TypeError(f"Unhandled ledger entry type: {type(entry).__name__}")


def replay(start: Balances, entries: Iterable[LedgerEntry]) -> Balances:
    balances = start
    for entry in entries:
        balances = apply_entry(balances, entry)
    return balances
