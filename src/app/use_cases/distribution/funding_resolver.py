"""Funding Resolver

Decides how a settlement's net amount is funded: cash first, then opted-in
store credit, with any remaining shortfall always absorbed by the account
balance. Pure: no I/O, no mutation.
"""

from dataclasses import dataclass
from decimal import Decimal

from src.domain.distribution import PaymentStatus
from src.domain.money import ZERO, clamp_non_negative, to_money

# The use_account option is part of the call surface but does not gate
# anything: a shortfall is always charged to the account balance, which may
# go negative. Whether the flag was meant to gate this backstop is unresolved,
# so the flag is accepted and ignored rather than silently given meaning.
ACCOUNT_BACKSTOP_ALWAYS_APPLIED = True


@dataclass(frozen=True)
class FundingDecision:
    net_amount: Decimal
    cash_tendered: Decimal
    credit_applied: Decimal
    account_balance_applied: Decimal
    overpayment: Decimal
    payment_status: PaymentStatus

    @property
    def covered_immediately(self) -> Decimal:
        """Cash plus applied credit"""
        return self.cash_tendered + self.credit_applied

    @property
    def payment_amount(self) -> Decimal:
        """Part of the immediate cover that pays the charge"""
        return min(self.covered_immediately, self.net_amount)


def resolve_funding(
    net_amount: Decimal,
    cash_tendered: Decimal,
    credit_balance: Decimal,
    account_balance: Decimal,
    use_credit: bool = False,
    use_account: bool = False,
) -> FundingDecision:
    """
    Split a settlement across cash, credit and the account balance

    Order:
    1. credit_applied = min(credit_balance, max(net - cash, 0)) when use_credit
    2. covered = cash + credit_applied
    3. shortfall = max(net - covered, 0), charged to the account, uncapped
    4. overpayment = max(covered - net, 0)
    5. status: unpaid if nothing covered a positive net, paid if covered >= net,
       partial otherwise

    account_balance and use_account do not affect the result (see
    ACCOUNT_BACKSTOP_ALWAYS_APPLIED); they are accepted so callers pass the
    full customer state.
    """
    net_amount = to_money(net_amount)
    cash_tendered = to_money(cash_tendered)
    available_credit = clamp_non_negative(to_money(credit_balance))

    if use_credit:
        still_owed = clamp_non_negative(net_amount - cash_tendered)
        credit_applied = min(available_credit, still_owed)
    else:
        credit_applied = ZERO

    covered = cash_tendered + credit_applied
    shortfall = clamp_non_negative(net_amount - covered)
    overpayment = clamp_non_negative(covered - net_amount)

    if covered == ZERO and shortfall == net_amount and net_amount > ZERO:
        payment_status = PaymentStatus.UNPAID
    elif covered >= net_amount:
        payment_status = PaymentStatus.PAID
    else:
        payment_status = PaymentStatus.PARTIAL

    return FundingDecision(
        net_amount=net_amount,
        cash_tendered=cash_tendered,
        credit_applied=credit_applied,
        account_balance_applied=shortfall,
        overpayment=overpayment,
        payment_status=payment_status,
    )
