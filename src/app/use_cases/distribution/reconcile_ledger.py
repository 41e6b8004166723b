"""ReconcileLedger Use Case

Replays every customer's transaction history and compares the result with
the stored balances to detect drift.
"""

import logging
import time
from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple

from libs.result import Result, Return, Error
from src.app.repositories.customer_account_repository import CustomerAccountRepository
from src.app.repositories.transaction_repository import TransactionRepository
from src.domain.ledger import Balances, replay
from src.domain.money import to_money
from .dtos import LedgerDiscrepancyDTO, ReconciliationResultDTO

logger = logging.getLogger(__name__)

Snapshot = Tuple[Decimal, Decimal]


def follow_chain(snapshots: Iterable[Optional[Snapshot]]) -> Tuple[Optional[Decimal], int]:
    """
    Walk one balance pool's (before, after) snapshots in ledger order

    Returns:
        The pool's opening balance (None when no row records the pool) and
        the number of rows whose before differs from the previous row's after
    """
    opening: Optional[Decimal] = None
    previous_after: Optional[Decimal] = None
    broken_links = 0

    for snapshot in snapshots:
        if snapshot is None:
            continue
        before, after = snapshot
        if opening is None:
            opening = before
        elif before != previous_after:
            broken_links += 1
        previous_after = after

    return opening, broken_links


class ReconcileLedger:
    """
    Use Case: Reconcile customer balances against the transaction ledger

    Business Rules:
    1. Each pool starts from the opening balance the ledger recorded: the
       account pool from the first charge or payment, the credit pool from
       the first payment's credit snapshot or the first credit row
    2. Every row must continue from the previous row of the same pool
    3. Replaying the history from the opening balances must reproduce the
       stored balances
    4. An account without transactions has nothing to check
    5. Does NOT modify any data (read-only reconciliation)
    """

    def __init__(
        self,
        account_repo: CustomerAccountRepository,
        transaction_repo: TransactionRepository,
    ):
        self.account_repo = account_repo
        self.transaction_repo = transaction_repo

    async def execute(self) -> Result[ReconciliationResultDTO]:
        """
        Execute ledger reconciliation

        Returns:
            Result[ReconciliationResultDTO]: Reconciliation result with any discrepancies
        """
        start_time = time.time()
        reconciliation_time = datetime.utcnow()

        try:
            logger.info("Starting customer ledger reconciliation")

            accounts = await self.account_repo.get_all()
            total_accounts = len(accounts)

            logger.info(f"Found {total_accounts} customer accounts to reconcile")

            discrepancies: List[LedgerDiscrepancyDTO] = []

            for account in accounts:
                history = await self.transaction_repo.get_history(account.customer_id)
                if not history:
                    continue

                stored_account = to_money(account.account_balance)
                stored_credit = to_money(account.credit_balance)

                account_opening, account_breaks = follow_chain(t.account_snapshot for t in history)
                credit_opening, credit_breaks = follow_chain(t.credit_snapshot for t in history)

                # A pool no row records was never moved by the ledger
                opening = Balances(
                    account_balance=stored_account if account_opening is None else account_opening,
                    credit_balance=stored_credit if credit_opening is None else credit_opening,
                )
                replayed = replay(opening, (txn.to_entry() for txn in history))
                broken_links = account_breaks + credit_breaks

                if (
                    stored_account != replayed.account_balance
                    or stored_credit != replayed.credit_balance
                    or broken_links
                ):
                    discrepancies.append(
                        LedgerDiscrepancyDTO(
                            customer_id=account.customer_id,
                            account_id=account.id,
                            stored_account_balance=stored_account,
                            replayed_account_balance=replayed.account_balance,
                            stored_credit_balance=stored_credit,
                            replayed_credit_balance=replayed.credit_balance,
                            transaction_count=len(history),
                            broken_links=broken_links,
                        )
                    )

                    logger.warning(
                        f"Discrepancy found for customer {account.customer_id} "
                        f"(account_id={account.id}): "
                        f"account_balance={stored_account} (replayed {replayed.account_balance}), "
                        f"credit_balance={stored_credit} (replayed {replayed.credit_balance}), "
                        f"broken_links={broken_links}, transactions={len(history)}"
                    )

            execution_time_ms = int((time.time() - start_time) * 1000)

            response = ReconciliationResultDTO(
                total_accounts_checked=total_accounts,
                discrepancies_found=len(discrepancies),
                discrepancies=discrepancies,
                reconciliation_time=reconciliation_time,
                execution_time_ms=execution_time_ms,
            )

            if discrepancies:
                logger.warning(
                    f"Reconciliation complete. Found {len(discrepancies)} discrepancies "
                    f"out of {total_accounts} accounts in {execution_time_ms}ms"
                )
            else:
                logger.info(
                    f"Reconciliation complete. All {total_accounts} accounts balanced "
                    f"in {execution_time_ms}ms"
                )

            return Return.ok(response)

        except Exception as e:
            logger.error(f"Ledger reconciliation failed: {e}")
            return Return.err(
                Error(
                    code="RECONCILIATION_FAILED",
                    message="Failed to reconcile customer ledger",
                    reason=str(e),
                )
            )
