"""Ledger reconciliation worker

Replays every customer's ledger on a schedule and logs accounts whose
stored balances no longer match it.

    python -m src.worker.ledger_reconciler --once
    python -m src.worker.ledger_reconciler --interval 3600
"""

import argparse
import asyncio
import logging
from datetime import datetime
from typing import List, Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.customer_account_repository import SqlAlchemyCustomerAccountRepository
from src.adapter.repositories.transaction_repository import SqlAlchemyTransactionRepository
from src.app.use_cases.distribution.dtos import ReconciliationResultDTO
from src.app.use_cases.distribution.reconcile_ledger import ReconcileLedger

logger = logging.getLogger(__name__)


class LedgerReconcilerWorker:
    def __init__(self, db_uri: Optional[str] = None):
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

    async def run_once(self) -> ReconciliationResultDTO:
        """Reconcile every account once; raises RuntimeError if the run itself fails"""
        if not ApplicationConfig.RECONCILIATION_ENABLED:
            logger.info("Ledger reconciliation is disabled, skipping")
            return ReconciliationResultDTO(
                total_accounts_checked=0,
                discrepancies_found=0,
                discrepancies=[],
                reconciliation_time=datetime.utcnow(),
                execution_time_ms=0,
            )

        async with self.async_session_factory() as session:
            result = await ReconcileLedger(
                account_repo=SqlAlchemyCustomerAccountRepository(session),
                transaction_repo=SqlAlchemyTransactionRepository(session),
            ).execute()

        if result.is_err():
            raise RuntimeError(f"Reconciliation failed: {result.error.message}")

        response = result.value
        for d in response.discrepancies:
            logger.error(
                f"Ledger drift for customer {d.customer_id} (account_id={d.account_id}): "
                f"account stored={d.stored_account_balance} replayed={d.replayed_account_balance}, "
                f"credit stored={d.stored_credit_balance} replayed={d.replayed_credit_balance}, "
                f"broken_links={d.broken_links}"
            )
        logger.info(
            f"Checked {response.total_accounts_checked} accounts, "
            f"found {response.discrepancies_found} discrepancies "
            f"in {response.execution_time_ms}ms"
        )
        return response

    async def run_forever(self, interval_seconds: int = 86400):
        logger.info(f"Starting ledger reconciliation every {interval_seconds}s")
        while True:
            try:
                await self.run_once()
            except Exception as e:
                logger.error(f"Reconciliation cycle failed: {e}")
            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        await self.engine.dispose()


async def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=ApplicationConfig.LOG_LEVEL.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Ledger Reconciliation Worker")
    parser.add_argument("--once", action="store_true", help="Run once and exit")
    parser.add_argument(
        "--interval", type=int, default=ApplicationConfig.RECONCILIATION_INTERVAL_SECONDS,
        help="Seconds between runs",
    )
    args = parser.parse_args(argv)

    worker = LedgerReconcilerWorker()
    try:
        if args.once:
            result = await worker.run_once()
            return 1 if result.discrepancies_found else 0
        await worker.run_forever(interval_seconds=args.interval)
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()
    return 0


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
