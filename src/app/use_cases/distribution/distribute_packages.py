"""DistributePackages Use Case

Settles a batch of a customer's ready packages: totals the fees, funds the
net amount from cash, credit and the account balance, writes the ledger and
the distribution record atomically, then publishes post-commit side effects.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from libs.result import Result, Return, Error
from src.app.repositories.customer_account_repository import CustomerAccountRepository
from src.app.repositories.distribution_repository import DistributionRepository
from src.app.repositories.package_repository import PackageRepository
from src.app.repositories.transaction_repository import TransactionRepository
from src.app.services.event_publisher import DistributionCompleted, EventPublisher
from src.app.services.unit_of_work import UnitOfWork
from src.domain.distribution import Distribution, DistributionItem
from src.domain.exceptions import (
    ConcurrencyConflictError,
    CustomerAccountNotFoundError,
    PersistenceError,
    SettlementError,
    ValidationError,
)
from src.domain.ledger import Balances
from src.domain.money import ZERO, is_whole_cents, to_money
from src.domain.package import Package
from src.domain.transaction import Transaction
from .dtos import DistributeCommandDTO, DistributionResponseDTO
from .fee_aggregator import FeeAggregator
from .funding_resolver import FundingDecision, resolve_funding
from .ledger_writer import LedgerPlan, LedgerWriter, plan_ledger
from .mappers import to_distribution_response

logger = logging.getLogger(__name__)


@dataclass
class _Settlement:
    distribution: Distribution
    items: List[DistributionItem]
    transactions: List[Transaction]
    decision: FundingDecision
    plan: LedgerPlan


class DistributePackages:
    """
    Use Case: Settle and release a customer's packages

    Business Rules:
    1. cash_tendered >= 0 and 0 <= write_off <= total_amount
    2. All packages READY and owned by one customer
    3. Funding order: cash, then credit (if opted in), shortfall to account
    4. Overpayment goes to the credit balance
    5. Atomic: distribution, items, transactions, balances and package
       status commit together or not at all
    6. Concurrent settlements for the same customer are serialized
       (row lock + version check); conflicts are retried with backoff
    7. Receipt and notification run after commit and never fail the call

    Flow:
    1. Validate command
    2. Aggregate fees (packages locked)
    3. Apply write-off
    4. Get account with lock
    5. Resolve funding and plan ledger
    6. Create distribution and items
    7. Write ledger (CAS balance update + transactions)
    8. Mark packages delivered
    9. Commit
    10. Publish DistributionCompleted
    """

    def __init__(
        self,
        uow: UnitOfWork,
        package_repo: PackageRepository,
        account_repo: CustomerAccountRepository,
        transaction_repo: TransactionRepository,
        distribution_repo: DistributionRepository,
        event_publisher: Optional[EventPublisher] = None,
        max_attempts: int = 3,
        retry_base_delay: float = 0.05,
        retry_max_delay: float = 1.0,
    ):
        self.uow = uow
        self.package_repo = package_repo
        self.account_repo = account_repo
        self.transaction_repo = transaction_repo
        self.distribution_repo = distribution_repo
        self.event_publisher = event_publisher
        self.max_attempts = max_attempts
        self.retry_base_delay = retry_base_delay
        self.retry_max_delay = retry_max_delay

        self.fee_aggregator = FeeAggregator(package_repo)
        self.ledger_writer = LedgerWriter(account_repo, transaction_repo)

    async def execute(self, command: DistributeCommandDTO) -> Result[DistributionResponseDTO]:
        """
        Execute package distribution

        Args:
            command: DistributeCommandDTO with package_ids, cash_tendered, performed_by

        Returns:
            Result[DistributionResponseDTO]: Success with distribution details or error
        """
        try:
            self._validate_command(command)

            settlement = None
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_attempts),
                wait=wait_exponential(multiplier=self.retry_base_delay, max=self.retry_max_delay),
                retry=retry_if_exception_type(ConcurrencyConflictError),
                before_sleep=self._log_retry,
                reraise=True,
            ):
                with attempt:
                    settlement = await self._settle(command)

        except SettlementError as e:
            logger.error(
                f"Package distribution failed [{e.code}]: {e.message} "
                f"(package_ids={command.package_ids}, cash_tendered={command.cash_tendered}, "
                f"performed_by={command.performed_by})"
            )
            return Return.err(Error(code=e.code, message=e.message, reason=e.reason))

        except Exception as e:
            logger.exception(
                f"Package distribution failed unexpectedly (package_ids={command.package_ids})"
            )
            return Return.err(
                Error(
                    code="DISTRIBUTION_FAILED",
                    message="Failed to distribute packages",
                    reason=str(e),
                )
            )

        self._log_distribution(settlement, command)
        failures = await self._publish(settlement, command)

        return Return.ok(
            to_distribution_response(
                settlement.distribution,
                settlement.items,
                settlement.transactions,
                balances_after=settlement.plan.balances_after,
                side_effect_failures=failures,
            )
        )

    def _validate_command(self, command: DistributeCommandDTO) -> None:
        if not command.package_ids:
            raise ValidationError("No packages provided for distribution")

        if command.cash_tendered is None or command.cash_tendered < ZERO:
            raise ValidationError(
                "Cash tendered cannot be negative",
                reason=f"cash_tendered={command.cash_tendered}",
            )

        if not is_whole_cents(command.cash_tendered):
            raise ValidationError(
                "Cash tendered must have at most 2 decimal places",
                reason=f"cash_tendered={command.cash_tendered}",
            )

        write_off = command.adjustments.write_off
        if write_off is not None and write_off < ZERO:
            raise ValidationError(
                "Write-off cannot be negative",
                reason=f"write_off={write_off}",
            )

        if write_off is not None and not is_whole_cents(write_off):
            raise ValidationError(
                "Write-off must have at most 2 decimal places",
                reason=f"write_off={write_off}",
            )

    @staticmethod
    def _resolve_write_off(write_off: Optional[Decimal], total_amount: Decimal) -> Decimal:
        write_off = to_money(write_off)
        if write_off > total_amount:
            raise ValidationError(
                f"Write-off {write_off} exceeds package total {total_amount}",
                reason=f"write_off={write_off}, total_amount={total_amount}",
            )
        return write_off

    async def _settle(self, command: DistributeCommandDTO) -> _Settlement:
        """One attempt at the atomic unit; rolls back on any failure"""
        try:
            # Steps 2-3: fees and write-off (no mutation yet)
            aggregate = await self.fee_aggregator.aggregate(command.package_ids, for_update=True)
            write_off = self._resolve_write_off(command.adjustments.write_off, aggregate.total_amount)
            net_amount = aggregate.total_amount - write_off

            # Step 4: lock the customer's balances
            account = await self.account_repo.get_by_customer_id(
                aggregate.customer_id, for_update=True
            )
            if not account:
                raise CustomerAccountNotFoundError(aggregate.customer_id)

            balances = Balances(
                account_balance=to_money(account.account_balance),
                credit_balance=to_money(account.credit_balance),
            )

            # Step 5: decide funding and plan the ledger
            decision = resolve_funding(
                net_amount=net_amount,
                cash_tendered=command.cash_tendered,
                credit_balance=balances.credit_balance,
                account_balance=balances.account_balance,
                use_credit=command.options.use_credit,
                use_account=command.options.use_account,
            )
            plan = plan_ledger(decision, balances)

            # Step 6: distribution record and per-package items
            distribution = await self.distribution_repo.create(
                Distribution(
                    receipt_number=await self.distribution_repo.generate_receipt_number(),
                    customer_id=aggregate.customer_id,
                    distributed_by=command.performed_by,
                    total_amount=aggregate.total_amount,
                    write_off_amount=write_off,
                    write_off_reason=command.adjustments.write_off_reason,
                    net_amount=net_amount,
                    amount_collected=decision.cash_tendered,
                    credit_applied=decision.credit_applied,
                    account_balance_applied=decision.account_balance_applied,
                    overpayment=decision.overpayment,
                    payment_status=decision.payment_status,
                    notes=command.adjustments.notes,
                )
            )
            items = [
                await self.distribution_repo.create_item(self._snapshot(distribution, package))
                for package in aggregate.packages
            ]

            # Step 7: balances and transactions
            transactions = await self.ledger_writer.write(
                account, plan, distribution, command.performed_by
            )

            # Step 8: terminal package state
            await self.package_repo.mark_distributed(command.package_ids)

            # Step 9: commit everything at once
            await self.uow.commit()

        except SettlementError:
            await self.uow.rollback()
            raise
        except IntegrityError as e:
            # Unique receipt number or constraint race with a concurrent settlement
            await self.uow.rollback()
            raise ConcurrencyConflictError(
                "Concurrent settlement wrote conflicting rows",
                reason=str(getattr(e, "orig", e)),
            ) from e
        except SQLAlchemyError as e:
            await self.uow.rollback()
            raise PersistenceError("Failed to persist distribution", reason=str(e)) from e
        except Exception:
            await self.uow.rollback()
            raise

        return _Settlement(
            distribution=distribution,
            items=items,
            transactions=transactions,
            decision=decision,
            plan=plan,
        )

    @staticmethod
    def _snapshot(distribution: Distribution, package: Package) -> DistributionItem:
        return DistributionItem(
            distribution_id=distribution.id,
            package_id=package.id,
            freight_price=to_money(package.freight_price),
            clearance_fee=to_money(package.clearance_fee),
            storage_fee=to_money(package.storage_fee),
            delivery_fee=to_money(package.delivery_fee),
            total_cost=package.total_cost,
        )

    async def _publish(self, settlement: _Settlement, command: DistributeCommandDTO) -> List[str]:
        if self.event_publisher is None:
            return []
        event = DistributionCompleted(
            distribution=settlement.distribution,
            items=tuple(settlement.items),
            package_ids=tuple(command.package_ids),
        )
        return await self.event_publisher.publish(event)

    @staticmethod
    def _log_retry(retry_state) -> None:
        logger.warning(
            f"Settlement conflict, retrying (attempt {retry_state.attempt_number}): "
            f"{retry_state.outcome.exception()}"
        )

    @staticmethod
    def _log_distribution(settlement: _Settlement, command: DistributeCommandDTO) -> None:
        distribution = settlement.distribution
        logger.info(
            f"Package distribution completed: distribution_id={distribution.id}, "
            f"receipt_number={distribution.receipt_number}, "
            f"customer_id={distribution.customer_id}, "
            f"distributed_by={distribution.distributed_by}, "
            f"package_ids={command.package_ids}, "
            f"net_amount={distribution.net_amount}, "
            f"amount_collected={distribution.amount_collected}, "
            f"credit_applied={distribution.credit_applied}, "
            f"account_balance_applied={distribution.account_balance_applied}, "
            f"payment_status={distribution.payment_status.value}"
        )
