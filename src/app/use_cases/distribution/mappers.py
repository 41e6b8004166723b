"""Entity to DTO conversion shared by the distribution use cases"""

from typing import List, Optional, Sequence

from src.domain.distribution import Distribution, DistributionItem
from src.domain.ledger import Balances
from src.domain.transaction import Transaction
from .dtos import (
    DistributionItemDTO,
    DistributionResponseDTO,
    DistributionSummaryDTO,
    TransactionDTO,
)


def _enum_value(value) -> str:
    return value.value if hasattr(value, "value") else value


def to_transaction_dto(transaction: Transaction) -> TransactionDTO:
    return TransactionDTO(
        id=transaction.id,
        customer_id=transaction.customer_id,
        transaction_type=_enum_value(transaction.transaction_type),
        amount=transaction.amount,
        balance_before=transaction.balance_before,
        balance_after=transaction.balance_after,
        description=transaction.description,
        distribution_id=transaction.distribution_id,
        created_by=transaction.created_by,
        metadata=transaction.details or None,
        created_at=transaction.created_at,
    )


def to_item_dto(item: DistributionItem) -> DistributionItemDTO:
    return DistributionItemDTO(
        package_id=item.package_id,
        freight_price=item.freight_price,
        clearance_fee=item.clearance_fee,
        storage_fee=item.storage_fee,
        delivery_fee=item.delivery_fee,
        total_cost=item.total_cost,
    )


def to_distribution_response(
    distribution: Distribution,
    items: Sequence[DistributionItem],
    transactions: Sequence[Transaction],
    balances_after: Optional[Balances] = None,
    side_effect_failures: Optional[List[str]] = None,
) -> DistributionResponseDTO:
    return DistributionResponseDTO(
        distribution_id=distribution.id,
        receipt_number=distribution.receipt_number,
        customer_id=distribution.customer_id,
        distributed_by=distribution.distributed_by,
        distributed_at=distribution.distributed_at,
        total_amount=distribution.total_amount,
        write_off_amount=distribution.write_off_amount,
        write_off_reason=distribution.write_off_reason,
        net_amount=distribution.net_amount,
        amount_collected=distribution.amount_collected,
        credit_applied=distribution.credit_applied,
        account_balance_applied=distribution.account_balance_applied,
        overpayment=distribution.overpayment,
        payment_status=_enum_value(distribution.payment_status),
        notes=distribution.notes,
        receipt_path=distribution.receipt_path,
        items=[to_item_dto(item) for item in items],
        transactions=[to_transaction_dto(txn) for txn in transactions],
        account_balance=balances_after.account_balance if balances_after else None,
        credit_balance=balances_after.credit_balance if balances_after else None,
        side_effect_failures=side_effect_failures or [],
    )


def to_summary_dto(distribution: Distribution) -> DistributionSummaryDTO:
    return DistributionSummaryDTO(
        distribution_id=distribution.id,
        receipt_number=distribution.receipt_number,
        distributed_at=distribution.distributed_at,
        total_amount=distribution.total_amount,
        write_off_amount=distribution.write_off_amount,
        net_amount=distribution.net_amount,
        amount_collected=distribution.amount_collected,
        payment_status=_enum_value(distribution.payment_status),
        receipt_path=distribution.receipt_path,
    )
