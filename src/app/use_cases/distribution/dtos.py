"""Data Transfer Objects for Distribution Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional, Dict, Any, List
from pydantic import BaseModel, Field


class BalanceOptionsDTO(BaseModel):
    """
    Which stored balances the customer opted to use

    use_account is accepted but has no effect: the account balance always
    absorbs any shortfall.
    """

    use_credit: bool = Field(
        default=False,
        description="Draw on the customer's credit balance"
    )

    use_account: bool = Field(
        default=False,
        description="Currently inert; the account balance is always the backstop"
    )


class AdjustmentsDTO(BaseModel):
    """Optional discount and notes for a settlement"""

    write_off: Optional[Decimal] = Field(
        default=None,
        description="Discount subtracted from the package total (0 <= write_off <= total)"
    )

    write_off_reason: Optional[str] = Field(
        default=None,
        description="Reason for the write-off"
    )

    notes: Optional[str] = Field(
        default=None,
        description="Free-form admin notes"
    )


class DistributeCommandDTO(BaseModel):
    """
    Command DTO for settling a batch of packages

    Used as input to DistributePackages use case.
    """

    package_ids: List[int] = Field(
        ...,
        description="Packages to release (all of one customer, all READY)"
    )

    cash_tendered: Decimal = Field(
        ...,
        description="Cash collected at the counter (must be >= 0)"
    )

    performed_by: int = Field(
        ...,
        description="Admin performing the settlement"
    )

    options: BalanceOptionsDTO = Field(
        default_factory=BalanceOptionsDTO,
        description="Balance opt-ins"
    )

    adjustments: AdjustmentsDTO = Field(
        default_factory=AdjustmentsDTO,
        description="Write-off and notes"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "package_ids": [41, 42],
                "cash_tendered": "60.00",
                "performed_by": 3,
                "options": {"use_credit": True, "use_account": False},
                "adjustments": {"write_off": "25.00", "write_off_reason": "Loyalty discount"}
            }
        }


class TransactionDTO(BaseModel):
    """Single ledger transaction"""

    id: int
    customer_id: int
    transaction_type: str = Field(..., description="charge, payment or credit")
    amount: Decimal
    balance_before: Decimal
    balance_after: Decimal
    description: str
    distribution_id: Optional[int] = None
    created_by: int
    metadata: Optional[Dict[str, Any]] = None
    created_at: datetime


class DistributionItemDTO(BaseModel):
    """Fee snapshot of one released package"""

    package_id: int
    freight_price: Decimal
    clearance_fee: Decimal
    storage_fee: Decimal
    delivery_fee: Decimal
    total_cost: Decimal


class DistributionResponseDTO(BaseModel):
    """
    Response DTO for a settlement

    Returned by DistributePackages and GetDistribution.
    """

    distribution_id: int
    receipt_number: str
    customer_id: int
    distributed_by: int
    distributed_at: datetime
    total_amount: Decimal
    write_off_amount: Decimal
    write_off_reason: Optional[str] = None
    net_amount: Decimal
    amount_collected: Decimal
    credit_applied: Decimal
    account_balance_applied: Decimal
    overpayment: Decimal
    payment_status: str = Field(..., description="paid, partial or unpaid")
    notes: Optional[str] = None
    receipt_path: Optional[str] = None
    items: List[DistributionItemDTO] = Field(default_factory=list)
    transactions: List[TransactionDTO] = Field(default_factory=list)
    account_balance: Optional[Decimal] = Field(
        default=None,
        description="Customer account balance after the settlement"
    )
    credit_balance: Optional[Decimal] = Field(
        default=None,
        description="Customer credit balance after the settlement"
    )
    side_effect_failures: List[str] = Field(
        default_factory=list,
        description="Post-commit handlers (receipt, notification) that failed"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "distribution_id": 12,
                "receipt_number": "RCP202401150001",
                "customer_id": 7,
                "distributed_by": 3,
                "distributed_at": "2024-01-15T10:00:00Z",
                "total_amount": "100.00",
                "write_off_amount": "0.00",
                "net_amount": "100.00",
                "amount_collected": "150.00",
                "credit_applied": "0.00",
                "account_balance_applied": "0.00",
                "overpayment": "50.00",
                "payment_status": "paid",
                "account_balance": "875.00",
                "credit_balance": "50.00",
                "side_effect_failures": []
            }
        }


class DistributionSummaryDTO(BaseModel):
    """Row of a customer's distribution history"""

    distribution_id: int
    receipt_number: str
    distributed_at: datetime
    total_amount: Decimal
    write_off_amount: Decimal
    net_amount: Decimal
    amount_collected: Decimal
    payment_status: str
    receipt_path: Optional[str] = None


class ListDistributionsResponseDTO(BaseModel):
    distributions: List[DistributionSummaryDTO]
    total: int
    limit: int
    offset: int


class ListTransactionsResponseDTO(BaseModel):
    transactions: List[TransactionDTO]
    total: int
    limit: int
    offset: int


class CustomerBalanceResponseDTO(BaseModel):
    """
    Response DTO for get balance operation

    Returned by GetCustomerBalance use case.
    """

    customer_id: int
    account_balance: Decimal
    credit_balance: Decimal
    last_updated: datetime

    class Config:
        json_schema_extra = {
            "example": {
                "customer_id": 7,
                "account_balance": "825.00",
                "credit_balance": "0.00",
                "last_updated": "2024-01-15T10:00:00Z"
            }
        }


class ReadyPackageDTO(BaseModel):
    package_id: int
    tracking_number: str
    freight_price: Decimal
    clearance_fee: Decimal
    storage_fee: Decimal
    delivery_fee: Decimal
    total_cost: Decimal


class ReadyPackagesResponseDTO(BaseModel):
    customer_id: int
    packages: List[ReadyPackageDTO]
    total_amount: Decimal


class RevenueSummaryDTO(BaseModel):
    """
    Period revenue

    revenue is the sum of net_amount; amount_collected includes
    overpayments and is reported for cash reconciliation only.
    """

    start: datetime
    end: datetime
    distribution_count: int
    revenue: Decimal
    total_amount: Decimal
    write_off_amount: Decimal
    amount_collected: Decimal


class LedgerDiscrepancyDTO(BaseModel):
    """Account whose stored balances differ from its replayed ledger"""

    customer_id: int
    account_id: int
    stored_account_balance: Decimal
    replayed_account_balance: Decimal
    stored_credit_balance: Decimal
    replayed_credit_balance: Decimal
    transaction_count: int
    broken_links: int = Field(
        default=0,
        description="Rows whose balance_before does not match the previous row's balance_after"
    )


class ReconciliationResultDTO(BaseModel):
    total_accounts_checked: int
    discrepancies_found: int
    discrepancies: List[LedgerDiscrepancyDTO]
    reconciliation_time: datetime
    execution_time_ms: int
