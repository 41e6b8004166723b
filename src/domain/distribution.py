"""Package Distribution Domain Entities

One Distribution per settlement event, summarizing what was owed and how it
was funded, plus one DistributionItem per released package.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, ForeignKey, Numeric, String, Text
from src.domain.base import BaseModel, IdType, MONEY_PRECISION, MONEY_SCALE


class PaymentStatus(str, Enum):
    """Settlement payment status"""
    PAID = "paid"
    PARTIAL = "partial"
    UNPAID = "unpaid"


# Fields a post-commit collaborator may still fill in; everything else is frozen
MUTABLE_DISTRIBUTION_FIELDS = frozenset({"receipt_path", "email_sent"})


class Distribution(BaseModel, table=True):
    """
    Distribution - Summary of one settlement

    Domain Rules:
    - receipt_number is unique
    - net_amount = total_amount - write_off_amount, write_off_amount <= total_amount
    - Immutable once created, except receipt_path and email_sent
    - Revenue is net_amount, never amount_collected
    """

    __tablename__ = "package_distributions"
    __table_args__ = (
        Index('ix_package_distributions_customer_distributed', 'customer_id', 'distributed_at'),
        Index('ix_package_distributions_receipt_number', 'receipt_number', unique=True),
        CheckConstraint('write_off_amount >= 0', name='write_off_non_negative'),
        CheckConstraint('write_off_amount <= total_amount', name='write_off_within_total'),
        CheckConstraint('amount_collected >= 0', name='amount_collected_non_negative'),
    )

    id: int = Field(
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique distribution identifier (auto-increment)"
    )

    receipt_number: str = Field(
        sa_column=Column(String(50), nullable=False, unique=True),
        description="Unique receipt number (e.g., RCP202401150001)"
    )

    customer_id: int = Field(
        description="Customer whose packages were released"
    )

    distributed_by: int = Field(
        description="Admin who performed the settlement"
    )

    distributed_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Settlement timestamp"
    )

    total_amount: Decimal = Field(
        sa_column=Column(Numeric(MONEY_PRECISION, MONEY_SCALE), nullable=False),
        description="Sum of package fees before write-off"
    )

    write_off_amount: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(MONEY_PRECISION, MONEY_SCALE), nullable=False, default=0),
        description="Discount applied"
    )

    write_off_reason: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Why the write-off was granted"
    )

    net_amount: Decimal = Field(
        sa_column=Column(Numeric(MONEY_PRECISION, MONEY_SCALE), nullable=False),
        description="total_amount - write_off_amount"
    )

    amount_collected: Decimal = Field(
        sa_column=Column(Numeric(MONEY_PRECISION, MONEY_SCALE), nullable=False),
        description="Cash tendered (may exceed net_amount)"
    )

    credit_applied: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(MONEY_PRECISION, MONEY_SCALE), nullable=False, default=0),
        description="Credit drawn from the credit pool"
    )

    account_balance_applied: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(MONEY_PRECISION, MONEY_SCALE), nullable=False, default=0),
        description="Shortfall absorbed by the account balance"
    )

    overpayment: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(MONEY_PRECISION, MONEY_SCALE), nullable=False, default=0),
        description="Excess routed to the credit pool"
    )

    payment_status: PaymentStatus = Field(
        description="Payment status (paid, partial, unpaid)"
    )

    notes: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="Free-form admin notes"
    )

    receipt_path: Optional[str] = Field(
        default=None,
        sa_column=Column(String(500), nullable=True),
        description="Receipt reference, set after the fact by receipt generation"
    )

    email_sent: bool = Field(
        default=False,
        description="Whether the receipt notification went out"
    )

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 12,
                "receipt_number": "RCP202401150001",
                "customer_id": 7,
                "distributed_by": 3,
                "distributed_at": "2024-01-15T10:00:00Z",
                "total_amount": "100.00",
                "write_off_amount": "25.00",
                "write_off_reason": "Loyalty discount",
                "net_amount": "75.00",
                "amount_collected": "60.00",
                "credit_applied": "0.00",
                "account_balance_applied": "15.00",
                "overpayment": "0.00",
                "payment_status": "partial",
                "notes": None,
                "receipt_path": None,
                "email_sent": False
            }
        }


class DistributionItem(BaseModel, table=True):
    """
    Distribution Item - Fee snapshot of one released package

    Domain Rules:
    - Each item belongs to exactly one distribution
    - total_cost = freight_price + clearance_fee + storage_fee + delivery_fee
    - Immutable
    """

    __tablename__ = "package_distribution_items"
    __table_args__ = (
        Index('ix_package_distribution_items_distribution_id', 'distribution_id'),
    )

    id: int = Field(
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique item identifier (auto-increment)"
    )

    distribution_id: int = Field(
        sa_column=Column(IdType, ForeignKey("package_distributions.id"), nullable=False),
        description="Foreign key to Distribution"
    )

    package_id: int = Field(
        sa_column=Column(IdType, ForeignKey("packages.id"), nullable=False),
        description="Released package"
    )

    freight_price: Decimal = Field(
        sa_column=Column(Numeric(MONEY_PRECISION, MONEY_SCALE), nullable=False),
    )

    clearance_fee: Decimal = Field(
        sa_column=Column(Numeric(MONEY_PRECISION, MONEY_SCALE), nullable=False),
    )

    storage_fee: Decimal = Field(
        sa_column=Column(Numeric(MONEY_PRECISION, MONEY_SCALE), nullable=False),
    )

    delivery_fee: Decimal = Field(
        sa_column=Column(Numeric(MONEY_PRECISION, MONEY_SCALE), nullable=False),
    )

    total_cost: Decimal = Field(
        sa_column=Column(Numeric(MONEY_PRECISION, MONEY_SCALE), nullable=False),
        description="Sum of the four components"
    )
