"""Customer Transaction Domain Entity

Immutable append-only ledger of every balance movement made by a settlement.
Replaying a customer's transactions in creation order reproduces the
customer's current balances.
"""

import json
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Tuple
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, ForeignKey, Numeric, String, Text
from src.domain.base import BaseModel, IdType, MONEY_PRECISION, MONEY_SCALE
from src.domain.ledger import ChargeEntry, CreditEntry, LedgerEntry, PaymentEntry
from src.domain.money import to_money


class TransactionType(str, Enum):
    """Ledger transaction types"""
    CHARGE = "charge"      # Amount owed for released packages (account balance)
    PAYMENT = "payment"    # Cash and consumed credit covering a charge (account balance)
    CREDIT = "credit"      # Overpayment moved to the credit pool (credit balance)


class Transaction(BaseModel, table=True):
    """
    Transaction - Immutable ledger entry

    Domain Rules:
    - Transactions are immutable (append-only)
    - amount is always positive
    - CHARGE/PAYMENT snapshots refer to account_balance
    - CREDIT snapshots refer to credit_balance
    - PAYMENT metadata records credit consumed from the credit pool
    - Linked to the Distribution that produced it
    """

    __tablename__ = "customer_transactions"
    __table_args__ = (
        Index('ix_customer_transactions_customer_created', 'customer_id', 'created_at', 'id'),
        Index('ix_customer_transactions_distribution', 'distribution_id'),
        CheckConstraint('amount > 0', name='transaction_amount_positive'),
    )

    id: int = Field(
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique transaction identifier (auto-increment)"
    )

    customer_id: int = Field(
        description="Customer whose balances moved"
    )

    transaction_type: TransactionType = Field(
        description="Type of transaction (charge, payment, credit)"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(MONEY_PRECISION, MONEY_SCALE), nullable=False),
        description="Transaction amount (always positive)"
    )

    balance_before: Decimal = Field(
        sa_column=Column(Numeric(MONEY_PRECISION, MONEY_SCALE), nullable=False),
        description="Balance before transaction"
    )

    balance_after: Decimal = Field(
        sa_column=Column(Numeric(MONEY_PRECISION, MONEY_SCALE), nullable=False),
        description="Balance after transaction"
    )

    description: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Human-readable description"
    )

    distribution_id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, ForeignKey("package_distributions.id"), nullable=True),
        description="Distribution that produced this transaction"
    )

    created_by: int = Field(
        description="Admin who performed the settlement"
    )

    metadata_json: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="JSON metadata for additional context"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Transaction timestamp (immutable)"
    )

    @property
    def details(self) -> Dict[str, Any]:
        if not self.metadata_json:
            return {}
        return json.loads(self.metadata_json)

    @property
    def credit_consumed(self) -> Decimal:
        """Credit drawn from the credit pool as part of a payment"""
        if self.transaction_type != TransactionType.PAYMENT:
            return to_money(0)
        return to_money(self.details.get("credit_applied"))

    @property
    def account_snapshot(self) -> Optional[Tuple[Decimal, Decimal]]:
        """(before, after) of the account balance, for rows that move it"""
        if self.transaction_type in (TransactionType.CHARGE, TransactionType.PAYMENT):
            return to_money(self.balance_before), to_money(self.balance_after)
        return None

    @property
    def credit_snapshot(self) -> Optional[Tuple[Decimal, Decimal]]:
        """(before, after) of the credit balance, for rows that record it"""
        if self.transaction_type == TransactionType.CREDIT:
            return to_money(self.balance_before), to_money(self.balance_after)
        details = self.details
        if (
            self.transaction_type == TransactionType.PAYMENT
            and "credit_balance_before" in details
            and "credit_balance_after" in details
        ):
            return to_money(details["credit_balance_before"]), to_money(details["credit_balance_after"])
        return None

    def to_entry(self) -> LedgerEntry:
        amount = to_money(self.amount)
        if self.transaction_type == TransactionType.CHARGE:
            return ChargeEntry(amount=amount)
        if self.transaction_type == TransactionType.PAYMENT:
            return PaymentEntry(amount=amount, credit_consumed=self.credit_consumed)
        if self.transaction_type == TransactionType.CREDIT:
            return CreditEntry(amount=amount)
        raise TypeError(f"Unhandled transaction type: {self.transaction_type}")

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "customer_id": 7,
                "transaction_type": "payment",
                "amount": "100.00",
                "balance_before": "775.00",
                "balance_after": "875.00",
                "description": "Payment received for package distribution - Receipt #RCP202401150001",
                "distribution_id": 12,
                "created_by": 3,
                "metadata_json": "{\"cash_applied\": \"100.00\", \"credit_applied\": \"0.00\"}",
                "created_at": "2024-01-15T10:00:00Z"
            }
        }
