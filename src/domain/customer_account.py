"""Customer Account Domain Entity

The customer's two stored-value balances. Only the settlement ledger writer
changes them, and only through a version-checked update.
"""

from datetime import datetime
from decimal import Decimal
from sqlmodel import Field, Column
from sqlalchemy import CheckConstraint, Integer, Numeric
from src.domain.base import BaseModel, IdType, MONEY_PRECISION, MONEY_SCALE


class CustomerAccount(BaseModel, table=True):
    """
    Customer Account - account and credit balances of one customer

    Domain Rules:
    - One account per customer (customer_id is unique)
    - account_balance is signed; negative means the customer owes money
    - credit_balance is never below zero
    - version increments on every balance write (optimistic concurrency token)
    """

    __tablename__ = "customer_accounts"
    __table_args__ = (
        CheckConstraint('credit_balance >= 0', name='credit_balance_non_negative'),
    )

    id: int = Field(
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique account identifier (auto-increment)"
    )

    customer_id: int = Field(
        index=True,
        unique=True,
        description="Customer ID (unique - one account per customer)"
    )

    account_balance: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(MONEY_PRECISION, MONEY_SCALE), nullable=False, default=0),
        description="Running account balance (may be negative)"
    )

    credit_balance: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(MONEY_PRECISION, MONEY_SCALE), nullable=False, default=0),
        description="Store credit pool (must be >= 0)"
    )

    version: int = Field(
        default=1,
        sa_column=Column(Integer, nullable=False, default=1),
        description="Optimistic concurrency token"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Account creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last balance update timestamp"
    )

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "customer_id": 7,
                "account_balance": "875.00",
                "credit_balance": "0.00",
                "version": 3,
                "created_at": "2024-01-01T00:00:00Z",
                "updated_at": "2024-01-01T00:00:00Z"
            }
        }
