"""Package Domain Entity

Read-mostly view of a shipped package as the settlement engine needs it:
owner, the four fee components and the lifecycle status.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, Numeric, String
from src.domain.base import BaseModel, IdType, MONEY_PRECISION, MONEY_SCALE
from src.domain.money import money_sum


class PackageStatus(str, Enum):
    """Package lifecycle states"""
    PROCESSING = "processing"
    SHIPPED = "shipped"
    CUSTOMS = "customs"
    READY = "ready"            # Ready for release, eligible for settlement
    DELIVERED = "delivered"    # Terminal, set by settlement
    DELAYED = "delayed"


class Package(BaseModel, table=True):
    """
    Package - A customer's shipment awaiting release

    Domain Rules:
    - Belongs to exactly one customer
    - Fee components are non-negative (NULL counts as zero)
    - Only READY packages can be settled
    - Settlement moves the package to DELIVERED
    """

    __tablename__ = "packages"
    __table_args__ = (
        Index('ix_packages_customer_status', 'customer_id', 'status'),
        CheckConstraint('freight_price IS NULL OR freight_price >= 0', name='freight_price_non_negative'),
        CheckConstraint('clearance_fee IS NULL OR clearance_fee >= 0', name='clearance_fee_non_negative'),
        CheckConstraint('storage_fee IS NULL OR storage_fee >= 0', name='storage_fee_non_negative'),
        CheckConstraint('delivery_fee IS NULL OR delivery_fee >= 0', name='delivery_fee_non_negative'),
    )

    id: int = Field(
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique package identifier (auto-increment)"
    )

    customer_id: int = Field(
        description="Owning customer"
    )

    tracking_number: str = Field(
        sa_column=Column(String(100), nullable=False),
        description="Carrier tracking number"
    )

    freight_price: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(MONEY_PRECISION, MONEY_SCALE), nullable=True),
        description="Freight charge"
    )

    clearance_fee: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(MONEY_PRECISION, MONEY_SCALE), nullable=True),
        description="Customs/clearance charge"
    )

    storage_fee: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(MONEY_PRECISION, MONEY_SCALE), nullable=True),
        description="Storage charge"
    )

    delivery_fee: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(MONEY_PRECISION, MONEY_SCALE), nullable=True),
        description="Delivery charge"
    )

    status: PackageStatus = Field(
        default=PackageStatus.PROCESSING,
        description="Lifecycle status"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Package creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last status change timestamp"
    )

    @property
    def total_cost(self) -> Decimal:
        """Sum of the four fee components, each quantized to cents"""
        return money_sum(
            (self.freight_price, self.clearance_fee, self.storage_fee, self.delivery_fee)
        )

    def is_ready(self) -> bool:
        return self.status == PackageStatus.READY

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 42,
                "customer_id": 7,
                "tracking_number": "1Z999AA10123456784",
                "freight_price": "60.00",
                "clearance_fee": "25.00",
                "storage_fee": "5.00",
                "delivery_fee": "10.00",
                "status": "ready",
            }
        }
