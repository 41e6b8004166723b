"""Request schemas for Distribution API

Pydantic models for validating incoming HTTP requests.
"""

from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator


class DistributeRequestSchema(BaseModel):
    """
    Request schema for settling packages

    Used for POST /distributions endpoint.
    """

    package_ids: List[int] = Field(
        ...,
        min_length=1,
        description="Packages to release (all of one customer, all READY)"
    )

    cash_tendered: Decimal = Field(
        ...,
        ge=0,
        description="Cash collected at the counter (must be >= 0)"
    )

    performed_by: int = Field(
        ...,
        description="Admin performing the settlement"
    )

    use_credit: bool = Field(
        default=False,
        description="Draw on the customer's credit balance"
    )

    use_account: bool = Field(
        default=False,
        description="Accepted for compatibility; the account balance always absorbs a shortfall"
    )

    write_off: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Discount subtracted from the package total"
    )

    write_off_reason: Optional[str] = Field(
        default=None,
        max_length=255,
        description="Reason for the write-off"
    )

    notes: Optional[str] = Field(
        default=None,
        description="Free-form admin notes"
    )

    @field_validator('package_ids')
    @classmethod
    def validate_package_ids(cls, v):
        """Reject repeated package IDs"""
        if len(set(v)) != len(v):
            raise ValueError("package_ids must not contain duplicates")
        return v

    @field_validator('cash_tendered', 'write_off')
    @classmethod
    def validate_precision(cls, v):
        """Money is settled in cents"""
        if v is not None and v.as_tuple().exponent < -2:
            raise ValueError("Amounts must have at most 2 decimal places")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "package_ids": [41, 42],
                "cash_tendered": "60.00",
                "performed_by": 3,
                "use_credit": True,
                "write_off": "25.00",
                "write_off_reason": "Loyalty discount"
            }
        }
