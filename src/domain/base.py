"""Shared base for SQLModel entities"""

from sqlalchemy import BigInteger, Integer
from sqlmodel import SQLModel

# SQLite only auto-increments INTEGER PRIMARY KEY columns
IdType = BigInteger().with_variant(Integer(), "sqlite")

# Monetary columns: fixed-point, cent precision
MONEY_PRECISION = 18
MONEY_SCALE = 2


class BaseModel(SQLModel):
    """Base class for all persisted entities"""
    pass
