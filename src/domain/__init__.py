from .base import BaseModel
from .package import Package, PackageStatus
from .customer_account import CustomerAccount
from .distribution import Distribution, DistributionItem, PaymentStatus
from .transaction import Transaction, TransactionType
from .ledger import Balances, ChargeEntry, PaymentEntry, CreditEntry, LedgerEntry, apply_entry, replay

__all__ = [
    "BaseModel",
    "Package",
    "PackageStatus",
    "CustomerAccount",
    "Distribution",
    "DistributionItem",
    "PaymentStatus",
    "Transaction",
    "TransactionType",
    "Balances",
    "ChargeEntry",
    "PaymentEntry",
    "CreditEntry",
    "LedgerEntry",
    "apply_entry",
    "replay",
]
