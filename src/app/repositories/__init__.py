from .package_repository import PackageRepository
from .customer_account_repository import CustomerAccountRepository
from .transaction_repository import TransactionRepository
from .distribution_repository import DistributionRepository, RevenueTotals

__all__ = [
    "PackageRepository",
    "CustomerAccountRepository",
    "TransactionRepository",
    "DistributionRepository",
    "RevenueTotals",
]
