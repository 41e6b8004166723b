from .package_repository import SqlAlchemyPackageRepository
from .customer_account_repository import SqlAlchemyCustomerAccountRepository
from .transaction_repository import SqlAlchemyTransactionRepository
from .distribution_repository import SqlAlchemyDistributionRepository

__all__ = [
    "SqlAlchemyPackageRepository",
    "SqlAlchemyCustomerAccountRepository",
    "SqlAlchemyTransactionRepository",
    "SqlAlchemyDistributionRepository",
]
