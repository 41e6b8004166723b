from .distribute_packages import DistributePackages
from .get_customer_balance import GetCustomerBalance
from .get_distribution import GetDistribution
from .get_revenue_summary import GetRevenueSummary
from .list_distributions import ListDistributions
from .list_ready_packages import ListReadyPackages
from .list_transactions import ListTransactions
from .reconcile_ledger import ReconcileLedger
from .side_effects import ReceiptGenerationHandler, ReceiptNotificationHandler

__all__ = [
    "DistributePackages",
    "GetCustomerBalance",
    "GetDistribution",
    "GetRevenueSummary",
    "ListDistributions",
    "ListReadyPackages",
    "ListTransactions",
    "ReconcileLedger",
    "ReceiptGenerationHandler",
    "ReceiptNotificationHandler",
]
