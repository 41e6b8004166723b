"""Background workers for the settlement service"""
from .ledger_reconciler import LedgerReconcilerWorker

__all__ = ["LedgerReconcilerWorker"]
