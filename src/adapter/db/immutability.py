"""ORM-level append-only enforcement

Mapper listeners that reject UPDATE and DELETE of settlement records before
the SQL reaches the database:

    Entity            | Rule
    ------------------|----------------------------------------------------
    Transaction       | never updated, never deleted
    DistributionItem  | never updated, never deleted
    Distribution      | only receipt_path and email_sent may change;
                      | never deleted

Bulk ``update()`` statements bypass mapper events, so repositories write
these records through the ORM.
"""

import logging

from sqlalchemy import event, inspect

from src.domain.distribution import (
    Distribution,
    DistributionItem,
    MUTABLE_DISTRIBUTION_FIELDS,
)
from src.domain.exceptions import ImmutabilityViolationError
from src.domain.transaction import Transaction

logger = logging.getLogger(__name__)


def _changed_fields(target):
    state = inspect(target)
    return sorted(
        attr.key for attr in state.attrs if attr.history.has_changes()
    )


def _block(entity_type: str, target, operation: str, reason: str):
    logger.error(
        f"Immutability violation blocked: {operation} {entity_type} {target.id} ({reason})"
    )
    raise ImmutabilityViolationError(entity_type=entity_type, entity_id=target.id, reason=reason)


def _check_transaction_update(mapper, connection, target):
    changed = _changed_fields(target)
    if changed:
        _block("Transaction", target, "UPDATE", f"Transactions are append-only (changed: {changed})")


def _check_transaction_delete(mapper, connection, target):
    _block("Transaction", target, "DELETE", "Transactions cannot be deleted")


def _check_distribution_update(mapper, connection, target):
    frozen = [field for field in _changed_fields(target) if field not in MUTABLE_DISTRIBUTION_FIELDS]
    if frozen:
        _block(
            "Distribution",
            target,
            "UPDATE",
            f"Settled distributions are immutable (changed: {frozen})",
        )


def _check_distribution_delete(mapper, connection, target):
    _block("Distribution", target, "DELETE", "Distributions cannot be deleted")


def _check_item_update(mapper, connection, target):
    changed = _changed_fields(target)
    if changed:
        _block("DistributionItem", target, "UPDATE", f"Fee snapshots are immutable (changed: {changed})")


def _check_item_delete(mapper, connection, target):
    _block("DistributionItem", target, "DELETE", "Fee snapshots cannot be deleted")


_LISTENERS = (
    (Transaction, "before_update", _check_transaction_update),
    (Transaction, "before_delete", _check_transaction_delete),
    (Distribution, "before_update", _check_distribution_update),
    (Distribution, "before_delete", _check_distribution_delete),
    (DistributionItem, "before_update", _check_item_update),
    (DistributionItem, "before_delete", _check_item_delete),
)


def register_immutability_listeners():
    """
    Register the append-only listeners

    Safe to call more than once (app factory, workers and tests all call it).
    """
    for model, identifier, fn in _LISTENERS:
        if not event.contains(model, identifier, fn):
            event.listen(model, identifier, fn)


def unregister_immutability_listeners():
    for model, identifier, fn in _LISTENERS:
        if event.contains(model, identifier, fn):
            event.remove(model, identifier, fn)
