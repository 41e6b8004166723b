"""Typed exceptions for the settlement engine

Every exception carries a machine-readable ``code`` so use cases can turn it
into a ``libs.result.Error`` and the API layer can map it to a status code
without parsing messages.

    SettlementError
    +-- ValidationError
    |   +-- CustomerAccountNotFoundError
    +-- IneligiblePackageError
    +-- ConcurrencyConflictError
    +-- PersistenceError
    +-- ImmutabilityViolationError
"""

from typing import Optional, Sequence


class SettlementError(Exception):
    """Base class for all settlement failures"""

    code: str = "SETTLEMENT_ERROR"

    def __init__(self, message: str, reason: Optional[str] = None):
        self.message = message
        self.reason = reason
        super().__init__(message)


class ValidationError(SettlementError):
    """Malformed or inconsistent input, detected before any mutation"""

    code = "VALIDATION_ERROR"


class CustomerAccountNotFoundError(ValidationError):
    code = "CUSTOMER_ACCOUNT_NOT_FOUND"

    def __init__(self, customer_id: int):
        self.customer_id = customer_id
        super().__init__(
            f"No balance account found for customer {customer_id}",
            reason="Customer may not exist or account not initialized",
        )


class IneligiblePackageError(SettlementError):
    """A package is not in the releasable state (or was already settled)"""

    code = "INELIGIBLE_PACKAGE"

    def __init__(self, package_ids: Sequence[int], reason: Optional[str] = None):
        self.package_ids = list(package_ids)
        super().__init__(
            f"Packages not ready for distribution: {self.package_ids}",
            reason=reason,
        )


class ConcurrencyConflictError(SettlementError):
    """Lost a race on the customer's balance row; the whole call may be retried"""

    code = "CONCURRENCY_CONFLICT"


class PersistenceError(SettlementError):
    """Storage failure inside the atomic unit; nothing was written"""

    code = "PERSISTENCE_ERROR"


class ImmutabilityViolationError(SettlementError):
    """Attempt to modify or delete an append-only record"""

    code = "IMMUTABILITY_VIOLATION"

    def __init__(self, entity_type: str, entity_id: Optional[int], reason: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(
            f"{entity_type} {entity_id} is immutable",
            reason=reason,
        )
