"""List Transactions Use Case

Retrieves a customer's ledger statement with pagination.
"""

from libs.result import Result, Return, Error
from src.app.repositories.customer_account_repository import CustomerAccountRepository
from src.app.repositories.transaction_repository import TransactionRepository
from .dtos import ListTransactionsResponseDTO
from .mappers import to_transaction_dto


class ListTransactions:
    """
    List Transactions Use Case

    Read-only operation that retrieves a customer's charges, payments and
    credits, newest first.
    """

    def __init__(
        self,
        account_repo: CustomerAccountRepository,
        transaction_repo: TransactionRepository,
    ):
        self.account_repo = account_repo
        self.transaction_repo = transaction_repo

    async def execute(
        self, customer_id: int, limit: int = 20, offset: int = 0
    ) -> Result[ListTransactionsResponseDTO]:
        """
        Execute list transactions operation

        Args:
            customer_id: The customer identifier
            limit: Maximum number of transactions (1-100)
            offset: Number of transactions to skip

        Returns:
            Result[ListTransactionsResponseDTO]: Paginated statement or error

        Errors:
            INVALID_PAGINATION: limit or offset out of range
            CUSTOMER_ACCOUNT_NOT_FOUND: Customer has no account
        """
        if limit < 1 or limit > 100 or offset < 0:
            return Return.err(
                Error(
                    code="INVALID_PAGINATION",
                    message="limit must be between 1 and 100 and offset must be >= 0",
                )
            )

        account = await self.account_repo.get_by_customer_id(customer_id)
        if not account:
            return Return.err(
                Error(
                    code="CUSTOMER_ACCOUNT_NOT_FOUND",
                    message=f"No account found for customer {customer_id}",
                )
            )

        transactions, total = await self.transaction_repo.get_by_customer_id(
            customer_id, limit=limit, offset=offset
        )

        return Return.ok(
            ListTransactionsResponseDTO(
                transactions=[to_transaction_dto(t) for t in transactions],
                total=total,
                limit=limit,
                offset=offset,
            )
        )
