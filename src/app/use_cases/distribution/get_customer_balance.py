"""Get Customer Balance Use Case

Retrieves a customer's account and credit balances.
"""

from libs.result import Result, Return, Error
from src.app.repositories.customer_account_repository import CustomerAccountRepository
from .dtos import CustomerBalanceResponseDTO


class GetCustomerBalance:
    """
    Get Customer Balance Use Case

    Read-only. The account balance may be negative (money owed); the credit
    balance never is.
    """

    def __init__(self, account_repo: CustomerAccountRepository):
        """
        Initialize GetCustomerBalance use case

        Args:
            account_repo: Repository for accessing customer accounts
        """
        self.account_repo = account_repo

    async def execute(self, customer_id: int) -> Result[CustomerBalanceResponseDTO]:
        """
        Execute get balance operation

        Args:
            customer_id: The customer identifier

        Returns:
            Result[CustomerBalanceResponseDTO]: Success with balances or error

        Errors:
            CUSTOMER_ACCOUNT_NOT_FOUND: Customer has no account
        """
        account = await self.account_repo.get_by_customer_id(customer_id)

        if not account:
            return Return.err(
                Error(
                    code="CUSTOMER_ACCOUNT_NOT_FOUND",
                    message=f"No account found for customer {customer_id}",
                )
            )

        return Return.ok(
            CustomerBalanceResponseDTO(
                customer_id=account.customer_id,
                account_balance=account.account_balance,
                credit_balance=account.credit_balance,
                last_updated=account.updated_at,
            )
        )
