"""Customer API Routes

Read-only views of a customer's balances, ready packages, distribution
history and ledger statement.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.use_cases.distribution.dtos import (
    CustomerBalanceResponseDTO,
    ListDistributionsResponseDTO,
    ListTransactionsResponseDTO,
    ReadyPackagesResponseDTO,
)
from src.app.use_cases.distribution.get_customer_balance import GetCustomerBalance
from src.app.use_cases.distribution.list_distributions import ListDistributions
from src.app.use_cases.distribution.list_ready_packages import ListReadyPackages
from src.app.use_cases.distribution.list_transactions import ListTransactions
from src.adapter.repositories.customer_account_repository import SqlAlchemyCustomerAccountRepository
from src.adapter.repositories.distribution_repository import SqlAlchemyDistributionRepository
from src.adapter.repositories.package_repository import SqlAlchemyPackageRepository
from src.adapter.repositories.transaction_repository import SqlAlchemyTransactionRepository
from src.depends import get_session
from src.api.error import ClientError

router = APIRouter(prefix="/customers", tags=["Customers"])


@router.get(
    "/{customer_id}/balance",
    response_model=CustomerBalanceResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        404: {
            "description": "Customer account not found",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "CUSTOMER_ACCOUNT_NOT_FOUND",
                            "message": "No account found for customer 7"
                        }
                    }
                }
            }
        }
    }
)
async def get_balance(
    customer_id: int,
    session: AsyncSession = Depends(get_session)
):
    """
    Get a customer's account balance (may be negative) and credit balance.
    """
    use_case = GetCustomerBalance(SqlAlchemyCustomerAccountRepository(session))
    result = await use_case.execute(customer_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/{customer_id}/packages/ready",
    response_model=ReadyPackagesResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_ready_packages(
    customer_id: int,
    session: AsyncSession = Depends(get_session)
):
    """
    List the packages a customer can collect, with the total due.
    """
    use_case = ListReadyPackages(SqlAlchemyPackageRepository(session))
    result = await use_case.execute(customer_id)
    return result.value


@router.get(
    "/{customer_id}/distributions",
    response_model=ListDistributionsResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_distributions(
    customer_id: int,
    limit: int = Query(default=20, description="Maximum number of distributions (1-100)"),
    offset: int = Query(default=0, description="Number of distributions to skip"),
    session: AsyncSession = Depends(get_session)
):
    """
    List a customer's distribution history, newest first.
    """
    use_case = ListDistributions(SqlAlchemyDistributionRepository(session))
    result = await use_case.execute(customer_id, limit=limit, offset=offset)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/{customer_id}/transactions",
    response_model=ListTransactionsResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_transactions(
    customer_id: int,
    limit: int = Query(default=20, description="Maximum number of transactions (1-100)"),
    offset: int = Query(default=0, description="Number of transactions to skip"),
    session: AsyncSession = Depends(get_session)
):
    """
    List a customer's charges, payments and credits, newest first.
    """
    use_case = ListTransactions(
        SqlAlchemyCustomerAccountRepository(session),
        SqlAlchemyTransactionRepository(session),
    )
    result = await use_case.execute(customer_id, limit=limit, offset=offset)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
