"""Distribution API Routes

FastAPI routes for settling and inspecting package distributions.
"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.api.schemas.distribution_request import DistributeRequestSchema
from src.app.use_cases.distribution.dtos import (
    AdjustmentsDTO,
    BalanceOptionsDTO,
    DistributeCommandDTO,
    DistributionResponseDTO,
)
from src.app.use_cases.distribution.distribute_packages import DistributePackages
from src.app.use_cases.distribution.get_distribution import GetDistribution
from src.adapter.repositories.customer_account_repository import SqlAlchemyCustomerAccountRepository
from src.adapter.repositories.distribution_repository import SqlAlchemyDistributionRepository
from src.adapter.repositories.package_repository import SqlAlchemyPackageRepository
from src.adapter.repositories.transaction_repository import SqlAlchemyTransactionRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import build_event_publisher, get_session
from src.api.error import ClientError

router = APIRouter(prefix="/distributions", tags=["Distributions"])


def _error_example(code: str, message: str) -> dict:
    return {"application/json": {"example": {"error": {"code": code, "message": message}}}}


@router.post(
    "",
    response_model=DistributionResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {
            "description": "Validation error",
            "content": _error_example("VALIDATION_ERROR", "Write-off 120.00 exceeds package total 100.00"),
        },
        404: {
            "description": "Customer has no balance account",
            "content": _error_example("CUSTOMER_ACCOUNT_NOT_FOUND", "No balance account found for customer 7"),
        },
        409: {
            "description": "Package not ready, or concurrent settlement kept winning",
            "content": _error_example("INELIGIBLE_PACKAGE", "Packages not ready for distribution: [42]"),
        },
    },
)
async def distribute_packages(
    request: DistributeRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """
    Settle a customer's ready packages and release them.

    Sums the package fees, subtracts the write-off, takes the cash tendered,
    optionally draws on store credit, and charges any shortfall to the
    customer's account balance. Overpayment becomes store credit.

    **Request body:**
    - `package_ids` (required): Packages of one customer, all ready for pickup
    - `cash_tendered` (required): Cash collected (>= 0)
    - `performed_by` (required): Admin ID
    - `use_credit` (optional): Apply available store credit
    - `use_account` (optional): Accepted, has no effect
    - `write_off`, `write_off_reason`, `notes` (optional)

    **Returns:**
    - 201: Distribution with its items, transactions and new balances
    - 400: Invalid request
    - 404: Customer account missing
    - 409: Package ineligible or concurrency conflict
    """
    uow = SqlAlchemyUnitOfWork(session)
    package_repo = SqlAlchemyPackageRepository(session)
    account_repo = SqlAlchemyCustomerAccountRepository(session)
    transaction_repo = SqlAlchemyTransactionRepository(session)
    distribution_repo = SqlAlchemyDistributionRepository(session)

    command = DistributeCommandDTO(
        package_ids=request.package_ids,
        cash_tendered=request.cash_tendered,
        performed_by=request.performed_by,
        options=BalanceOptionsDTO(
            use_credit=request.use_credit,
            use_account=request.use_account,
        ),
        adjustments=AdjustmentsDTO(
            write_off=request.write_off,
            write_off_reason=request.write_off_reason,
            notes=request.notes,
        ),
    )

    use_case = DistributePackages(
        uow,
        package_repo,
        account_repo,
        transaction_repo,
        distribution_repo,
        event_publisher=build_event_publisher(session),
        max_attempts=ApplicationConfig.SETTLEMENT_MAX_ATTEMPTS,
        retry_base_delay=ApplicationConfig.SETTLEMENT_RETRY_BASE_DELAY,
        retry_max_delay=ApplicationConfig.SETTLEMENT_RETRY_MAX_DELAY,
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/{distribution_id}",
    response_model=DistributionResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        404: {
            "description": "Distribution not found",
            "content": _error_example("DISTRIBUTION_NOT_FOUND", "Distribution 12 not found"),
        }
    },
)
async def get_distribution(
    distribution_id: int,
    session: AsyncSession = Depends(get_session),
):
    """
    Get one distribution with its package items and ledger transactions.
    """
    use_case = GetDistribution(
        SqlAlchemyDistributionRepository(session),
        SqlAlchemyTransactionRepository(session),
    )
    result = await use_case.execute(distribution_id)

    if result.is_err():
        raise ClientError(result.error, status_code=status.HTTP_404_NOT_FOUND)

    return result.value
