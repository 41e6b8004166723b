"""Reporting API Routes"""

from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.use_cases.distribution.dtos import RevenueSummaryDTO
from src.app.use_cases.distribution.get_revenue_summary import GetRevenueSummary
from src.adapter.repositories.distribution_repository import SqlAlchemyDistributionRepository
from src.depends import get_session
from src.api.error import ClientError

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get(
    "/revenue",
    response_model=RevenueSummaryDTO,
    status_code=status.HTTP_200_OK,
)
async def get_revenue(
    start: datetime = Query(..., description="Period start (inclusive)"),
    end: datetime = Query(..., description="Period end (exclusive)"),
    session: AsyncSession = Depends(get_session)
):
    """
    Revenue for a period: the sum of net amounts. Cash collected, which
    includes overpayments, is reported alongside but is not revenue.
    """
    use_case = GetRevenueSummary(SqlAlchemyDistributionRepository(session))
    result = await use_case.execute(start, end)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
