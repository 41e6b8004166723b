"""Get Revenue Summary Use Case

Reports settlement revenue for a period.
"""

from datetime import datetime

from libs.result import Result, Return, Error
from src.app.repositories.distribution_repository import DistributionRepository
from .dtos import RevenueSummaryDTO


class GetRevenueSummary:
    """
    Revenue report

    Revenue is the sum of net_amount over distributions in [start, end).
    Overpayments are customer credit, not revenue, so amount_collected is
    reported next to it but never counted.
    """

    def __init__(self, distribution_repo: DistributionRepository):
        self.distribution_repo = distribution_repo

    async def execute(self, start: datetime, end: datetime) -> Result[RevenueSummaryDTO]:
        if start >= end:
            return Return.err(
                Error(
                    code="VALIDATION_ERROR",
                    message="Report start must be before end",
                    reason=f"start={start.isoformat()}, end={end.isoformat()}",
                )
            )

        totals = await self.distribution_repo.summarize(start, end)

        return Return.ok(
            RevenueSummaryDTO(
                start=start,
                end=end,
                distribution_count=totals.distribution_count,
                revenue=totals.net_amount,
                total_amount=totals.total_amount,
                write_off_amount=totals.write_off_amount,
                amount_collected=totals.amount_collected,
            )
        )
