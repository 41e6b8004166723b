"""List Distributions Use Case

Retrieves a customer's distribution history with pagination.
"""

from libs.result import Result, Return, Error
from src.app.repositories.distribution_repository import DistributionRepository
from .dtos import ListDistributionsResponseDTO
from .mappers import to_summary_dto


class ListDistributions:
    """
    List Distributions Use Case

    Read-only operation, newest settlement first.
    """

    def __init__(self, distribution_repo: DistributionRepository):
        self.distribution_repo = distribution_repo

    async def execute(
        self, customer_id: int, limit: int = 20, offset: int = 0
    ) -> Result[ListDistributionsResponseDTO]:
        """
        Execute list distributions operation

        Args:
            customer_id: The customer identifier
            limit: Maximum number of distributions (1-100)
            offset: Number of distributions to skip

        Returns:
            Result[ListDistributionsResponseDTO]: Paginated history or error

        Errors:
            INVALID_PAGINATION: limit or offset out of range
        """
        if limit < 1 or limit > 100 or offset < 0:
            return Return.err(
                Error(
                    code="INVALID_PAGINATION",
                    message="limit must be between 1 and 100 and offset must be >= 0",
                )
            )

        distributions, total = await self.distribution_repo.get_by_customer_id(
            customer_id, limit=limit, offset=offset
        )

        return Return.ok(
            ListDistributionsResponseDTO(
                distributions=[to_summary_dto(d) for d in distributions],
                total=total,
                limit=limit,
                offset=offset,
            )
        )
