"""Get Distribution Use Case

Retrieves one settlement with its items and ledger transactions.
"""

from libs.result import Result, Return, Error
from src.app.repositories.distribution_repository import DistributionRepository
from src.app.repositories.transaction_repository import TransactionRepository
from .dtos import DistributionResponseDTO
from .mappers import to_distribution_response


class GetDistribution:
    def __init__(
        self,
        distribution_repo: DistributionRepository,
        transaction_repo: TransactionRepository,
    ):
        self.distribution_repo = distribution_repo
        self.transaction_repo = transaction_repo

    async def execute(self, distribution_id: int) -> Result[DistributionResponseDTO]:
        """
        Errors:
            DISTRIBUTION_NOT_FOUND: No distribution with this ID
        """
        distribution = await self.distribution_repo.get_by_id(distribution_id)
        if not distribution:
            return Return.err(
                Error(
                    code="DISTRIBUTION_NOT_FOUND",
                    message=f"Distribution {distribution_id} not found",
                )
            )

        items = await self.distribution_repo.get_items(distribution_id)
        transactions = await self.transaction_repo.get_by_distribution_id(distribution_id)

        return Return.ok(to_distribution_response(distribution, items, transactions))
