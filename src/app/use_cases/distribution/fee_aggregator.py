"""Fee Aggregator

Loads the packages of a settlement request, checks they can be settled
together and sums their fees.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Sequence

from src.app.repositories.package_repository import PackageRepository
from src.domain.exceptions import IneligiblePackageError, ValidationError
from src.domain.money import money_sum
from src.domain.package import Package


@dataclass(frozen=True)
class FeeAggregate:
    customer_id: int
    packages: List[Package]
    total_amount: Decimal


class FeeAggregator:
    """
    Sums a customer's package charges into one settlement total

    Rules:
    1. At least one package, no duplicates, every ID must exist
    2. All packages belong to the same customer
    3. All packages are READY (already delivered ones are not)
    """

    def __init__(self, package_repo: PackageRepository):
        self.package_repo = package_repo

    async def aggregate(self, package_ids: Sequence[int], for_update: bool = False) -> FeeAggregate:
        """
        Validate the package set and compute its total

        Args:
            package_ids: Requested package identifiers
            for_update: Lock the package rows (inside the settlement unit of work)

        Returns:
            FeeAggregate with the owning customer and the fee total

        Raises:
            ValidationError: empty, duplicate, unknown or mixed-customer package set
            IneligiblePackageError: a package is not READY
        """
        if not package_ids:
            raise ValidationError("No packages provided for distribution")

        if len(set(package_ids)) != len(package_ids):
            raise ValidationError(
                "Duplicate package IDs in distribution request",
                reason=f"package_ids={list(package_ids)}",
            )

        packages = await self.package_repo.get_by_ids(package_ids, for_update=for_update)

        found_ids = {package.id for package in packages}
        missing = [package_id for package_id in package_ids if package_id not in found_ids]
        if missing:
            raise ValidationError(
                f"Packages not found: {missing}",
                reason="Unknown package IDs",
            )

        customer_ids = {package.customer_id for package in packages}
        if len(customer_ids) > 1:
            raise ValidationError(
                "All packages must belong to the same customer",
                reason=f"customer_ids={sorted(customer_ids)}",
            )

        not_ready = [package.id for package in packages if not package.is_ready()]
        if not_ready:
            raise IneligiblePackageError(
                not_ready,
                reason="Packages must be READY; delivered packages cannot be settled again",
            )

        # Keep request order so items and receipts list packages as submitted
        by_id = {package.id: package for package in packages}
        ordered = [by_id[package_id] for package_id in package_ids]

        return FeeAggregate(
            customer_id=customer_ids.pop(),
            packages=ordered,
            total_amount=self.total_for(ordered),
        )

    @staticmethod
    def total_for(packages: Sequence[Package]) -> Decimal:
        return money_sum(package.total_cost for package in packages)
