"""List Ready Packages Use Case

Lists the packages a customer can collect, with the amount due.
"""

from libs.result import Result, Return
from src.app.repositories.package_repository import PackageRepository
from src.domain.money import to_money
from .dtos import ReadyPackageDTO, ReadyPackagesResponseDTO
from .fee_aggregator import FeeAggregator


class ListReadyPackages:
    def __init__(self, package_repo: PackageRepository):
        self.package_repo = package_repo

    async def execute(self, customer_id: int) -> Result[ReadyPackagesResponseDTO]:
        packages = await self.package_repo.get_ready_by_customer_id(customer_id)

        return Return.ok(
            ReadyPackagesResponseDTO(
                customer_id=customer_id,
                packages=[
                    ReadyPackageDTO(
                        package_id=package.id,
                        tracking_number=package.tracking_number,
                        freight_price=to_money(package.freight_price),
                        clearance_fee=to_money(package.clearance_fee),
                        storage_fee=to_money(package.storage_fee),
                        delivery_fee=to_money(package.delivery_fee),
                        total_cost=package.total_cost,
                    )
                    for package in packages
                ],
                total_amount=FeeAggregator.total_for(packages),
            )
        )
