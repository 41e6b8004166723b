"""PDF Generation Service Interface

Defines the contract for rendering distribution receipts.
"""

from abc import ABC, abstractmethod
from typing import List
from src.domain.distribution import Distribution, DistributionItem


class PdfService(ABC):
    """
    Service interface for PDF generation

    Renders a receipt document from a Distribution and its items.
    """

    @abstractmethod
    def generate_distribution_receipt(
        self,
        distribution: Distribution,
        items: List[DistributionItem],
        company_name: str = "Package Forwarding Co.",
        company_address: str = "1 Harbour Road, Kingston",
    ) -> bytes:
        """
        Generate a distribution receipt PDF

        Args:
            distribution: Settled Distribution
            items: Per-package fee snapshots
            company_name: Company name to display on receipt
            company_address: Company address to display on receipt

        Returns:
            PDF document as bytes
        """
        pass
