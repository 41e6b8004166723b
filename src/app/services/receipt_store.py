"""Receipt Store Interface"""

from abc import ABC, abstractmethod


class ReceiptStore(ABC):
    """Persists rendered receipts and returns a reference to them"""

    @abstractmethod
    def save(self, receipt_number: str, document: bytes) -> str:
        """
        Store a rendered receipt

        Args:
            receipt_number: Distribution receipt number
            document: Rendered PDF bytes

        Returns:
            Reference (path or key) to the stored receipt
        """
        pass
