"""Filesystem receipt store"""

import logging
import os

from src.app.services.receipt_store import ReceiptStore

logger = logging.getLogger(__name__)


class LocalReceiptStore(ReceiptStore):
    """
    Writes receipts to a local directory as ``<receipt_number>.pdf``

    The directory is created on first use.
    """

    def __init__(self, base_path: str):
        self.base_path = base_path

    def save(self, receipt_number: str, document: bytes) -> str:
        os.makedirs(self.base_path, exist_ok=True)
        path = os.path.join(self.base_path, f"{receipt_number}.pdf")
        with open(path, "wb") as w_file:
            w_file.write(document)
        logger.debug(f"Wrote receipt {receipt_number} to {path}")
        return path
