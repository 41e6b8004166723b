"""Unit of Work Interface

Groups repository writes into one atomic commit.
"""

from abc import ABC, abstractmethod


class UnitOfWork(ABC):
    """
    Transaction boundary for a use case

    Everything flushed through the repositories between two commits is
    committed or rolled back together.
    """

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
