"""SQLAlchemy Unit of Work

Wraps the request's AsyncSession; repositories flush, the use case commits.
"""

from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """Commit and rollback on the session shared with the repositories"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
