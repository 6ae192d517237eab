from sqlmodel.ext.asyncio.session import AsyncSession

from raffle_desk.adapter.repositories.staff_account_repository import StaffAccountRepository
from raffle_desk.adapter.repositories.ticket_repository import TicketRepository
from raffle_desk.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        self.staff = StaffAccountRepository(self.session)
        self.tickets = TicketRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
