from abc import ABC, abstractmethod

from raffle_desk.app.repositories.staff_account_repository import IStaffAccountRepository
from raffle_desk.app.repositories.ticket_repository import ITicketRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    staff: IStaffAccountRepository
    tickets: ITicketRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
