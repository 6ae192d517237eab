from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from raffle_desk.domain.entities import Ticket, TicketStatus


class ITicketRepository(ABC):
    """Ticket repository interface - application layer"""

    @abstractmethod
    async def get_by_number(self, number: int) -> Optional[Ticket]:
        """Get ticket by number (detached snapshot)"""
        pass

    @abstractmethod
    async def get_many(self, numbers: List[int]) -> List[Ticket]:
        """Get the tickets that exist among the given numbers"""
        pass

    @abstractmethod
    async def list(
        self, status: Optional[TicketStatus], offset: int, limit: int
    ) -> List[Ticket]:
        """List tickets ordered by number"""
        pass

    @abstractmethod
    async def list_all(self) -> List[Ticket]:
        """Scan every ticket"""
        pass

    @abstractmethod
    async def create_many(self, tickets: List[Ticket]) -> int:
        """
        Append tickets, returns number created.

        Raises:
            VersionConflictError: another writer created one of the numbers first
        """
        pass

    @abstractmethod
    async def update(self, ticket: Ticket) -> Ticket:
        """
        Write the ticket back if its version is unchanged.

        Raises:
            VersionConflictError: the stored version moved on since the read
        """
        pass

    @abstractmethod
    async def update_range(
        self,
        start: int,
        end: int,
        expected_status: TicketStatus,
        values: Dict[str, Any],
    ) -> int:
        """Update tickets start..end still in expected_status, returns rows written"""
        pass

    @abstractmethod
    async def stats(self) -> Dict[str, Any]:
        """Count per status and revenue from sold tickets"""
        pass
