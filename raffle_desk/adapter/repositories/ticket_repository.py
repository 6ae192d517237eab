from typing import Any, Dict, List, Optional

from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from raffle_desk.app.repositories.errors import VersionConflictError
from raffle_desk.app.repositories.ticket_repository import ITicketRepository
from raffle_desk.domain.entities import Ticket, TicketStatus
from raffle_desk.domain.ticket_ranges import contiguous_runs


class TicketRepository(ITicketRepository):
    """Ticket repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _detach(self, tickets: List[Ticket]) -> List[Ticket]:
        for ticket in tickets:
            self.session.expunge(ticket)
        return tickets

    async def get_by_number(self, number: int) -> Optional[Ticket]:
        """Get ticket by number"""
        stmt = select(Ticket).where(Ticket.number == number)
        result = await self.session.exec(stmt)
        ticket = result.one_or_none()
        if ticket is not None:
            self._detach([ticket])
        return ticket

    async def get_many(self, numbers: List[int]) -> List[Ticket]:
        """Get existing tickets among numbers, one range query per contiguous run"""
        wanted = set(numbers)
        tickets: List[Ticket] = []
        for start, end in contiguous_runs(wanted):
            stmt = (
                select(Ticket)
                .where(Ticket.number >= start, Ticket.number <= end)
                .order_by(Ticket.number)
            )
            result = await self.session.exec(stmt)
            tickets.extend(t for t in result.all() if t.number in wanted)
        return self._detach(tickets)

    async def list(
        self, status: Optional[TicketStatus], offset: int, limit: int
    ) -> List[Ticket]:
        """List tickets ordered by number"""
        stmt = select(Ticket)
        if status is not None:
            stmt = stmt.where(Ticket.status == status)
        stmt = stmt.order_by(Ticket.number).offset(offset).limit(limit)
        result = await self.session.exec(stmt)
        return self._detach(list(result.all()))

    async def list_all(self) -> List[Ticket]:
        """Scan every ticket ordered by number"""
        stmt = select(Ticket).order_by(Ticket.number)
        result = await self.session.exec(stmt)
        return self._detach(list(result.all()))

    async def create_many(self, tickets: List[Ticket]) -> int:
        """Append tickets"""
        self.session.add_all(tickets)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            # A concurrent add claimed some of these numbers first
            numbers = [t.number for t in tickets]
            raise VersionConflictError("Ticket", f"{min(numbers)}-{max(numbers)}") from exc
        self._detach(tickets)
        return len(tickets)

    async def update(self, ticket: Ticket) -> Ticket:
        """Write the ticket if nobody else wrote it since it was read"""
        values = ticket.model_dump(exclude={"number", "version"})
        stmt = (
            update(Ticket)
            .where(Ticket.number == ticket.number, Ticket.version == ticket.version)
            .values(**values, version=ticket.version + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount != 1:
            raise VersionConflictError("Ticket", ticket.number)
        ticket.version += 1
        return ticket

    async def update_range(
        self,
        start: int,
        end: int,
        expected_status: TicketStatus,
        values: Dict[str, Any],
    ) -> int:
        """Update tickets start..end still in expected_status"""
        stmt = (
            update(Ticket)
            .where(
                Ticket.number >= start,
                Ticket.number <= end,
                Ticket.status == expected_status,
            )
            .values(**values, version=Ticket.version + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def stats(self) -> Dict[str, Any]:
        """Count per status and revenue from sold tickets"""
        counts_stmt = select(Ticket.status, func.count()).group_by(Ticket.status)
        counts = await self.session.exec(counts_stmt)
        by_status = {
            (status.value if isinstance(status, TicketStatus) else str(status)): count
            for status, count in counts.all()
        }

        revenue_stmt = select(func.coalesce(func.sum(Ticket.price), 0.0)).where(
            Ticket.status == TicketStatus.sold
        )
        revenue = await self.session.exec(revenue_stmt)
        return {"by_status": by_status, "revenue": float(revenue.one())}
