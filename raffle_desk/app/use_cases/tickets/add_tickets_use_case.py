"""
Add Tickets Use Case
"""

import logging
from datetime import datetime
from typing import Callable

from config import ApplicationConfig
from raffle_desk.app.services.unit_of_work import UnitOfWork
from raffle_desk.app.use_cases.access import AuthorizedUser
from raffle_desk.domain.base import utcnow
from raffle_desk.domain.entities import Ticket, TicketStatus
from raffle_desk.libs.result import Error, Result, Return
from .dtos import AddTicketsCommand, AddTicketsResponse

logger = logging.getLogger(__name__)


class AddTicketsUseCase:
    """
    Use case for adding a block of numbered tickets.

    Business Rules:
    - Only admins may add tickets
    - At most MAX_TICKETS_PER_BATCH numbers per call
    - Numbers that already exist are skipped, never overwritten
    - Losing a race with a concurrent add over the same numbers is a version conflict
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow):
        self.uow = uow
        self.clock = clock

    async def execute(
        self, admin: AuthorizedUser, command: AddTicketsCommand
    ) -> Result[AddTicketsResponse]:
        if not admin.is_admin:
            return Return.err(Error("INSUFFICIENT_ROLE", "Only admins can add tickets"))

        if command.end < command.start:
            return Return.err(Error("INVALID_INPUT", "end must not be before start"))

        count = command.end - command.start + 1
        if count > ApplicationConfig.MAX_TICKETS_PER_BATCH:
            return Return.err(
                Error(
                    "INVALID_INPUT",
                    f"At most {ApplicationConfig.MAX_TICKETS_PER_BATCH} tickets per request",
                )
            )

        numbers = list(range(command.start, command.end + 1))

        async with self.uow:
            existing = {t.number for t in await self.uow.tickets.get_many(numbers)}
            now = self.clock()
            new_tickets = [
                Ticket(
                    number=n,
                    status=TicketStatus.available,
                    price=command.price,
                    updated_at=now,
                )
                for n in numbers
                if n not in existing
            ]
            created = 0
            if new_tickets:
                created = await self.uow.tickets.create_many(new_tickets)
                await self.uow.commit()

        logger.info(
            f"{admin.email} added tickets {command.start}-{command.end}: "
            f"{created} created, {len(existing)} skipped"
        )
        return Return.ok(
            AddTicketsResponse(
                message=f"{created} ticket(s) created",
                created=created,
                skipped=len(existing),
            )
        )
