"""
Update Ticket Use Case
"""

import logging
from datetime import datetime
from typing import Callable

from raffle_desk.app.services.unit_of_work import UnitOfWork
from raffle_desk.app.use_cases.access import AuthorizedUser
from raffle_desk.domain.base import utcnow
from raffle_desk.domain.entities import TicketStatus
from raffle_desk.libs.result import Error, Result, Return
from .dtos import TicketInfo, TicketResponse, UpdateTicketCommand

logger = logging.getLogger(__name__)


class UpdateTicketUseCase:
    """
    Use case for changing a single ticket's status.

    Business Rules:
    - sold requires a buyer name (kept from the ticket when not given)
    - available clears buyer and sale details
    - void keeps the record of who held it
    - The write is version-guarded
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow):
        self.uow = uow
        self.clock = clock

    async def execute(
        self, caller: AuthorizedUser, command: UpdateTicketCommand
    ) -> Result[TicketResponse]:
        async with self.uow:
            ticket = await self.uow.tickets.get_by_number(command.number)
            if ticket is None:
                return Return.err(Error("NOT_FOUND", f"Ticket {command.number} not found"))

            now = self.clock()
            if command.status == TicketStatus.available:
                ticket.buyer_name = None
                ticket.buyer_contact = None
                ticket.sold_by = None
                ticket.sold_at = None
            elif command.status == TicketStatus.sold:
                buyer_name = (command.buyer_name or ticket.buyer_name or "").strip()
                if not buyer_name:
                    return Return.err(
                        Error("INVALID_INPUT", "buyerName is required to mark a ticket sold")
                    )
                if ticket.status != TicketStatus.sold:
                    ticket.sold_by = caller.email
                    ticket.sold_at = now
                ticket.buyer_name = buyer_name
                if command.buyer_contact is not None:
                    ticket.buyer_contact = command.buyer_contact.strip() or None

            if command.notes is not None:
                ticket.notes = command.notes
            ticket.status = command.status
            ticket.updated_at = now

            await self.uow.tickets.update(ticket)
            await self.uow.commit()

        logger.info(f"Ticket {ticket.number} set to {ticket.status.value} by {caller.email}")
        return Return.ok(TicketResponse(ticket=TicketInfo.from_entity(ticket)))
