"""
Log Sale Use Case

Records the sale of one or more tickets to a buyer.
"""

import logging
from datetime import datetime
from typing import Callable

from config import ApplicationConfig
from raffle_desk.app.repositories.errors import VersionConflictError
from raffle_desk.app.services.unit_of_work import UnitOfWork
from raffle_desk.app.use_cases.access import AuthorizedUser
from raffle_desk.domain.base import utcnow
from raffle_desk.domain.entities import TicketStatus
from raffle_desk.domain.ticket_ranges import contiguous_runs, parse_ticket_numbers
from raffle_desk.libs.result import Error, Result, Return
from .dtos import LogSaleCommand, LogSaleResponse

logger = logging.getLogger(__name__)


class LogSaleUseCase:
    """
    Use case for logging a ticket sale.

    Business Rules:
    - Every requested ticket must exist (NOT_FOUND) and be available
      (INVALID_INPUT listing the unavailable numbers)
    - Tickets are written one contiguous run at a time, each run guarded
      by status=available
    - A run writing fewer rows than it covers means another sale got there
      first: VersionConflictError, nothing is committed
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow):
        self.uow = uow
        self.clock = clock

    async def execute(
        self, seller: AuthorizedUser, command: LogSaleCommand
    ) -> Result[LogSaleResponse]:
        try:
            numbers = parse_ticket_numbers(
                command.numbers, ApplicationConfig.MAX_TICKETS_PER_BATCH
            )
        except ValueError as exc:
            return Return.err(Error("INVALID_INPUT", str(exc)))

        async with self.uow:
            tickets = await self.uow.tickets.get_many(numbers)
            found = {t.number: t for t in tickets}

            missing = [n for n in numbers if n not in found]
            if missing:
                return Return.err(
                    Error("NOT_FOUND", "Some tickets do not exist", {"missing": missing})
                )

            unavailable = [
                n for n in numbers if found[n].status != TicketStatus.available
            ]
            if unavailable:
                return Return.err(
                    Error(
                        "INVALID_INPUT",
                        "Some tickets are not available",
                        {"unavailable": unavailable},
                    )
                )

            now = self.clock()
            values = {
                "status": TicketStatus.sold,
                "buyer_name": command.buyer_name.strip(),
                "buyer_contact": (command.buyer_contact or "").strip() or None,
                "notes": command.notes,
                "sold_by": seller.email,
                "sold_at": now,
                "updated_at": now,
            }

            runs = contiguous_runs(numbers)
            for start, end in runs:
                written = await self.uow.tickets.update_range(
                    start, end, TicketStatus.available, values
                )
                if written != end - start + 1:
                    raise VersionConflictError("Ticket", f"{start}-{end}")

            await self.uow.commit()

        amount = round(sum(found[n].price for n in numbers), 2)
        logger.info(f"{seller.email} sold tickets {runs} to {values['buyer_name']}")
        return Return.ok(
            LogSaleResponse(
                message=f"{len(numbers)} ticket(s) sold",
                sold=numbers,
                runs=[[start, end] for start, end in runs],
                amount=amount,
            )
        )
