"""
Ticket Query Use Cases

Read-only views over the ticket store.
"""

from typing import List, Optional

from raffle_desk.app.services.unit_of_work import UnitOfWork
from raffle_desk.domain.entities import Ticket, TicketStatus
from raffle_desk.domain.fuzzy import fuzzy_score
from raffle_desk.libs.result import Error, Result, Return
from .dtos import (
    TicketInfo,
    TicketListResponse,
    TicketResponse,
    TicketSearchHit,
    TicketSearchResponse,
    TicketStatsResponse,
)

MAX_PAGE_SIZE = 500
MAX_SEARCH_RESULTS = 50


class ListTicketsUseCase:
    """Page through tickets ordered by number, optionally by status."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, status: Optional[TicketStatus] = None, offset: int = 0, limit: int = 100
    ) -> Result[TicketListResponse]:
        if offset < 0 or limit < 1 or limit > MAX_PAGE_SIZE:
            return Return.err(
                Error(
                    "INVALID_INPUT",
                    f"offset must be >= 0 and limit between 1 and {MAX_PAGE_SIZE}",
                )
            )

        async with self.uow:
            tickets = await self.uow.tickets.list(status, offset, limit)

        return Return.ok(
            TicketListResponse(
                tickets=[TicketInfo.from_entity(t) for t in tickets],
                offset=offset,
                limit=limit,
            )
        )


class GetTicketUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, number: int) -> Result[TicketResponse]:
        async with self.uow:
            ticket = await self.uow.tickets.get_by_number(number)

        if ticket is None:
            return Return.err(Error("NOT_FOUND", f"Ticket {number} not found"))
        return Return.ok(TicketResponse(ticket=TicketInfo.from_entity(ticket)))


class TicketStatsUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self) -> Result[TicketStatsResponse]:
        async with self.uow:
            stats = await self.uow.tickets.stats()

        by_status = {s.value: 0 for s in TicketStatus}
        by_status.update(stats["by_status"])
        return Return.ok(
            TicketStatsResponse(
                total=sum(by_status.values()),
                by_status=by_status,
                revenue=round(stats["revenue"], 2),
            )
        )


def score_ticket(query: str, ticket: Ticket) -> Optional[float]:
    """Best fuzzy score over the fields staff search by"""
    scores = [
        fuzzy_score(query, str(ticket.number)),
        fuzzy_score(query, ticket.buyer_name),
        fuzzy_score(query, ticket.buyer_contact),
    ]
    matched = [s for s in scores if s is not None]
    return max(matched) if matched else None


class SearchTicketsUseCase:
    """
    Fuzzy search over ticket number, buyer name and buyer contact.

    Business Rules:
    - Query characters must appear in order in at least one field
    - Results are sorted by score, then ticket number
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, query: str, limit: int = 20) -> Result[TicketSearchResponse]:
        query = (query or "").strip()
        if not query:
            return Return.err(Error("INVALID_INPUT", "Search query is required"))
        if limit < 1 or limit > MAX_SEARCH_RESULTS:
            return Return.err(
                Error("INVALID_INPUT", f"limit must be between 1 and {MAX_SEARCH_RESULTS}")
            )

        async with self.uow:
            tickets = await self.uow.tickets.list_all()

        hits: List[TicketSearchHit] = []
        for ticket in tickets:
            score = score_ticket(query, ticket)
            if score is not None:
                hits.append(TicketSearchHit(score=score, ticket=TicketInfo.from_entity(ticket)))

        hits.sort(key=lambda h: (-h.score, h.ticket.number))
        return Return.ok(TicketSearchResponse(query=query, results=hits[:limit]))
