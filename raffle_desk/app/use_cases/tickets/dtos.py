"""
Ticket Use Case DTOs (Data Transfer Objects)
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import ConfigDict, Field

from raffle_desk.app.use_cases.base_dto import CamelModel
from raffle_desk.domain.entities import Ticket, TicketStatus


# ============================================================================
# Command DTOs
# ============================================================================


class LogSaleCommand(CamelModel):
    """Sale of one or more tickets to one buyer"""

    model_config = ConfigDict(str_strip_whitespace=True)

    numbers: str = Field(..., min_length=1)
    buyer_name: str = Field(..., min_length=1, max_length=255)
    buyer_contact: Optional[str] = Field(default=None, max_length=255)
    notes: Optional[str] = Field(default=None, max_length=1000)


class UpdateTicketCommand(CamelModel):
    """Status change on a single ticket"""

    model_config = ConfigDict(str_strip_whitespace=True)

    number: int
    status: TicketStatus
    buyer_name: Optional[str] = Field(default=None, max_length=255)
    buyer_contact: Optional[str] = Field(default=None, max_length=255)
    notes: Optional[str] = Field(default=None, max_length=1000)


class AddTicketsCommand(CamelModel):
    """Create tickets start..end inclusive"""

    start: int = Field(..., ge=1)
    end: int = Field(..., ge=1)
    price: float = Field(default=0.0, ge=0)


# ============================================================================
# Response DTOs
# ============================================================================


class TicketInfo(CamelModel):
    number: int
    status: str
    price: float
    buyer_name: Optional[str] = None
    buyer_contact: Optional[str] = None
    sold_by: Optional[str] = None
    sold_at: Optional[datetime] = None
    notes: Optional[str] = None
    updated_at: datetime

    @classmethod
    def from_entity(cls, ticket: Ticket) -> "TicketInfo":
        return cls(
            number=ticket.number,
            status=ticket.status.value,
            price=ticket.price,
            buyer_name=ticket.buyer_name,
            buyer_contact=ticket.buyer_contact,
            sold_by=ticket.sold_by,
            sold_at=ticket.sold_at,
            notes=ticket.notes,
            updated_at=ticket.updated_at,
        )


class TicketResponse(CamelModel):
    ticket: TicketInfo


class TicketListResponse(CamelModel):
    tickets: List[TicketInfo]
    offset: int
    limit: int


class TicketSearchHit(CamelModel):
    score: float
    ticket: TicketInfo


class TicketSearchResponse(CamelModel):
    query: str
    results: List[TicketSearchHit]


class TicketStatsResponse(CamelModel):
    total: int
    by_status: Dict[str, int]
    revenue: float


class LogSaleResponse(CamelModel):
    message: str
    sold: List[int]
    runs: List[List[int]]
    amount: float


class AddTicketsResponse(CamelModel):
    message: str
    created: int
    skipped: int
