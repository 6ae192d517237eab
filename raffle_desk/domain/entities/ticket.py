"""
Ticket Entity

A numbered raffle ticket and, once sold, who bought it.
"""

from datetime import datetime
from typing import Optional

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from raffle_desk.domain.base import utcnow
from .enums import TicketStatus


class Ticket(SQLModel, table=True):
    """
    Ticket entity - one printed raffle ticket.

    Business Rules:
    - Ticket number is the natural key (what is printed on the stub)
    - Only available tickets can be sold
    - Returning a ticket to available clears buyer details
    - version increments on every write (optimistic concurrency)
    """

    __tablename__ = "tickets"

    number: int = Field(primary_key=True, sa_column_kwargs={"autoincrement": False})
    status: TicketStatus = Field(default=TicketStatus.available)
    price: float = Field(default=0.0)

    buyer_name: Optional[str] = Field(default=None, max_length=255)
    buyer_contact: Optional[str] = Field(default=None, max_length=255)
    sold_by: Optional[str] = Field(default=None, max_length=255)
    sold_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    notes: Optional[str] = Field(default=None, max_length=1000)

    updated_at: datetime = Field(
        default_factory=utcnow, sa_column=Column(DateTime, nullable=False)
    )
    version: int = Field(default=1)

    __table_args__ = (Index("idx_ticket_status", "status"),)
