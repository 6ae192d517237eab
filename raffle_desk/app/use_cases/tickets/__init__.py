"""
Ticket Use Cases

Ticket listing, search, sales and status tracking.
"""

from .query_tickets_use_case import (
    GetTicketUseCase,
    ListTicketsUseCase,
    SearchTicketsUseCase,
    TicketStatsUseCase,
)
from .log_sale_use_case import LogSaleUseCase
from .update_ticket_use_case import UpdateTicketUseCase
from .add_tickets_use_case import AddTicketsUseCase
from .dtos import (
    AddTicketsCommand,
    LogSaleCommand,
    UpdateTicketCommand,
    TicketInfo,
    TicketResponse,
    TicketListResponse,
    TicketSearchResponse,
    TicketStatsResponse,
    LogSaleResponse,
    AddTicketsResponse,
)

__all__ = [
    # Use Cases
    "ListTicketsUseCase",
    "GetTicketUseCase",
    "TicketStatsUseCase",
    "SearchTicketsUseCase",
    "LogSaleUseCase",
    "UpdateTicketUseCase",
    "AddTicketsUseCase",
    # DTOs - Commands
    "AddTicketsCommand",
    "LogSaleCommand",
    "UpdateTicketCommand",
    # DTOs - Responses
    "TicketInfo",
    "TicketResponse",
    "TicketListResponse",
    "TicketSearchResponse",
    "TicketStatsResponse",
    "LogSaleResponse",
    "AddTicketsResponse",
]
