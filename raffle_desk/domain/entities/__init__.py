"""
Raffle Desk Domain Entities

All domain entities organized by model.
"""

from .enums import AccountStatus, RateClass, StaffRole, TicketStatus
from .staff_account import RESET_MARKER_PREFIX, WEEKDAY_NAMES, StaffAccount
from .ticket import Ticket

__all__ = [
    # Enums
    "AccountStatus",
    "RateClass",
    "StaffRole",
    "TicketStatus",
    # Entities
    "StaffAccount",
    "Ticket",
    # Constants
    "RESET_MARKER_PREFIX",
    "WEEKDAY_NAMES",
]
