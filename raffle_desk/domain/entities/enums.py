"""
Raffle Desk Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class StaffRole(str, Enum):
    """Staff account role; admin is a superset of staff"""

    staff = "staff"
    admin = "admin"


class AccountStatus(str, Enum):
    """Staff account lifecycle status"""

    pending = "Pending"
    approved = "Approved"
    disabled = "Disabled"
    rejected = "Rejected"
    expired = "Expired"


class TicketStatus(str, Enum):
    """Raffle ticket status"""

    available = "available"
    sold = "sold"
    void = "void"


class RateClass(str, Enum):
    """Action classes with independent rate limits"""

    read = "read"
    write = "write"
    search = "search"
    auth = "auth"
