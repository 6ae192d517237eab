"""
StaffAccount Entity

One record per staff member allowed to use the raffle desk.
"""

import math
from datetime import datetime, timedelta
from typing import Dict, Optional

from sqlmodel import JSON, Column, DateTime, Field, Index, SQLModel

from .enums import AccountStatus, StaffRole

RESET_MARKER_PREFIX = "RESET:"

# Sunday first, matching the weekday keys stored in day_urls
WEEKDAY_NAMES = (
    "sunday",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
)


class StaffAccount(SQLModel, table=True):
    """
    StaffAccount entity - a staff member's credentials and validity window.

    Business Rules:
    - Email is normalized (lower-cased) and unique
    - New accounts start Pending and inactive until an admin approves them
    - Approval restarts the validity window (created_at = approval time)
    - Login is refused once created_at + validity_days has passed; the
      status is rewritten to Expired at that moment
    - otp holds either a 6-digit code or a RESET:<token> marker, never both
    - A code is discarded after MAX_OTP_ATTEMPTS wrong guesses
    - version increments on every write (optimistic concurrency)
    """

    __tablename__ = "staff_accounts"

    email: str = Field(primary_key=True, max_length=255)
    name: str = Field(max_length=255)
    role: StaffRole = Field(default=StaffRole.staff)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    status: AccountStatus = Field(default=AccountStatus.pending)
    active: bool = Field(default=False)

    # Validity window
    created_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    validity_days: int = Field(default=30)

    # Password recovery
    otp: Optional[str] = Field(default=None, max_length=255)
    otp_expiry: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    otp_attempts: int = Field(default=0)  # wrong guesses against the current code

    # Weekday ("0" = Sunday .. "6" = Saturday) -> redirect URL
    day_urls: Dict[str, str] = Field(default_factory=dict, sa_column=Column(JSON))

    version: int = Field(default=1)

    __table_args__ = (
        Index("idx_staff_role", "role"),
        Index("idx_staff_status", "status"),
    )

    def expires_at(self) -> datetime:
        return self.created_at + timedelta(days=self.validity_days)

    def is_past_validity(self, now: datetime) -> bool:
        return now > self.expires_at()

    def days_remaining(self, now: datetime) -> int:
        remaining = (self.expires_at() - now) / timedelta(days=1)
        return max(0, math.ceil(remaining))

    def expire(self) -> bool:
        """
        Transition an account whose validity has lapsed to Expired.

        Returns True when the stored status changed and must be persisted.
        """
        if self.status == AccountStatus.expired:
            return False
        self.status = AccountStatus.expired
        return True

    def redirect_url_for(self, weekday: int) -> Optional[str]:
        url = (self.day_urls or {}).get(str(weekday))
        return url or None

    def holds_reset_marker(self) -> bool:
        return bool(self.otp) and self.otp.startswith(RESET_MARKER_PREFIX)

    def clear_otp(self) -> None:
        self.otp = None
        self.otp_expiry = None
        self.otp_attempts = 0
