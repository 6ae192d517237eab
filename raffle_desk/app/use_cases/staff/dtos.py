"""
Staff Administration DTOs (Data Transfer Objects)
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import ConfigDict, Field

from raffle_desk.app.use_cases.base_dto import CamelModel
from raffle_desk.domain.entities import WEEKDAY_NAMES, StaffAccount, StaffRole


# ============================================================================
# Command DTOs
# ============================================================================


class StaffPatch(CamelModel):
    """
    Partial update of a staff account.

    Only fields present in ``model_fields_set`` are applied; an empty URL
    clears that weekday's redirect.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    role: Optional[StaffRole] = None
    validity_days: Optional[int] = Field(default=None, gt=0)

    sunday_url: Optional[str] = None
    monday_url: Optional[str] = None
    tuesday_url: Optional[str] = None
    wednesday_url: Optional[str] = None
    thursday_url: Optional[str] = None
    friday_url: Optional[str] = None
    saturday_url: Optional[str] = None

    def day_url_changes(self) -> Dict[str, Optional[str]]:
        """Weekday index ("0" = Sunday) -> new URL, for the URLs present in the patch"""
        changes = {}
        for index, day in enumerate(WEEKDAY_NAMES):
            field_name = f"{day}_url"
            if field_name in self.model_fields_set:
                url = (getattr(self, field_name) or "").strip()
                changes[str(index)] = url or None
        return changes


# ============================================================================
# Response DTOs
# ============================================================================


class StaffAccountInfo(CamelModel):
    """Staff account as shown to admins and to the account owner"""

    email: str
    name: str
    role: str
    status: str
    active: bool
    created_at: datetime
    validity_days: int
    expires_at: datetime
    days_remaining: int
    day_urls: Dict[str, str]

    @classmethod
    def from_entity(cls, account: StaffAccount, now: datetime) -> "StaffAccountInfo":
        return cls(
            email=account.email,
            name=account.name,
            role=account.role.value,
            status=account.status.value,
            active=account.active,
            created_at=account.created_at,
            validity_days=account.validity_days,
            expires_at=account.expires_at(),
            days_remaining=account.days_remaining(now),
            day_urls=dict(account.day_urls or {}),
        )


class StaffListResponse(CamelModel):
    """Response for list staff use case"""

    staff: List[StaffAccountInfo]
    total: int


class StaffChangeResponse(CamelModel):
    """Response for approve / extend / update staff use cases"""

    message: str
    staff: StaffAccountInfo


class ProfileResponse(CamelModel):
    """Response for the caller's own profile"""

    profile: StaffAccountInfo
