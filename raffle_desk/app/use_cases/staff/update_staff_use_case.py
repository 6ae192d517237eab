"""
Update Staff Use Case

Partial update of a staff account's profile fields.
"""

import logging
from datetime import datetime
from typing import Callable

from raffle_desk.app.services.unit_of_work import UnitOfWork
from raffle_desk.app.use_cases.access import AuthorizedUser
from raffle_desk.domain.base import normalize_email, utcnow
from raffle_desk.libs.result import Error, Result, Return
from .dtos import StaffAccountInfo, StaffChangeResponse, StaffPatch

logger = logging.getLogger(__name__)


class UpdateStaffUseCase:
    """
    Use case for editing a staff account.

    Business Rules:
    - Only admins may edit
    - Only fields present in the patch are written; the rest stay untouched
    - Status, password and validity window start are not editable here
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow):
        self.uow = uow
        self.clock = clock

    async def execute(
        self, admin: AuthorizedUser, target_email: str, patch: StaffPatch
    ) -> Result[StaffChangeResponse]:
        if not admin.is_admin:
            return Return.err(
                Error("INSUFFICIENT_ROLE", "Only admins can update staff accounts")
            )

        async with self.uow:
            account = await self.uow.staff.get_by_email(normalize_email(target_email))
            if account is None:
                return Return.err(Error("NOT_FOUND", "Staff account not found"))

            changed = []
            if "name" in patch.model_fields_set and patch.name is not None:
                account.name = patch.name.strip()
                changed.append("name")
            if "role" in patch.model_fields_set and patch.role is not None:
                account.role = patch.role
                changed.append("role")
            if "validity_days" in patch.model_fields_set and patch.validity_days is not None:
                account.validity_days = patch.validity_days
                changed.append("validity_days")

            url_changes = patch.day_url_changes()
            if url_changes:
                # Assign a new dict so the JSON column is written
                day_urls = dict(account.day_urls or {})
                for weekday, url in url_changes.items():
                    if url is None:
                        day_urls.pop(weekday, None)
                    else:
                        day_urls[weekday] = url
                account.day_urls = day_urls
                changed.append("day_urls")

            if changed:
                await self.uow.staff.update(account)
                await self.uow.commit()

        logger.info(f"Staff {account.email} updated by {admin.email}: {changed}")
        return Return.ok(
            StaffChangeResponse(
                message="Staff account updated" if changed else "No changes",
                staff=StaffAccountInfo.from_entity(account, self.clock()),
            )
        )
