"""
Approve Staff Use Case

Admin decision on a staff account: approve, reject or disable.
"""

import logging
from datetime import datetime
from typing import Callable

from raffle_desk.app.services.unit_of_work import UnitOfWork
from raffle_desk.app.use_cases.access import AuthorizedUser
from raffle_desk.domain.base import normalize_email, utcnow
from raffle_desk.domain.entities import AccountStatus
from raffle_desk.libs.result import Error, Result, Return
from .dtos import StaffAccountInfo, StaffChangeResponse

logger = logging.getLogger(__name__)

DECISIONS = {
    "approve": AccountStatus.approved,
    "reject": AccountStatus.rejected,
    "disable": AccountStatus.disabled,
}


class ApproveStaffUseCase:
    """
    Use case for an admin decision on a staff account.

    Business Rules:
    - Only admins may decide
    - approve -> Approved, reject -> Rejected, disable -> Disabled
    - active is True only after approve
    - approve restarts the validity window (created_at = now)
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow):
        self.uow = uow
        self.clock = clock

    async def execute(
        self, admin: AuthorizedUser, target_email: str, decision: str
    ) -> Result[StaffChangeResponse]:
        if not admin.is_admin:
            return Return.err(
                Error("INSUFFICIENT_ROLE", "Only admins can approve staff accounts")
            )

        decision = (decision or "").strip().lower()
        new_status = DECISIONS.get(decision)
        if new_status is None:
            return Return.err(
                Error(
                    "INVALID_INPUT",
                    f"Invalid decision: {decision}. Must be one of: approve, reject, disable",
                )
            )

        async with self.uow:
            account = await self.uow.staff.get_by_email(normalize_email(target_email))
            if account is None:
                return Return.err(Error("NOT_FOUND", "Staff account not found"))

            now = self.clock()
            account.status = new_status
            account.active = new_status == AccountStatus.approved
            if new_status == AccountStatus.approved:
                account.created_at = now

            await self.uow.staff.update(account)
            await self.uow.commit()

        logger.info(f"Staff {account.email} set to {new_status.value} by {admin.email}")
        return Return.ok(
            StaffChangeResponse(
                message=f"Staff account {new_status.value.lower()}",
                staff=StaffAccountInfo.from_entity(account, now),
            )
        )
