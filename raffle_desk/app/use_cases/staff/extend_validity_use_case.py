"""
Extend Validity Use Case
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


class ExtendValidityUseCase:
    """
    Use case for lengthening a staff account's validity window.

    Business Rules:
    - Only admins may extend
    - validity_days grows by exactly additional_days (a positive integer)
    - An Expired account is brought back to Approved and active
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow):
        self.uow = uow
        self.clock = clock

    async def execute(
        self, admin: AuthorizedUser, target_email: str, additional_days: int
    ) -> Result[StaffChangeResponse]:
        if not admin.is_admin:
            return Return.err(
                Error("INSUFFICIENT_ROLE", "Only admins can extend staff validity")
            )

        if additional_days is None or additional_days <= 0:
            return Return.err(
                Error("INVALID_INPUT", "additionalDays must be a positive integer")
            )

        async with self.uow:
            account = await self.uow.staff.get_by_email(normalize_email(target_email))
            if account is None:
                return Return.err(Error("NOT_FOUND", "Staff account not found"))

            account.validity_days += additional_days
            resurrected = account.status == AccountStatus.expired
            if resurrected:
                account.status = AccountStatus.approved
                account.active = True

            await self.uow.staff.update(account)
            await self.uow.commit()

        logger.info(
            f"Validity of {account.email} extended by {additional_days} days "
            f"to {account.validity_days} by {admin.email}"
        )
        message = f"Validity extended by {additional_days} days"
        if resurrected:
            message += "; account re-approved"
        return Return.ok(
            StaffChangeResponse(
                message=message,
                staff=StaffAccountInfo.from_entity(account, self.clock()),
            )
        )
