from datetime import datetime
from typing import Callable

from raffle_desk.app.services.unit_of_work import UnitOfWork
from raffle_desk.app.use_cases.access import AuthorizedUser
from raffle_desk.domain.base import utcnow
from raffle_desk.libs.result import Error, Result, Return
from .dtos import StaffAccountInfo, StaffListResponse


class ListStaffUseCase:
    """Admin view of every staff account, ordered by email."""

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow):
        self.uow = uow
        self.clock = clock

    async def execute(self, admin: AuthorizedUser) -> Result[StaffListResponse]:
        if not admin.is_admin:
            return Return.err(
                Error("INSUFFICIENT_ROLE", "Only admins can list staff accounts")
            )

        async with self.uow:
            accounts = await self.uow.staff.list_all()

        now = self.clock()
        staff = [StaffAccountInfo.from_entity(a, now) for a in accounts]
        return Return.ok(StaffListResponse(staff=staff, total=len(staff)))
