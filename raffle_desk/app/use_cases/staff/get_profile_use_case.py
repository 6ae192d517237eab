from datetime import datetime
from typing import Callable

from raffle_desk.app.services.unit_of_work import UnitOfWork
from raffle_desk.app.use_cases.access import AuthorizedUser
from raffle_desk.domain.base import utcnow
from raffle_desk.libs.result import Error, Result, Return
from .dtos import ProfileResponse, StaffAccountInfo


class GetProfileUseCase:
    """The caller's own account and remaining validity."""

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow):
        self.uow = uow
        self.clock = clock

    async def execute(self, caller: AuthorizedUser) -> Result[ProfileResponse]:
        async with self.uow:
            account = await self.uow.staff.get_by_email(caller.email)

        if account is None:
            return Return.err(Error("NOT_FOUND", "Staff account not found"))

        return Return.ok(
            ProfileResponse(profile=StaffAccountInfo.from_entity(account, self.clock()))
        )
