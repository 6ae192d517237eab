"""
Login Use Case

Authenticates a staff member and issues a session token.
"""

import logging
from datetime import datetime, timezone
from typing import Callable
from zoneinfo import ZoneInfo

from config import ApplicationConfig
from raffle_desk.api.utils.jwt import generate_jwt
from raffle_desk.app.services.passwords import burn_password_check, verify_password
from raffle_desk.app.services.unit_of_work import UnitOfWork
from raffle_desk.domain.base import normalize_email, utcnow
from raffle_desk.domain.entities import AccountStatus, StaffAccount
from raffle_desk.libs.result import Error, Result, Return
from .dtos import LoginResponse, UserInfo, ValidityInfo

logger = logging.getLogger(__name__)

DISABLED_STATUSES = (AccountStatus.disabled, AccountStatus.rejected)


def weekday_index(now: datetime) -> int:
    """Sunday=0 .. Saturday=6 in the configured redirect timezone."""
    local = now.replace(tzinfo=timezone.utc)
    if ApplicationConfig.REDIRECT_TIMEZONE not in ("UTC", "Etc/UTC"):
        local = local.astimezone(ZoneInfo(ApplicationConfig.REDIRECT_TIMEZONE))
    return (local.weekday() + 1) % 7


class LoginUseCase:
    """
    Use case for staff login and session token issuance.

    Business Rules:
    - Unknown email and wrong password both yield INVALID_CREDENTIALS
    - Pending accounts cannot log in (ACCOUNT_PENDING)
    - Disabled/Rejected or inactive accounts cannot log in (ACCOUNT_DISABLED)
    - Once now > created_at + validity_days the account is rewritten to
      Expired and the login fails ACCOUNT_EXPIRED. This write happens on
      read, so the stored status catches up with the clock
    - Success returns today's redirect URL and the remaining validity
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow):
        self.uow = uow
        self.clock = clock

    async def execute(self, email: str, password: str) -> Result[LoginResponse]:
        email = normalize_email(email)

        async with self.uow:
            account = await self.uow.staff.get_by_email(email)

            if account is None:
                burn_password_check()
                return Return.err(
                    Error("INVALID_CREDENTIALS", "Invalid email or password")
                )

            if not verify_password(password, account.password_hash):
                return Return.err(
                    Error("INVALID_CREDENTIALS", "Invalid email or password")
                )

            if account.status == AccountStatus.pending:
                return Return.err(
                    Error("ACCOUNT_PENDING", "Account is awaiting admin approval")
                )

            if account.status in DISABLED_STATUSES or not account.active:
                return Return.err(Error("ACCOUNT_DISABLED", "Account is disabled"))

            now = self.clock()
            if account.status == AccountStatus.expired or account.is_past_validity(now):
                return await self._expire(account)

            token = generate_jwt(account.email, account.role.value)

        logger.info(f"Staff login: {email}")
        return Return.ok(
            LoginResponse(
                user=UserInfo(
                    email=account.email, name=account.name, role=account.role.value
                ),
                token=token,
                redirect_url=account.redirect_url_for(weekday_index(now)),
                validity=ValidityInfo(
                    validity_days=account.validity_days,
                    expires_at=account.expires_at(),
                    days_remaining=account.days_remaining(now),
                ),
            )
        )

    async def _expire(self, account: StaffAccount) -> Result[LoginResponse]:
        if account.expire():
            await self.uow.staff.update(account)
            await self.uow.commit()
            logger.info(f"Staff account expired on login: {account.email}")

        expired_at = account.expires_at()
        return Return.err(
            Error(
                "ACCOUNT_EXPIRED",
                f"Account validity ended on {expired_at.isoformat()}",
                {"expiredAt": expired_at.isoformat()},
            )
        )
