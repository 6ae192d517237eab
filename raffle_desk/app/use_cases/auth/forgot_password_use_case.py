"""
Forgot Password Use Case

Issues a short-lived one-time code for password recovery.
"""

import logging
import secrets
from datetime import datetime, timedelta
from typing import Callable, Optional

from config import ApplicationConfig
from raffle_desk.app.services.mailer import IMailer
from raffle_desk.app.services.unit_of_work import UnitOfWork
from raffle_desk.domain.base import mask_email, normalize_email, utcnow
from raffle_desk.libs.result import Result, Return
from .dtos import ForgotPasswordResponse

logger = logging.getLogger(__name__)

FORGOT_PASSWORD_MESSAGE = "If the email is registered, a verification code has been sent"


def generate_otp() -> str:
    """6-digit numeric code, zero padded"""
    return f"{secrets.randbelow(1_000_000):06d}"


class ForgotPasswordUseCase:
    """
    Use case for requesting a password reset code.

    Business Rules:
    - 6-digit numeric OTP, valid for OTP_TTL_MINUTES
    - Issuing a new OTP replaces any earlier OTP or reset marker
    - Mail delivery is best-effort; failures are logged, never surfaced
    - No email enumeration (same response for registered/unknown emails)
    """

    def __init__(
        self,
        uow: UnitOfWork,
        mailer: Optional[IMailer] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.uow = uow
        self.mailer = mailer
        self.clock = clock

    async def execute(self, email: str) -> Result[ForgotPasswordResponse]:
        email = normalize_email(email)
        response = ForgotPasswordResponse(
            message=FORGOT_PASSWORD_MESSAGE, email=mask_email(email)
        )

        async with self.uow:
            account = await self.uow.staff.get_by_email(email)
            if account is None:
                return Return.ok(response)

            otp = generate_otp()
            account.otp = otp
            account.otp_attempts = 0
            account.otp_expiry = self.clock() + timedelta(
                minutes=ApplicationConfig.OTP_TTL_MINUTES
            )
            await self.uow.staff.update(account)
            await self.uow.commit()

        await self._deliver(account.email, account.name, otp)
        return Return.ok(response)

    async def _deliver(self, email: str, name: str, otp: str) -> None:
        if self.mailer is None:
            return
        try:
            await self.mailer.send_otp(email, name, otp, ApplicationConfig.OTP_TTL_MINUTES)
        except Exception as exc:
            logger.warning(f"OTP delivery failed for {mask_email(email)}: {exc}")
