"""
Verify OTP Use Case

Exchanges a valid one-time code for a password reset token.
"""

import logging
import secrets
from datetime import datetime
from typing import Callable

from config import ApplicationConfig
from raffle_desk.app.services.unit_of_work import UnitOfWork
from raffle_desk.domain.base import normalize_email, utcnow
from raffle_desk.domain.entities import RESET_MARKER_PREFIX, StaffAccount
from raffle_desk.libs.result import Error, Result, Return
from .dtos import VerifyOtpResponse

logger = logging.getLogger(__name__)


class VerifyOtpUseCase:
    """
    Use case for verifying a password reset code.

    Business Rules:
    - Fails INVALID_OTP when no code is stored, it does not match, or it expired
    - A stored reset marker is not a code and never verifies
    - Each wrong guess is counted; MAX_OTP_ATTEMPTS wrong guesses discard the code
    - On success the code is replaced by RESET:<token>, so it is single-use
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow):
        self.uow = uow
        self.clock = clock

    async def execute(self, email: str, otp: str) -> Result[VerifyOtpResponse]:
        email = normalize_email(email)
        invalid = Error("INVALID_OTP", "Invalid or expired verification code")

        async with self.uow:
            account = await self.uow.staff.get_by_email(email)
            if account is None or not account.otp or account.holds_reset_marker():
                return Return.err(invalid)

            if not secrets.compare_digest(account.otp.encode(), (otp or "").strip().encode()):
                await self._count_wrong_guess(account)
                return Return.err(invalid)

            if account.otp_expiry is None or account.otp_expiry < self.clock():
                return Return.err(invalid)

            reset_token = secrets.token_urlsafe(32)
            account.otp = f"{RESET_MARKER_PREFIX}{reset_token}"
            account.otp_attempts = 0
            await self.uow.staff.update(account)
            await self.uow.commit()

        return Return.ok(
            VerifyOtpResponse(
                message="Code verified. Choose a new password.",
                reset_token=reset_token,
            )
        )

    async def _count_wrong_guess(self, account: StaffAccount) -> None:
        account.otp_attempts += 1
        if account.otp_attempts >= ApplicationConfig.MAX_OTP_ATTEMPTS:
            logger.warning(f"Verification code discarded after {account.otp_attempts} wrong guesses")
            account.clear_otp()
        await self.uow.staff.update(account)
        await self.uow.commit()
