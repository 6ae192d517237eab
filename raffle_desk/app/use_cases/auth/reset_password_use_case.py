"""
Reset Password Use Case

Sets a new password once the reset token from OTP verification is presented.
"""

import logging
import secrets

from config import ApplicationConfig
from raffle_desk.app.services.passwords import hash_password
from raffle_desk.app.services.unit_of_work import UnitOfWork
from raffle_desk.domain.base import normalize_email
from raffle_desk.domain.entities import RESET_MARKER_PREFIX
from raffle_desk.libs.result import Error, Result, Return
from .dtos import ResetPasswordResponse

logger = logging.getLogger(__name__)


class ResetPasswordUseCase:
    """
    Use case for completing a password reset.

    Business Rules:
    - New password must be at least MIN_PASSWORD_LENGTH characters
    - Stored otp field must be exactly RESET:<reset_token>
    - Success re-hashes the password and clears otp and otp_expiry
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, email: str, reset_token: str, new_password: str
    ) -> Result[ResetPasswordResponse]:
        if len(new_password or "") < ApplicationConfig.MIN_PASSWORD_LENGTH:
            return Return.err(
                Error(
                    "INVALID_INPUT",
                    f"Password must be at least {ApplicationConfig.MIN_PASSWORD_LENGTH} characters long",
                )
            )

        email = normalize_email(email)

        async with self.uow:
            account = await self.uow.staff.get_by_email(email)
            expected = f"{RESET_MARKER_PREFIX}{reset_token or ''}"

            if (
                account is None
                or not reset_token
                or not account.otp
                or not secrets.compare_digest(account.otp.encode(), expected.encode())
            ):
                return Return.err(Error("INVALID_OTP", "Invalid or expired reset token"))

            account.password_hash = hash_password(new_password)
            account.clear_otp()
            await self.uow.staff.update(account)
            await self.uow.commit()

        logger.info(f"Password reset completed: {email}")
        return Return.ok(
            ResetPasswordResponse(message="Password has been reset successfully")
        )
