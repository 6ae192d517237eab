"""
Register Use Case

Creates a Pending staff account that an admin must approve.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from email_validator import EmailNotValidError, validate_email

from config import ApplicationConfig
from raffle_desk.app.repositories.errors import DuplicateKeyError
from raffle_desk.app.services.mailer import IMailer
from raffle_desk.app.services.passwords import hash_password
from raffle_desk.app.services.unit_of_work import UnitOfWork
from raffle_desk.domain.base import normalize_email, utcnow
from raffle_desk.domain.entities import AccountStatus, StaffAccount, StaffRole
from raffle_desk.libs.result import Error, Result, Return
from .dtos import RegisterCommand, RegisterResponse, UserInfo

logger = logging.getLogger(__name__)


class RegisterUseCase:
    """
    Register Use Case

    Business Logic:
    1. Validate email format, name, password length and confirmation
    2. Reject duplicate (case-insensitive) email, including one stored
       concurrently between the lookup and the insert
    3. Append account with status=Pending, active=False, created_at=now
    4. Commit
    5. Notify every admin (best-effort; failures are logged only)
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

    def _validate(self, command: RegisterCommand) -> Result[None]:
        try:
            validate_email(command.email.strip(), check_deliverability=False)
        except EmailNotValidError:
            return Return.err(Error("INVALID_INPUT", "Invalid email address"))

        if not command.name.strip():
            return Return.err(Error("INVALID_INPUT", "Name is required"))

        if len(command.password) < ApplicationConfig.MIN_PASSWORD_LENGTH:
            return Return.err(
                Error(
                    "INVALID_INPUT",
                    f"Password must be at least {ApplicationConfig.MIN_PASSWORD_LENGTH} characters long",
                )
            )

        if command.password != command.confirm_password:
            return Return.err(Error("INVALID_INPUT", "Passwords do not match"))

        return Return.ok(None)

    async def execute(self, command: RegisterCommand) -> Result[RegisterResponse]:
        validation = self._validate(command)
        if validation.is_err():
            return Return.err(validation.error)

        email = normalize_email(command.email)

        async with self.uow:
            existing = await self.uow.staff.get_by_email(email)
            if existing:
                return Return.err(Error("EMAIL_EXISTS", "Email already registered"))

            account = StaffAccount(
                email=email,
                name=command.name.strip(),
                role=StaffRole.staff,
                password_hash=hash_password(command.password),
                status=AccountStatus.pending,
                active=False,
                created_at=self.clock(),
                validity_days=ApplicationConfig.DEFAULT_VALIDITY_DAYS,
                day_urls={},
            )
            try:
                await self.uow.staff.create(account)
            except DuplicateKeyError:
                logger.info(f"Concurrent registration lost the race: {email}")
                return Return.err(Error("EMAIL_EXISTS", "Email already registered"))
            admins = await self.uow.staff.list_by_role(StaffRole.admin)

            await self.uow.commit()

        logger.info(f"Staff registration pending approval: {email}")
        await self._notify_admins([a.email for a in admins], email, account.name)

        return Return.ok(
            RegisterResponse(
                message="Registration received. An admin must approve your account.",
                user=UserInfo(email=email, name=account.name, role=account.role.value),
                account_status=account.status.value,
            )
        )

    async def _notify_admins(self, admin_emails, email: str, name: str) -> None:
        if self.mailer is None or not admin_emails:
            return
        try:
            await self.mailer.send_registration_notice(admin_emails, email, name)
        except Exception as exc:
            logger.warning(f"Admin notification failed for {email}: {exc}")
