import asyncio
import logging
import smtplib
import ssl
from email.mime.text import MIMEText
from typing import List, Optional

from config import ApplicationConfig
from raffle_desk.app.services.mailer import IMailer
from raffle_desk.domain.base import mask_email

logger = logging.getLogger(__name__)


class SmtpMailer(IMailer):
    """
    Sends plain-text mail over SMTP.

    When no host or sender is configured the message is logged instead of
    sent, so local setups work without a mail server. Every send runs in a
    worker thread and is bounded by MAIL_TIMEOUT_SECONDS; failures raise.
    """

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        user: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: Optional[bool] = None,
        from_email: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
    ):
        self.host = host if host is not None else ApplicationConfig.SMTP_HOST
        self.port = port or ApplicationConfig.SMTP_PORT
        self.user = user if user is not None else ApplicationConfig.SMTP_USER
        self.password = password if password is not None else ApplicationConfig.SMTP_PASSWORD
        self.use_tls = ApplicationConfig.SMTP_USE_TLS if use_tls is None else use_tls
        self.from_email = from_email or ApplicationConfig.MAIL_FROM or self.user
        self.timeout_seconds = timeout_seconds or ApplicationConfig.MAIL_TIMEOUT_SECONDS

    @property
    def is_configured(self) -> bool:
        return bool(self.host and self.from_email)

    async def send_otp(self, to_email: str, name: str, otp: str, ttl_minutes: int) -> None:
        organization = ApplicationConfig.ORGANIZATION_NAME
        body = (
            f"Hello {name},\n\n"
            f"Your password reset code for {organization} is: {otp}\n\n"
            f"The code expires in {ttl_minutes} minutes. "
            "If you did not ask for a reset you can ignore this message.\n"
        )
        await self._send([to_email], f"{organization} password reset code", body)

    async def send_registration_notice(
        self, admin_emails: List[str], staff_email: str, staff_name: str
    ) -> None:
        organization = ApplicationConfig.ORGANIZATION_NAME
        body = (
            f"A new staff account is waiting for approval.\n\n"
            f"Name: {staff_name}\n"
            f"Email: {staff_email}\n"
        )
        await self._send(admin_emails, f"{organization}: new staff registration", body)

    async def _send(self, recipients: List[str], subject: str, body: str) -> None:
        if not self.is_configured:
            logger.info(
                f"Mail not configured, skipping '{subject}' to "
                f"{', '.join(mask_email(r) for r in recipients)}"
            )
            return

        message = MIMEText(body, "plain")
        message["Subject"] = subject
        message["From"] = self.from_email
        message["To"] = ", ".join(recipients)

        await asyncio.wait_for(
            asyncio.to_thread(self._deliver, recipients, message.as_string()),
            timeout=self.timeout_seconds,
        )
        logger.info(f"Mail sent: '{subject}' to {len(recipients)} recipient(s)")

    def _deliver(self, recipients: List[str], payload: str) -> None:
        context = ssl.create_default_context()
        if self.use_tls:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout_seconds) as server:
                server.starttls(context=context)
                if self.user and self.password:
                    server.login(self.user, self.password)
                server.sendmail(self.from_email, recipients, payload)
        else:
            with smtplib.SMTP_SSL(
                self.host, self.port, context=context, timeout=self.timeout_seconds
            ) as server:
                if self.user and self.password:
                    server.login(self.user, self.password)
                server.sendmail(self.from_email, recipients, payload)
