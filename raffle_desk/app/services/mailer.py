from abc import ABC, abstractmethod
from typing import List


class IMailer(ABC):
    """Outbound mail port. Implementations must bound every send with a timeout."""

    @abstractmethod
    async def send_otp(self, to_email: str, name: str, otp: str, ttl_minutes: int) -> None:
        """Deliver a password reset code"""
        pass

    @abstractmethod
    async def send_registration_notice(
        self, admin_emails: List[str], staff_email: str, staff_name: str
    ) -> None:
        """Tell admins a new staff account is waiting for approval"""
        pass
