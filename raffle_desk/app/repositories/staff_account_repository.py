from abc import ABC, abstractmethod
from typing import List, Optional

from raffle_desk.domain.entities import StaffAccount, StaffRole


class IStaffAccountRepository(ABC):
    """StaffAccount repository interface - application layer"""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[StaffAccount]:
        """Get account by normalized email (detached snapshot)"""
        pass

    @abstractmethod
    async def create(self, account: StaffAccount) -> StaffAccount:
        """
        Append a new account.

        Raises:
            DuplicateKeyError: another writer already stored this email
        """
        pass

    @abstractmethod
    async def update(self, account: StaffAccount) -> StaffAccount:
        """
        Write the account back if its version is unchanged.

        Raises:
            VersionConflictError: the stored version moved on since the read
        """
        pass

    @abstractmethod
    async def list_all(self) -> List[StaffAccount]:
        """Scan every account"""
        pass

    @abstractmethod
    async def list_by_role(self, role: StaffRole) -> List[StaffAccount]:
        """Scan accounts holding a role"""
        pass
