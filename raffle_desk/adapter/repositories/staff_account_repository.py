from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from raffle_desk.app.repositories.errors import DuplicateKeyError, VersionConflictError
from raffle_desk.app.repositories.staff_account_repository import IStaffAccountRepository
from raffle_desk.domain.entities import StaffAccount, StaffRole


class StaffAccountRepository(IStaffAccountRepository):
    """StaffAccount repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _detach(self, accounts: List[StaffAccount]) -> List[StaffAccount]:
        # Only version-guarded updates may write an account back
        for account in accounts:
            self.session.expunge(account)
        return accounts

    async def get_by_email(self, email: str) -> Optional[StaffAccount]:
        """Get account by normalized email"""
        stmt = select(StaffAccount).where(StaffAccount.email == email)
        result = await self.session.exec(stmt)
        account = result.one_or_none()
        if account is not None:
            self._detach([account])
        return account

    async def create(self, account: StaffAccount) -> StaffAccount:
        """Append a new account"""
        self.session.add(account)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise DuplicateKeyError("StaffAccount", account.email) from exc
        await self.session.refresh(account)
        self.session.expunge(account)
        return account

    async def update(self, account: StaffAccount) -> StaffAccount:
        """Write the account if nobody else wrote it since it was read"""
        values = account.model_dump(exclude={"email", "version"})
        stmt = (
            update(StaffAccount)
            .where(
                StaffAccount.email == account.email,
                StaffAccount.version == account.version,
            )
            .values(**values, version=account.version + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount != 1:
            raise VersionConflictError("StaffAccount", account.email)
        account.version += 1
        return account

    async def list_all(self) -> List[StaffAccount]:
        """Scan every account ordered by email"""
        stmt = select(StaffAccount).order_by(StaffAccount.email)
        result = await self.session.exec(stmt)
        return self._detach(list(result.all()))

    async def list_by_role(self, role: StaffRole) -> List[StaffAccount]:
        """Scan accounts holding a role"""
        stmt = select(StaffAccount).where(StaffAccount.role == role)
        result = await self.session.exec(stmt)
        return self._detach(list(result.all()))
