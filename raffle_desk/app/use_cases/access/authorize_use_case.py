"""
Authorize Use Case

The access guard every protected action passes through before touching state.
"""

from typing import Optional

from raffle_desk.app.services.unit_of_work import UnitOfWork
from raffle_desk.domain.base import normalize_email
from raffle_desk.domain.entities import AccountStatus, StaffRole
from raffle_desk.libs.result import Error, Result, Return
from .dtos import AuthorizedUser


def role_satisfies(role: StaffRole, required_role: Optional[StaffRole]) -> bool:
    """Admin satisfies every requirement; otherwise roles must match."""
    if required_role is None:
        return True
    return role == StaffRole.admin or role == required_role


class AuthorizeUseCase:
    """
    Use case resolving a caller identity to an authorized staff member.

    Business Rules:
    - No identity (missing or invalid session token): AUTH_REQUIRED
    - Identity without an account: UNAUTHORIZED
    - Pending: ACCOUNT_PENDING; Disabled/Rejected or inactive: ACCOUNT_DISABLED
    - Stored status Expired: ACCOUNT_EXPIRED. Validity is not re-evaluated
      here; only login moves an account to Expired
    - required_role is met by that role or by admin (INSUFFICIENT_ROLE otherwise)
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, identity: Optional[str], required_role: Optional[StaffRole] = None
    ) -> Result[AuthorizedUser]:
        if not identity:
            return Return.err(Error("AUTH_REQUIRED", "Authentication required"))

        async with self.uow:
            account = await self.uow.staff.get_by_email(normalize_email(identity))

        if account is None:
            return Return.err(Error("UNAUTHORIZED", "No staff account for this session"))

        if account.status == AccountStatus.pending:
            return Return.err(
                Error("ACCOUNT_PENDING", "Account is awaiting admin approval")
            )

        if (
            account.status in (AccountStatus.disabled, AccountStatus.rejected)
            or not account.active
        ):
            return Return.err(Error("ACCOUNT_DISABLED", "Account is disabled"))

        if account.status == AccountStatus.expired:
            return Return.err(Error("ACCOUNT_EXPIRED", "Account validity has ended"))

        if not role_satisfies(account.role, required_role):
            return Return.err(
                Error(
                    "INSUFFICIENT_ROLE",
                    f"This action requires the {required_role.value} role",
                )
            )

        return Return.ok(
            AuthorizedUser(email=account.email, name=account.name, role=account.role)
        )
