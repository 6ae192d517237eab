from unittest.mock import AsyncMock, MagicMock

import pytest

from config import ApplicationConfig
from raffle_desk.app.services.passwords import hash_password
from raffle_desk.app.use_cases.access import AuthorizedUser
from raffle_desk.domain.entities import AccountStatus, StaffAccount, StaffRole
from tests.utils.clock import NOW


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    monkeypatch.setattr(ApplicationConfig, "BCRYPT_ROUNDS", 4)


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.staff = MagicMock()
    uow.staff.get_by_email = AsyncMock(return_value=None)
    uow.staff.create = AsyncMock(side_effect=lambda account: account)
    uow.staff.update = AsyncMock(side_effect=lambda account: account)
    uow.staff.list_all = AsyncMock(return_value=[])
    uow.staff.list_by_role = AsyncMock(return_value=[])

    uow.tickets = MagicMock()
    uow.tickets.get_by_number = AsyncMock(return_value=None)
    uow.tickets.get_many = AsyncMock(return_value=[])
    uow.tickets.list = AsyncMock(return_value=[])
    uow.tickets.list_all = AsyncMock(return_value=[])
    uow.tickets.create_many = AsyncMock(side_effect=lambda tickets: len(tickets))
    uow.tickets.update = AsyncMock(side_effect=lambda ticket: ticket)
    uow.tickets.update_range = AsyncMock()
    uow.tickets.stats = AsyncMock(return_value={"by_status": {}, "revenue": 0.0})
    return uow


@pytest.fixture
def make_account():
    def _make(
        email="staff@raffle.org",
        password="secret123",
        role=StaffRole.staff,
        status=AccountStatus.approved,
        active=True,
        created_at=NOW,
        validity_days=30,
        **extra,
    ):
        return StaffAccount(
            email=email,
            name=extra.pop("name", "Sam Staff"),
            role=role,
            password_hash=hash_password(password),
            status=status,
            active=active,
            created_at=created_at,
            validity_days=validity_days,
            day_urls=extra.pop("day_urls", {}),
            **extra,
        )

    return _make


@pytest.fixture
def admin_user():
    return AuthorizedUser(email="admin@raffle.org", name="Ada Admin", role=StaffRole.admin)


@pytest.fixture
def staff_user():
    return AuthorizedUser(email="staff@raffle.org", name="Sam Staff", role=StaffRole.staff)
