from typing import List, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from raffle_desk.adapter.services.rate_window_store import MemoryRateWindowStore
from raffle_desk.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from raffle_desk.app.services.mailer import IMailer
from raffle_desk.app.services.passwords import hash_password
from raffle_desk.app.services.rate_limiter import RateLimiter, rules_from_config
from raffle_desk.depends import get_mailer, get_rate_limiter, get_unit_of_work
from raffle_desk.domain.base import utcnow
from raffle_desk.domain.entities import AccountStatus, StaffAccount, StaffRole
from tests.fixtures.json_loader import TestDataLoader
from tests.utils.api import EXEC_PATH


class RecordingMailer(IMailer):
    def __init__(self):
        self.otps: List[dict] = []
        self.notices: List[dict] = []

    async def send_otp(self, to_email, name, otp, ttl_minutes):
        self.otps.append({"to": to_email, "name": name, "otp": otp, "ttl": ttl_minutes})

    async def send_registration_notice(self, admin_emails, staff_email, staff_name):
        self.notices.append({"to": list(admin_emails), "email": staff_email, "name": staff_name})

    def last_otp(self, email: str) -> Optional[str]:
        sent = [m["otp"] for m in self.otps if m["to"] == email]
        return sent[-1] if sent else None


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    monkeypatch.setattr(ApplicationConfig, "BCRYPT_ROUNDS", 4)


@pytest_asyncio.fixture
def test_data():
    return TestDataLoader()


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def rate_limiter():
    return RateLimiter(MemoryRateWindowStore(), rules_from_config(ApplicationConfig.RATE_LIMITS))


@pytest_asyncio.fixture
async def client(db_session, mailer, rate_limiter):
    from raffle_desk.api.app import create_app

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter
    app.dependency_overrides[get_mailer] = lambda: mailer

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def create_account(db_session):
    """Insert an account directly, bypassing registration and approval"""

    async def _create(
        email: str,
        password: str,
        name: str = "Test Account",
        role: StaffRole = StaffRole.staff,
        status: AccountStatus = AccountStatus.approved,
        active: bool = True,
        **extra,
    ) -> StaffAccount:
        async with SqlAlchemyUnitOfWork(db_session) as uow:
            account = await uow.staff.create(
                StaffAccount(
                    email=email,
                    name=name,
                    role=role,
                    password_hash=hash_password(password),
                    status=status,
                    active=active,
                    created_at=extra.pop("created_at", utcnow()),
                    validity_days=extra.pop("validity_days", 30),
                    day_urls={},
                    **extra,
                )
            )
            await uow.commit()
        return account

    return _create


@pytest.fixture
def call(client):
    """POST an action with a JSON body"""

    async def _call(action: str, token: Optional[str] = None, **params):
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        return await client.post(EXEC_PATH, json={"action": action, **params}, headers=headers)

    return _call


async def _login_token(call, email: str, password: str) -> str:
    response = await call("login", email=email, password=password)
    assert response.status_code == 200, response.json()
    return response.json()["token"]


@pytest_asyncio.fixture
async def admin_token(call, create_account, test_data):
    admin = test_data.get("admin")
    await create_account(admin["email"], admin["password"], name=admin["name"], role=StaffRole.admin)
    return await _login_token(call, admin["email"], admin["password"])


@pytest_asyncio.fixture
async def staff_token(call, create_account, test_data):
    staff = test_data.get("staff")
    await create_account(staff["email"], staff["password"], name=staff["name"])
    return await _login_token(call, staff["email"], staff["password"])
