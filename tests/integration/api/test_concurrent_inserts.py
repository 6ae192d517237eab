import pytest
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from raffle_desk.adapter.repositories.staff_account_repository import StaffAccountRepository
from raffle_desk.adapter.repositories.ticket_repository import TicketRepository
from raffle_desk.app.services.passwords import hash_password
from raffle_desk.domain.base import utcnow
from raffle_desk.domain.entities import AccountStatus, StaffAccount, Ticket, TicketStatus


async def _insert_elsewhere(engine, *rows):
    """Commit rows through a second session, as a concurrent request would"""
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as other:
        other.add_all(rows)
        await other.commit()


@pytest.mark.asyncio
async def test_register_losing_race_is_email_exists(call, engine, monkeypatch, test_data):
    """Another registration commits the same email between lookup and insert"""
    original = StaffAccountRepository.get_by_email

    async def lookup_then_rival_registers(self, email):
        found = await original(self, email)
        await _insert_elsewhere(
            engine,
            StaffAccount(
                email=email,
                name="Rival",
                password_hash=hash_password("rival-pass"),
                status=AccountStatus.pending,
                created_at=utcnow(),
                day_urls={},
            ),
        )
        return found

    monkeypatch.setattr(StaffAccountRepository, "get_by_email", lookup_then_rival_registers)

    response = await call(**test_data.payload("register_staff"))

    assert response.status_code == 409
    data = response.json()
    assert data["code"] == "EMAIL_EXISTS"
    assert "INSERT" not in response.text
    assert "$2b$" not in response.text


@pytest.mark.asyncio
async def test_add_tickets_losing_race_is_version_conflict(
    call, engine, admin_token, monkeypatch, test_data
):
    original = TicketRepository.get_many

    async def lookup_then_rival_adds(self, numbers):
        found = await original(self, numbers)
        now = utcnow()
        await _insert_elsewhere(
            engine,
            *[Ticket(number=n, status=TicketStatus.available, price=5.0, updated_at=now) for n in (5, 6)],
        )
        return found

    monkeypatch.setattr(TicketRepository, "get_many", lookup_then_rival_adds)

    response = await call(token=admin_token, **test_data.payload("add_tickets"))

    assert response.status_code == 409
    assert response.json()["code"] == "VERSION_CONFLICT"
    assert "INSERT" not in response.text

    monkeypatch.setattr(TicketRepository, "get_many", original)
    stats = await call("ticket_stats", admin_token)
    assert stats.json()["total"] == 2
