from datetime import timedelta

import pytest

from raffle_desk.api.utils.jwt import verify_jwt
from raffle_desk.app.use_cases.auth import LoginUseCase
from raffle_desk.app.use_cases.auth.login_use_case import weekday_index
from raffle_desk.domain.entities import AccountStatus, StaffRole
from tests.utils.clock import NOW


@pytest.mark.asyncio
async def test_successful_login(mock_uow, make_account):
    """Approved account inside its window gets a token and today's redirect"""
    mock_uow.staff.get_by_email.return_value = make_account(
        role=StaffRole.admin, day_urls={"0": "https://raffle.org/sunday"}
    )
    use_case = LoginUseCase(mock_uow, clock=lambda: NOW)

    result = await use_case.execute("Staff@Raffle.org", "secret123")

    assert result.is_ok()
    data = result.value
    assert data.user.email == "staff@raffle.org"
    assert data.user.role == "admin"
    assert data.redirect_url == "https://raffle.org/sunday"
    assert data.validity.validity_days == 30
    assert data.validity.days_remaining == 30

    claims = verify_jwt(data.token)
    assert claims["sub"] == "staff@raffle.org"
    assert claims["role"] == "admin"
    mock_uow.staff.update.assert_not_called()


@pytest.mark.asyncio
async def test_login_no_redirect_for_other_days(mock_uow, make_account):
    mock_uow.staff.get_by_email.return_value = make_account(
        day_urls={"1": "https://raffle.org/monday"}
    )
    use_case = LoginUseCase(mock_uow, clock=lambda: NOW)

    result = await use_case.execute("staff@raffle.org", "secret123")

    assert result.is_ok()
    assert result.value.redirect_url is None


@pytest.mark.asyncio
async def test_login_unknown_email(mock_uow):
    use_case = LoginUseCase(mock_uow, clock=lambda: NOW)

    result = await use_case.execute("ghost@raffle.org", "secret123")

    assert result.is_err()
    assert result.error.code == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_login_wrong_password(mock_uow, make_account):
    mock_uow.staff.get_by_email.return_value = make_account()
    use_case = LoginUseCase(mock_uow, clock=lambda: NOW)

    result = await use_case.execute("staff@raffle.org", "wrong-password")

    assert result.is_err()
    assert result.error.code == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_login_wrong_password_on_pending_account_hides_status(mock_uow, make_account):
    mock_uow.staff.get_by_email.return_value = make_account(
        status=AccountStatus.pending, active=False
    )
    use_case = LoginUseCase(mock_uow, clock=lambda: NOW)

    result = await use_case.execute("staff@raffle.org", "wrong-password")

    assert result.error.code == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status,active,code",
    [
        (AccountStatus.pending, False, "ACCOUNT_PENDING"),
        (AccountStatus.disabled, False, "ACCOUNT_DISABLED"),
        (AccountStatus.rejected, False, "ACCOUNT_DISABLED"),
        (AccountStatus.approved, False, "ACCOUNT_DISABLED"),
    ],
)
async def test_login_refused_by_status(mock_uow, make_account, status, active, code):
    mock_uow.staff.get_by_email.return_value = make_account(status=status, active=active)
    use_case = LoginUseCase(mock_uow, clock=lambda: NOW)

    result = await use_case.execute("staff@raffle.org", "secret123")

    assert result.is_err()
    assert result.error.code == code
    mock_uow.staff.update.assert_not_called()


@pytest.mark.asyncio
async def test_login_last_instant_of_validity(mock_uow, make_account):
    """now == created_at + validity_days is still inside the window"""
    mock_uow.staff.get_by_email.return_value = make_account(
        created_at=NOW - timedelta(days=30)
    )
    use_case = LoginUseCase(mock_uow, clock=lambda: NOW)

    result = await use_case.execute("staff@raffle.org", "secret123")

    assert result.is_ok()
    assert result.value.validity.days_remaining == 0


@pytest.mark.asyncio
async def test_login_one_second_before_expiry(mock_uow, make_account):
    mock_uow.staff.get_by_email.return_value = make_account(
        created_at=NOW - timedelta(days=30)
    )
    use_case = LoginUseCase(mock_uow, clock=lambda: NOW - timedelta(seconds=1))

    result = await use_case.execute("staff@raffle.org", "secret123")

    assert result.is_ok()
    assert result.value.validity.days_remaining == 1


@pytest.mark.asyncio
async def test_login_one_second_after_expiry_persists_expired(mock_uow, make_account):
    account = make_account(created_at=NOW - timedelta(days=30))
    mock_uow.staff.get_by_email.return_value = account
    use_case = LoginUseCase(mock_uow, clock=lambda: NOW + timedelta(seconds=1))

    result = await use_case.execute("staff@raffle.org", "secret123")

    assert result.is_err()
    assert result.error.code == "ACCOUNT_EXPIRED"
    assert result.error.details["expiredAt"] == NOW.isoformat()

    mock_uow.staff.update.assert_called_once()
    assert mock_uow.staff.update.call_args.args[0].status == AccountStatus.expired
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_login_already_expired_does_not_rewrite(mock_uow, make_account):
    mock_uow.staff.get_by_email.return_value = make_account(
        status=AccountStatus.expired, created_at=NOW - timedelta(days=60)
    )
    use_case = LoginUseCase(mock_uow, clock=lambda: NOW)

    result = await use_case.execute("staff@raffle.org", "secret123")

    assert result.error.code == "ACCOUNT_EXPIRED"
    mock_uow.staff.update.assert_not_called()


def test_weekday_index_starts_on_sunday():
    assert weekday_index(NOW) == 0
    assert weekday_index(NOW + timedelta(days=1)) == 1
    assert weekday_index(NOW + timedelta(days=6)) == 6
