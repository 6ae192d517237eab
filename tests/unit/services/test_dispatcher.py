import asyncio

import pytest

from raffle_desk.adapter.services.rate_window_store import MemoryRateWindowStore
from raffle_desk.api.utils.jwt import generate_jwt
from raffle_desk.app.dispatcher import ROUTES, ActionDispatcher, ActionRoute, classify_action
from raffle_desk.app.repositories.errors import VersionConflictError
from raffle_desk.app.services.rate_limiter import RateLimiter, RateLimitRule
from raffle_desk.domain.entities import RateClass, StaffRole
from raffle_desk.libs.result import Return


def _limiter(**limits):
    rules = {rc: RateLimitRule(requests=100, window_seconds=60) for rc in RateClass}
    for name, requests in limits.items():
        rules[RateClass(name)] = RateLimitRule(requests=requests, window_seconds=60)
    return RateLimiter(MemoryRateWindowStore(), rules, clock=lambda: 1000.0)


@pytest.mark.asyncio
async def test_unknown_action(mock_uow):
    dispatcher = ActionDispatcher(mock_uow, _limiter())

    result = await dispatcher.dispatch("drop_tables", {})

    assert result.error.code == "INVALID_ACTION"


@pytest.mark.asyncio
async def test_ping_is_public(mock_uow):
    result = await ActionDispatcher(mock_uow, _limiter()).dispatch("ping", {})

    assert result.value == {"message": "pong"}


@pytest.mark.asyncio
async def test_protected_action_without_token(mock_uow):
    result = await ActionDispatcher(mock_uow, _limiter()).dispatch("list_tickets", {})

    assert result.error.code == "AUTH_REQUIRED"
    mock_uow.tickets.list.assert_not_called()


@pytest.mark.asyncio
async def test_protected_action_with_garbage_token(mock_uow):
    result = await ActionDispatcher(mock_uow, _limiter()).dispatch(
        "list_tickets", {}, token="not-a-jwt"
    )

    assert result.error.code == "AUTH_REQUIRED"


@pytest.mark.asyncio
async def test_staff_cannot_run_admin_action(mock_uow, make_account):
    mock_uow.staff.get_by_email.return_value = make_account()
    token = generate_jwt("staff@raffle.org", "staff")

    result = await ActionDispatcher(mock_uow, _limiter()).dispatch(
        "approve_staff", {"targetEmail": "x@raffle.org", "decision": "approve"}, token
    )

    assert result.error.code == "INSUFFICIENT_ROLE"


@pytest.mark.asyncio
async def test_role_comes_from_account_not_token(mock_uow, make_account):
    """A token minted while admin loses admin rights once the account is demoted"""
    mock_uow.staff.get_by_email.return_value = make_account(role=StaffRole.staff)
    token = generate_jwt("staff@raffle.org", "admin")

    result = await ActionDispatcher(mock_uow, _limiter()).dispatch("list_staff", {}, token)

    assert result.error.code == "INSUFFICIENT_ROLE"


@pytest.mark.asyncio
async def test_rate_limit_per_class(mock_uow, make_account):
    mock_uow.staff.get_by_email.return_value = make_account()
    token = generate_jwt("staff@raffle.org", "staff")
    dispatcher = ActionDispatcher(mock_uow, _limiter(search=2))

    for _ in range(2):
        result = await dispatcher.dispatch("search_tickets", {"query": "jo"}, token)
        assert result.is_ok()

    limited = await dispatcher.dispatch("search_tickets", {"query": "jo"}, token)
    assert limited.error.code == "RATE_LIMIT"
    assert limited.error.details["retryAfter"] == 60

    # Reads have their own budget
    assert (await dispatcher.dispatch("ticket_stats", {}, token)).is_ok()


@pytest.mark.asyncio
async def test_login_is_limited_by_email(mock_uow):
    dispatcher = ActionDispatcher(mock_uow, _limiter(auth=2))
    params = {"email": "Someone@Raffle.org", "password": "nope"}

    for _ in range(2):
        result = await dispatcher.dispatch("login", params)
        assert result.error.code == "INVALID_CREDENTIALS"

    limited = await dispatcher.dispatch("login", {"email": "someone@raffle.org", "password": "x"})
    assert limited.error.code == "RATE_LIMIT"

    other = await dispatcher.dispatch("login", {"email": "other@raffle.org", "password": "x"})
    assert other.error.code == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_missing_parameter_is_invalid_input(mock_uow):
    result = await ActionDispatcher(mock_uow, _limiter()).dispatch("verify_otp", {"email": "a@b.org"})

    assert result.error.code == "INVALID_INPUT"
    assert "otp" in result.error.message


def _raising_routes(exc):
    async def handler(dispatcher, ctx):
        raise exc

    return {"boom": ActionRoute(handler, public=True)}


@pytest.mark.asyncio
async def test_unexpected_exception_becomes_server_error(mock_uow):
    dispatcher = ActionDispatcher(mock_uow, _limiter(), routes=_raising_routes(RuntimeError("disk full")))

    result = await dispatcher.dispatch("boom", {})

    assert result.error.code == "SERVER_ERROR"
    assert result.error.details == {"detail": "boom failed (RuntimeError)"}
    assert "disk full" not in result.error.message


@pytest.mark.asyncio
async def test_version_conflict_is_reported(mock_uow):
    dispatcher = ActionDispatcher(
        mock_uow, _limiter(), routes=_raising_routes(VersionConflictError("Ticket", 3))
    )

    result = await dispatcher.dispatch("boom", {})

    assert result.error.code == "VERSION_CONFLICT"


@pytest.mark.asyncio
async def test_slow_action_times_out(mock_uow):
    async def slow(dispatcher, ctx):
        await asyncio.sleep(5)
        return Return.ok({})

    dispatcher = ActionDispatcher(
        mock_uow, _limiter(), routes={"slow": ActionRoute(slow, public=True)}, timeout_seconds=0.05
    )

    result = await dispatcher.dispatch("slow", {})

    assert result.error.code == "SERVER_ERROR"


def test_action_classes():
    assert classify_action("search_tickets") == RateClass.search
    assert classify_action("log_sale") == RateClass.write
    assert classify_action("login") == RateClass.auth
    assert classify_action("list_tickets") == RateClass.read
    assert classify_action("something_new") == RateClass.read
    assert ROUTES["add_tickets"].required_role == StaffRole.admin
