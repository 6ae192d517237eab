import pytest

from raffle_desk.app.services.rate_limiter import RateLimitRule
from raffle_desk.domain.entities import RateClass


@pytest.mark.asyncio
async def test_search_limit_returns_429(call, staff_token, rate_limiter):
    rate_limiter.rules[RateClass.search] = RateLimitRule(requests=2, window_seconds=60)

    for _ in range(2):
        response = await call("search_tickets", staff_token, query="jo")
        assert response.status_code == 200

    limited = await call("search_tickets", staff_token, query="jo")

    assert limited.status_code == 429
    data = limited.json()
    assert data["code"] == "RATE_LIMIT"
    assert data["status"] == 429
    assert data["retryAfter"] > 0
    assert data["details"]["retryAfter"] == data["retryAfter"]
    assert limited.headers["Retry-After"] == str(data["retryAfter"])

    # Other classes keep their own budget
    stats = await call("ticket_stats", staff_token)
    assert stats.status_code == 200


@pytest.mark.asyncio
async def test_login_attempts_are_limited_per_email(call, create_account, rate_limiter):
    rate_limiter.rules[RateClass.auth] = RateLimitRule(requests=3, window_seconds=60)
    await create_account("sam@raffle.org", "secret123")

    for _ in range(3):
        response = await call("login", email="sam@raffle.org", password="nope-nope")
        assert response.json()["code"] == "INVALID_CREDENTIALS"

    limited = await call("login", email="sam@raffle.org", password="secret123")
    assert limited.status_code == 429
