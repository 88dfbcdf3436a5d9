"""Tests for the fixed-window rate limiter and its use on the API."""

from reviewdesk.core.rate_limit import InMemoryRateLimiter, rate_limit_key
from reviewdesk.main import app


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_allows_budget_then_blocks():
    limiter = InMemoryRateLimiter(max_requests=3, window_seconds=60, clock=FakeClock())
    assert [limiter.check("k") for _ in range(4)] == [True, True, True, False]


def test_window_resets_after_expiry():
    clock = FakeClock()
    limiter = InMemoryRateLimiter(max_requests=1, window_seconds=60, clock=clock)
    assert limiter.check("k")
    assert not limiter.check("k")
    clock.now += 60
    assert limiter.check("k")


def test_keys_are_independent():
    limiter = InMemoryRateLimiter(max_requests=1, window_seconds=60, clock=FakeClock())
    assert limiter.check("a")
    assert limiter.check("b")
    assert not limiter.check("a")


def test_reset_clears_counters():
    limiter = InMemoryRateLimiter(max_requests=1, window_seconds=60, clock=FakeClock())
    limiter.check("k")
    limiter.reset()
    assert limiter.check("k")


def test_expired_windows_swept_at_most_once_per_window():
    clock = FakeClock()
    limiter = InMemoryRateLimiter(max_requests=1, window_seconds=60, clock=clock)

    limiter.check("a")  # sweeps, next sweep at 1060
    clock.now = 1030
    limiter.check("b")
    clock.now = 1061
    limiter.check("c")  # sweeps "a"
    assert set(limiter._windows) == {"b", "c"}

    clock.now = 1095
    limiter.check("d")  # "b" expired but the next sweep is not due
    assert set(limiter._windows) == {"b", "c", "d"}

    clock.now = 1121
    limiter.check("e")
    assert set(limiter._windows) == {"d", "e"}


def test_rate_limit_key_format():
    assert rate_limit_key("1.2.3.4", "/api/x") == "1.2.3.4:/api/x"
    assert rate_limit_key("1.2.3.4", "/api/x", "u1") == "1.2.3.4:u1:/api/x"


def test_endpoint_returns_429_when_exhausted(client):
    app.state.rate_limiters["public"] = InMemoryRateLimiter(max_requests=2, window_seconds=60)

    for _ in range(2):
        assert client.get("/api/v1/suggest/job-title").status_code == 200

    response = client.get("/api/v1/suggest/job-title")
    assert response.status_code == 429
    assert response.json()["type"] == "RATE_LIMIT_ERROR"


def test_forwarded_client_address_is_used(client):
    app.state.rate_limiters["public"] = InMemoryRateLimiter(max_requests=1, window_seconds=60)

    assert client.get("/api/v1/suggest/location", headers={"x-forwarded-for": "10.0.0.1"}).status_code == 200
    assert client.get("/api/v1/suggest/location", headers={"x-forwarded-for": "10.0.0.2"}).status_code == 200
    assert client.get("/api/v1/suggest/location", headers={"x-forwarded-for": "10.0.0.1"}).status_code == 429


def test_signed_in_callers_get_their_own_budget(client, make_user, headers):
    app.state.rate_limiters["public"] = InMemoryRateLimiter(max_requests=1, window_seconds=60)
    first, second = make_user(), make_user()

    assert client.get("/api/v1/suggest/university", headers=headers(first)).status_code == 200
    assert client.get("/api/v1/suggest/university", headers=headers(second)).status_code == 200
    assert client.get("/api/v1/suggest/university").status_code == 200
    assert client.get("/api/v1/suggest/university", headers=headers(first)).status_code == 429
