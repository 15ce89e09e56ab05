from __future__ import annotations

from urllib.parse import parse_qs, urlsplit

import requests

from config.settings import Settings
from services.profile_lookup import ProfileLookup, RetryPolicy


class _Resp:
    def __init__(self, status_code=200, payload=None, bad_json=False):
        self.status_code = status_code
        self._payload = payload
        self._bad_json = bad_json

    def json(self):
        if self._bad_json:
            raise ValueError("not json")
        return self._payload


class _Session:
    """Replays queued responses (or raises queued exceptions) and records each GET."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class _FakeClock:
    def __init__(self):
        self.sleeps = []

    def __call__(self, seconds):
        self.sleeps.append(seconds)


def _lookup(session, clock=None, **settings_overrides):
    settings = Settings(serpapi_api_key="serp-key", **settings_overrides)
    policy = RetryPolicy(max_attempts=3, base_delay_seconds=0.8, sleep=clock or _FakeClock())
    return ProfileLookup(settings=settings, session=session, retry_policy=policy)


def _results(*links):
    return {"organic_results": [{"link": link} for link in links]}


def test_strips_query_from_first_profile_link():
    session = _Session(_Resp(payload=_results(
        "https://example.com/jane",
        "https://www.linkedin.com/in/jane-doe?trk=abc",
        "https://www.linkedin.com/in/other",
    )))
    result = _lookup(session).resolve_profile("Jane Doe", "Acme")

    assert result.success is True
    assert result.url == "https://www.linkedin.com/in/jane-doe"
    assert result.attempts == 1
    params = session.calls[0]["params"]
    assert params["q"] == 'site:linkedin.com/in "Jane Doe" Acme'
    assert params["api_key"] == "serp-key"
    assert params["engine"] == "google"


def test_pub_links_are_profiles():
    session = _Session(_Resp(payload=_results("https://linkedin.com/pub/jane-doe/1/2/3")))
    result = _lookup(session).resolve_profile("Jane Doe", "Acme")
    assert result.url == "https://linkedin.com/pub/jane-doe/1/2/3"


def test_no_match_is_not_retried():
    clock = _FakeClock()
    session = _Session(_Resp(payload=_results("https://www.linkedin.com/company/acme")))
    result = _lookup(session, clock).resolve_profile("Jane Doe", "Acme")

    assert result.success is False
    assert result.message == "No profile found"
    assert result.url is None
    assert len(session.calls) == 1
    assert clock.sleeps == []


def test_empty_result_list_is_not_found():
    session = _Session(_Resp(payload={"search_metadata": {"status": "Success"}}))
    result = _lookup(session).resolve_profile("Jane Doe", "Acme")
    assert result.message == "No profile found"
    assert len(session.calls) == 1


def test_retries_transient_failures_then_succeeds():
    clock = _FakeClock()
    session = _Session(
        requests.exceptions.ConnectionError("reset"),
        _Resp(status_code=502),
        _Resp(payload=_results("https://de.linkedin.com/in/jane")),
    )
    result = _lookup(session, clock).resolve_profile("Jane Doe", "Acme")

    assert result.success is True
    assert result.url == "https://de.linkedin.com/in/jane"
    assert result.attempts == 3
    assert clock.sleeps == [0.8, 1.6]


def test_exhausted_failure_returns_last_error():
    clock = _FakeClock()
    session = _Session(
        _Resp(status_code=500),
        _Resp(bad_json=True),
        _Resp(payload={"error": "Invalid API key."}),
        _Resp(payload=_results("https://linkedin.com/in/never-reached")),
    )
    result = _lookup(session, clock).resolve_profile("Jane Doe", "Acme")

    assert result.success is False
    assert result.message == "Invalid API key."
    assert result.attempts == 3
    assert len(session.calls) == 3
    # Backoff lower bound: base*1 + base*2, no sleep after the final attempt
    assert clock.sleeps == [0.8, 1.6]
    assert sum(clock.sleeps) >= 0.8 * 1 + 0.8 * 2


def test_each_attempt_busts_caches():
    session = _Session(
        _Resp(status_code=503),
        _Resp(status_code=503),
        _Resp(status_code=503),
    )
    _lookup(session).resolve_profile("Jane Doe", "Acme")

    nonces = [c["params"]["_ts"] for c in session.calls]
    assert len(set(nonces)) == 3
    assert [c["params"]["_at"] for c in session.calls] == [1, 2, 3]


def test_custom_backoff_function():
    clock = _FakeClock()
    session = _Session(_Resp(status_code=500), _Resp(status_code=500))
    policy = RetryPolicy(max_attempts=2, backoff=lambda attempt: 2 ** attempt, sleep=clock)
    lookup = ProfileLookup(settings=Settings(serpapi_api_key="k"), session=session, retry_policy=policy)
    result = lookup.resolve_profile("Jane Doe", "Acme")
    assert result.attempts == 2
    assert clock.sleeps == [2]


def test_relay_wraps_full_search_url():
    session = _Session(_Resp(payload=_results("https://linkedin.com/in/jane")))
    lookup = _lookup(session, lookup_relay_url="https://relay.example/raw")
    lookup.resolve_profile("Jane Doe", "Acme")

    call = session.calls[0]
    assert call["url"] == "https://relay.example/raw"
    target = urlsplit(call["params"]["url"])
    assert f"{target.scheme}://{target.netloc}{target.path}" == "https://serpapi.com/search.json"
    assert parse_qs(target.query)["q"] == ['site:linkedin.com/in "Jane Doe" Acme']


def test_missing_key_makes_no_request():
    session = _Session()
    lookup = ProfileLookup(settings=Settings(serpapi_api_key=None), session=session)
    result = lookup.resolve_profile("Jane Doe", "Acme")
    assert result.success is False
    assert "SERPAPI_API_KEY" in result.message
    assert session.calls == []


def test_blank_name_makes_no_request():
    session = _Session()
    result = _lookup(session).resolve_profile("  ", "Acme")
    assert result.success is False
    assert session.calls == []


def test_retry_policy_from_settings():
    policy = RetryPolicy.from_settings(Settings(lookup_max_attempts=3, lookup_backoff_ms=800))
    assert policy.max_attempts == 3
    assert [policy.delay_for(n) for n in (1, 2)] == [0.8, 1.6]
