from __future__ import annotations

import pytest
import requests

from config.settings import Settings
from services.content_fetcher import ContentFetcher, FetchError, select_page_text


class _Resp:
    def __init__(self, status_code=200, payload=None, bad_json=False, reason="OK"):
        self.status_code = status_code
        self._payload = payload
        self._bad_json = bad_json
        self.reason = reason

    def json(self):
        if self._bad_json:
            raise ValueError("not json")
        return self._payload


class _Session:
    def __init__(self, outcome):
        self.outcome = outcome
        self.calls = []

    def post(self, url, json=None, timeout=None):
        self.calls.append({"url": url, "json": json, "timeout": timeout})
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


def _fetcher(outcome, **overrides):
    session = _Session(outcome)
    settings = Settings(tavily_api_key="tvly-test", **overrides)
    return ContentFetcher(settings=settings, session=session), session


def test_returns_raw_content_and_sends_request():
    fetcher, session = _fetcher(_Resp(payload={"results": [{"url": "u", "raw_content": "RAW", "content": "short"}]}))
    assert fetcher.fetch_page_text("https://event.example/speakers") == "RAW"

    sent = session.calls[0]
    assert sent["url"] == "https://api.tavily.com/extract"
    assert sent["json"] == {
        "urls": ["https://event.example/speakers"],
        "api_key": "tvly-test",
        "include_images": False,
        "extract_depth": "basic",
    }


def test_select_page_text_falls_back_to_content():
    assert select_page_text({"raw_content": "", "content": "summary"}) == "summary"
    assert select_page_text({"raw_content": None}) is None


def test_empty_results_is_empty_error_with_provider_reason():
    fetcher, _ = _fetcher(_Resp(payload={"results": [], "failed_results": [{"url": "u", "error": "blocked"}]}))
    with pytest.raises(FetchError) as exc:
        fetcher.fetch_page_text("https://event.example")
    assert exc.value.kind == "empty"
    assert "No content extracted" in str(exc.value)
    assert "blocked" in str(exc.value)


def test_result_without_text_is_empty_error():
    fetcher, _ = _fetcher(_Resp(payload={"results": [{"url": "u", "raw_content": "   "}]}))
    with pytest.raises(FetchError) as exc:
        fetcher.fetch_page_text("https://event.example")
    assert exc.value.kind == "empty"


def test_http_error_is_transport_error():
    fetcher, _ = _fetcher(_Resp(status_code=401, reason="Unauthorized"))
    with pytest.raises(FetchError) as exc:
        fetcher.fetch_page_text("https://event.example")
    assert exc.value.kind == "transport"
    assert "401" in str(exc.value)


def test_connection_error_is_transport_error():
    fetcher, _ = _fetcher(requests.exceptions.Timeout("slow"))
    with pytest.raises(FetchError) as exc:
        fetcher.fetch_page_text("https://event.example")
    assert exc.value.kind == "transport"


@pytest.mark.parametrize("resp", [
    _Resp(bad_json=True),
    _Resp(payload=["not", "a", "dict"]),
    _Resp(payload={"results": "nope"}),
    _Resp(payload={"results": ["nope"]}),
    _Resp(payload={"results": [], "failed_results": {"error": "blocked"}}),
])
def test_unexpected_shapes_are_malformed(resp):
    fetcher, _ = _fetcher(resp)
    with pytest.raises(FetchError) as exc:
        fetcher.fetch_page_text("https://event.example")
    assert exc.value.kind == "malformed"


def test_missing_key_is_credential_error():
    session = _Session(_Resp(payload={"results": []}))
    fetcher = ContentFetcher(settings=Settings(tavily_api_key=None), session=session)
    with pytest.raises(FetchError) as exc:
        fetcher.fetch_page_text("https://event.example")
    assert exc.value.kind == "credential"
    assert session.calls == []


def test_odd_failure_shape_becomes_failed_extraction(stub_llm):
    from models import InferenceResult
    from pipelines.extract_people import PeopleExtractor

    settings = Settings(tavily_api_key="tvly-test")
    session = _Session(_Resp(payload={"results": [], "failed_results": {"error": "blocked"}}))
    llm = stub_llm(InferenceResult(success=False, error="unused"))
    extractor = PeopleExtractor(settings=settings, fetcher=ContentFetcher(settings=settings, session=session), llm=llm)

    outcome = extractor.from_url("https://event.example")

    assert outcome.success is False
    assert outcome.records == []
    assert "Unexpected" in outcome.message
    assert llm.calls == []
