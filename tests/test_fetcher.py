"""Tests for the HTTP fetcher (no network: Session.get is replaced)."""

import threading

import pytest
import requests

from institution_aggregator.exceptions import SourceFetchError
from institution_aggregator.config import Settings
from institution_aggregator.fetcher import Fetcher
from institution_aggregator.main import InstitutionAggregator

from .conftest import two_cell_table

URL = "https://rank.example/Overall.html"


class StubResponse:
    def __init__(self, status_code=200, content=b"", headers=None):
        self.status_code = status_code
        self.content = content
        self.headers = headers or {}


@pytest.fixture
def session():
    return requests.Session()


def _serve(monkeypatch, session, response=None, error=None):
    calls = []

    def fake_get(url, timeout=None, **kwargs):
        calls.append({"url": url, "timeout": timeout, "headers": dict(session.headers)})
        if error is not None:
            raise error
        return response

    monkeypatch.setattr(session, "get", fake_get)
    return calls


def test_fetch_returns_text_and_sends_headers(monkeypatch, session):
    calls = _serve(monkeypatch, session, StubResponse(content=b"<table></table>"))
    fetcher = Fetcher(user_agent="Mozilla/5.0 test", timeout=7, session=session)

    assert fetcher.fetch(URL) == "<table></table>"
    assert calls[0]["url"] == URL
    assert calls[0]["timeout"] == 7
    assert calls[0]["headers"]["User-Agent"] == "Mozilla/5.0 test"
    assert calls[0]["headers"]["Cache-Control"] == "no-cache"


def test_non_success_status_raises_with_code(monkeypatch, session):
    _serve(monkeypatch, session, StubResponse(status_code=503, content=b"down"))
    fetcher = Fetcher(user_agent="ua", session=session)

    with pytest.raises(SourceFetchError) as exc_info:
        fetcher.fetch(URL)

    assert exc_info.value.message == "HTTP 503"
    assert exc_info.value.status_code == 503


def test_transport_error_raises_with_message(monkeypatch, session):
    _serve(monkeypatch, session, error=requests.ConnectionError("Name or service not known"))
    fetcher = Fetcher(user_agent="ua", session=session)

    with pytest.raises(SourceFetchError) as exc_info:
        fetcher.fetch(URL)

    assert "Name or service not known" in exc_info.value.message
    assert exc_info.value.status_code is None


def test_timeout_is_a_transport_error(monkeypatch, session):
    _serve(monkeypatch, session, error=requests.Timeout())
    fetcher = Fetcher(user_agent="ua", session=session)

    with pytest.raises(SourceFetchError) as exc_info:
        fetcher.fetch(URL)

    assert exc_info.value.message == "Timeout"


def test_header_charset_takes_precedence(monkeypatch, session):
    body = '<meta charset="utf-8"><td>Caf\xe9</td>'.encode("latin-1")
    _serve(monkeypatch, session, StubResponse(
        content=body, headers={"Content-Type": "text/html; charset=ISO-8859-1"}
    ))

    assert "Café" in Fetcher(user_agent="ua", session=session).fetch(URL)


def test_meta_charset_used_without_header(monkeypatch, session):
    body = '<meta charset="windows-1252"><td>“Quoted”</td>'.encode("windows-1252")
    _serve(monkeypatch, session, StubResponse(content=body, headers={"Content-Type": "text/html"}))

    assert "“Quoted”" in Fetcher(user_agent="ua", session=session).fetch(URL)


def test_unknown_charset_falls_back_to_utf8(monkeypatch, session):
    body = "Ünïcode".encode("utf-8")
    _serve(monkeypatch, session, StubResponse(
        content=body, headers={"Content-Type": "text/html; charset=x-made-up"}
    ))

    assert Fetcher(user_agent="ua", session=session).fetch(URL) == "Ünïcode"


def test_body_is_sanitized(monkeypatch, session):
    _serve(monkeypatch, session, StubResponse(content=b"<td>a\x00b</td>\r\n"))

    assert Fetcher(user_agent="ua", session=session).fetch(URL) == "<td>ab</td>\n"


def test_each_thread_gets_its_own_session():
    fetcher = Fetcher(user_agent="ua")
    seen = []

    def grab():
        seen.append(fetcher.session)

    workers = [threading.Thread(target=grab) for _ in range(2)]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join()

    assert len(seen) == 2
    assert seen[0] is not seen[1]
    assert seen[0].headers["User-Agent"] == "ua"
    assert fetcher.session is fetcher.session
    fetcher.close()


def test_close_leaves_injected_session_usable(monkeypatch, session):
    _serve(monkeypatch, session, StubResponse(content=b"ok"))

    with Fetcher(user_agent="ua", session=session) as fetcher:
        fetcher.fetch(URL)

    assert fetcher.session is session
    assert session.get(URL).content == b"ok"


def test_runs_do_not_share_cookies(monkeypatch):
    calls = []

    def fake_get(self, url, timeout=None, **kwargs):
        calls.append({"session": self, "cookies": dict(self.cookies)})
        self.cookies.set("s", "1")
        return StubResponse(content=two_cell_table(("Cookie School", "x")).encode())

    monkeypatch.setattr(requests.Session, "get", fake_get)
    aggregator = InstitutionAggregator(settings=Settings())

    aggregator.aggregate_directory()
    listing = aggregator.aggregate_directory()

    assert [e.name for e in listing.items] == ["Cookie School"]
    assert len(calls) == 2
    assert calls[0]["session"] is not calls[1]["session"]
    assert calls[1]["cookies"] == {}
