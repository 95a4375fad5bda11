import asyncio

import pytest

from siteaudit import engine
from siteaudit.engine import InvalidTarget, analyze_page, parse_target, run_audit
from siteaudit.fetcher import FetchError
from siteaudit.scorer import total_score

PAGE = (
    '<html lang="nb"><head><title>Forside | Eksempel AS</title>'
    '<meta name="viewport" content="width=device-width, initial-scale=1">'
    '</head><body><main><h1>Hei</h1><img src="/a.jpg"></main></body></html>'
)


def test_parse_target():
    assert parse_target("https://example.com/side?x=1").hostname == "example.com"


@pytest.mark.parametrize("url,message", [
    (None, "URL mangler"),
    ("", "URL mangler"),
    ("not-a-url", "Ugyldig URL-format"),
    ("/relative/path", "Ugyldig URL-format"),
])
def test_parse_target_rejects(url, message):
    with pytest.raises(InvalidTarget) as exc:
        parse_target(url)
    assert str(exc.value) == message


def test_run_audit_fetches_once(monkeypatch, fetched):
    calls = []

    async def fake_fetch(url):
        calls.append(url)
        return fetched(PAGE, {"Strict-Transport-Security": "max-age=63072000"}, response_time=250)

    monkeypatch.setattr(engine, "fetch_page", fake_fetch)
    report = asyncio.run(run_audit("https://example.com/"))

    assert calls == ["https://example.com/"]
    assert report["url"] == "https://example.com/"
    assert report["responseTime"] == 250
    assert set(report["categories"]) == {"performance", "seo", "security", "mobile", "accessibility"}
    assert report["categories"]["security"]["metrics"]["hsts"] is True
    assert report["categories"]["performance"]["metrics"]["totalImages"] == 1
    assert report["totalScore"] == total_score(
        {name: c["score"] for name, c in report["categories"].items()}
    )


def test_run_audit_propagates_fetch_errors(monkeypatch):
    async def failing_fetch(url):
        raise FetchError("connection refused")

    monkeypatch.setattr(engine, "fetch_page", failing_fetch)
    with pytest.raises(FetchError):
        asyncio.run(run_audit("https://example.com/"))


def test_run_audit_validates_before_fetching(monkeypatch):
    async def unexpected_fetch(url):
        raise AssertionError("fetch must not run")

    monkeypatch.setattr(engine, "fetch_page", unexpected_fetch)
    with pytest.raises(InvalidTarget):
        asyncio.run(run_audit("not-a-url"))


def test_http_page_security_is_capped(fetched):
    report = analyze_page("http://example.com/", fetched(PAGE, url="http://example.com/"))
    assert report["categories"]["security"]["score"] <= 70


def test_analysis_is_repeatable(fetched):
    first = analyze_page("https://example.com/", fetched(PAGE))
    second = analyze_page("https://example.com/", fetched(PAGE))
    assert first["categories"] == second["categories"]
    assert first["totalScore"] == second["totalScore"]


def test_pathological_documents_stay_in_range(fetched):
    for html in ["", "<", "<img", "<<<>>>" * 1000, "<script>" * 500, "<a>" + "x" * 200000]:
        report = analyze_page("https://example.com/", fetched(html))
        for category in report["categories"].values():
            assert 0 <= category["score"] <= 100
        assert 0 <= report["totalScore"] <= 100


def test_malformed_resource_url_does_not_abort_the_audit(fetched):
    report = analyze_page("https://example.com/", fetched('<script src="//[x"></script>' + PAGE))
    assert 0 <= report["totalScore"] <= 100
    assert report["categories"]["performance"]["metrics"]["totalScripts"] == 1
