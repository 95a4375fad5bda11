"""
Main audit engine: orchestrates fetch, extract, analyze, score.
"""

import logging
from urllib.parse import ParseResult, urlparse

from pydantic import AnyUrl, TypeAdapter, ValidationError

from .fetcher import fetch_page
from .parser import extract_resources
from .scorer import build_report
from .analyzers import accessibility, mobile, performance, security, seo

logger = logging.getLogger(__name__)

MISSING_URL = "URL mangler"
INVALID_URL = "Ugyldig URL-format"

_url_adapter = TypeAdapter(AnyUrl)


class InvalidTarget(ValueError):
    """The requested URL is missing or not an absolute URL."""


def parse_target(url: str | None) -> ParseResult:
    """Validate the client-supplied URL; the message is returned to the client verbatim."""
    if not url:
        raise InvalidTarget(MISSING_URL)
    try:
        _url_adapter.validate_python(url)
    except ValidationError:
        raise InvalidTarget(INVALID_URL)
    return urlparse(url)


def analyze_page(url: str, fetch_result: dict) -> dict:
    """Run the five analyzers over an already fetched page."""
    parsed_url = urlparse(url)
    html = fetch_result["html"]
    resources = extract_resources(html, base_url=fetch_result.get("final_url", url))

    results = {
        "performance": performance.analyze(fetch_result["response_time"], html, resources),
        "seo": seo.analyze(html, parsed_url),
        "security": security.analyze(parsed_url, fetch_result["headers"], html),
        "mobile": mobile.analyze(html),
        "accessibility": accessibility.analyze(html),
    }

    return build_report(url, fetch_result["response_time"], results)


async def run_audit(url: str) -> dict:
    """
    Audit a single page.

    Args:
        url: The URL to audit, exactly as the client sent it

    Returns:
        Complete AuditReport dict

    Raises:
        InvalidTarget: the URL is missing or malformed
        FetchError: the page could not be fetched
    """
    parse_target(url)
    fetch_result = await fetch_page(url)
    report = analyze_page(url, fetch_result)
    logger.info(
        "Audited %s: total %s, response %sms",
        url, report["totalScore"], report["responseTime"],
    )
    return report
