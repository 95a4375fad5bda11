"""
Fetch the page under audit exactly once, timing the request.
"""

import logging
import time

import httpx

from . import config

logger = logging.getLogger(__name__)

HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8",
    "Accept-Language": "nb-NO,nb;q=0.9,no;q=0.8,nn;q=0.7,en;q=0.6",
    "Accept-Encoding": "gzip, deflate",
    "Cache-Control": "no-cache",
}


class FetchError(Exception):
    """The page could not be fetched or is not an HTML document."""


async def fetch_page(url: str, transport: httpx.AsyncBaseTransport | None = None) -> dict:
    """Fetch ``url`` once, following redirects.

    ``response_time`` is the time in milliseconds until the response headers
    arrived; the body is read afterwards. The upstream status code is
    recorded but never treated as a failure.
    """
    async with httpx.AsyncClient(
        headers=HEADERS,
        follow_redirects=True,
        timeout=config.FETCH_TIMEOUT,
        transport=transport,
    ) as client:
        try:
            request = client.build_request("GET", url)
            start = time.perf_counter()
            response = await client.send(request, stream=True)
            response_time = round((time.perf_counter() - start) * 1000)
            try:
                await response.aread()
            finally:
                await response.aclose()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("Fetch of %s failed: %s", url, e)
            raise FetchError(str(e)) from e

    content_type = response.headers.get("content-type", "")
    if content_type and "html" not in content_type.lower():
        raise FetchError(f"Not an HTML document: {content_type}")

    return {
        "url": url,
        "final_url": str(response.url),
        "status_code": response.status_code,
        "html": response.text,
        "headers": response.headers,
        "redirect_chain": [str(r.url) for r in response.history],
        "response_time": response_time,
    }
