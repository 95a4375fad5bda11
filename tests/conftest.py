import httpx
import pytest


@pytest.fixture
def fetched():
    """Build the dict fetch_page returns, without touching the network."""
    def make(html, headers=None, response_time=120, url="https://example.com/"):
        return {
            "url": url,
            "final_url": url,
            "status_code": 200,
            "html": html,
            "headers": httpx.Headers(headers or {}),
            "redirect_chain": [],
            "response_time": response_time,
        }
    return make
