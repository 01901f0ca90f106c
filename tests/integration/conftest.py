"""
Integration test helper utilities.

Shared fixtures for tests that go through the real HTTP transport with
pytest-httpx intercepting the requests.
"""

from __future__ import annotations

import pytest

XML_HEADERS = {"Content-Type": "text/xml; charset=UTF-8"}


@pytest.fixture
def mock_capabilities(httpx_mock):
    """Register a capabilities response for a GetCapabilities URL."""

    def register(url: str, body: str, status_code: int = 200) -> None:
        httpx_mock.add_response(
            url=url,
            method="GET",
            status_code=status_code,
            text=body,
            headers=XML_HEADERS,
        )

    return register


@pytest.fixture
def brgm_caps_url() -> str:
    return "http://geoservices.brgm.fr/geologie?SERVICE=WMS&REQUEST=GetCapabilities"
