"""
Transport layer - HTTP client for OGC service requests.

Provides httpx-based transport with:
- The fetch collaborator contract (status, ok, text())
- Proxy configuration
- Timeout management
"""

from ogc_client_python.transport.http import (
    Fetcher,
    FetchResponse,
    HttpResponse,
    HttpTransport,
)

__all__ = [
    "FetchResponse",
    "Fetcher",
    "HttpResponse",
    "HttpTransport",
]
