"""Root pytest fixtures for ogc-client-python tests."""

from __future__ import annotations

from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "wms"


def load_fixture(name: str) -> str:
    """Read a capabilities document from tests/fixtures/wms."""
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


class FakeResponse:
    """Minimal response honouring the fetch collaborator contract.

    When ``error`` is set, reading the body raises it.
    """

    def __init__(self, body: str, status: int = 200, error: Exception | None = None) -> None:
        self._body = body
        self._error = error
        self.status = status
        self.ok = 200 <= status < 300

    async def text(self) -> str:
        if self._error is not None:
            raise self._error
        return self._body


class FakeFetch:
    """Recording fetch collaborator.

    ``behaviour`` is one of 'ok', 'httpError', 'corsError' or 'bodyError'.
    """

    def __init__(self, body: str, behaviour: str = "ok") -> None:
        self.body = body
        self.behaviour = behaviour
        self.calls: list[str] = []

    async def __call__(self, url: str) -> FakeResponse:
        self.calls.append(url)
        if self.behaviour == "httpError":
            return FakeResponse("<error>Random error</error>", status=401)
        if self.behaviour == "corsError":
            raise RuntimeError("Cross origin headers missing")
        if self.behaviour == "bodyError":
            return FakeResponse(
                "", error=ConnectionResetError("connection reset while reading body")
            )
        return FakeResponse(self.body)


@pytest.fixture(scope="session")
def capabilities_130() -> str:
    """WMS 1.3.0 capabilities (BRGM geology service)."""
    return load_fixture("capabilities-brgm-1-3-0.xml")


@pytest.fixture(scope="session")
def capabilities_111() -> str:
    """WMS 1.1.1 capabilities with an unnamed root layer."""
    return load_fixture("capabilities-demo-1-1-1.xml")


@pytest.fixture
def fake_fetch(capabilities_130: str) -> FakeFetch:
    """Fetch collaborator serving the 1.3.0 document."""
    return FakeFetch(capabilities_130)


@pytest.fixture
def fetch_factory(capabilities_130: str):
    """Build fetch collaborators with a given behaviour and body."""

    def factory(behaviour: str = "ok", body: str | None = None) -> FakeFetch:
        return FakeFetch(capabilities_130 if body is None else body, behaviour)

    return factory
