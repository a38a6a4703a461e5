"""Test configuration and fixtures for proberunner."""

import asyncio
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from proberunner.db.init import init_db
from proberunner.modules.probe import ProbeRequest
from proberunner.tools.http import HTTPResponse


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def db_path(temp_dir: Path) -> Path:
    """Return a database path inside the temp directory."""
    return temp_dir / "data" / "proberunner.db"


@pytest.fixture
def initialized_db(db_path: Path) -> Path:
    """Initialize the database and return its path."""
    init_db(db_path)
    return db_path


@pytest.fixture
def fake_home(temp_dir: Path, monkeypatch) -> Path:
    """Point Path.home() and the PROBERUNNER_* variables at a temp home."""
    home = temp_dir / "home"
    home.mkdir()
    monkeypatch.setattr(Path, "home", lambda: home)
    for key in (
        "PROBERUNNER_DATA_DIR",
        "PROBERUNNER_DB_URL",
        "PROBERUNNER_VERBOSE",
        "PROBERUNNER_USER_AGENT",
        "PROBERUNNER_VERIFY_SSL",
        "PROBERUNNER_FOLLOW_REDIRECTS",
    ):
        monkeypatch.delenv(key, raising=False)
    return home


class FakeTransport:
    """In-memory HTTPTransport.

    ``responder`` receives each request and returns a status code or raises.
    """

    def __init__(self, responder: Callable[[ProbeRequest], int] | int = 200):
        if isinstance(responder, int):
            code = responder
            self.responder = lambda request: code
        else:
            self.responder = responder
        self.requests: list[ProbeRequest] = []

    async def send(self, request: ProbeRequest, deadline: float) -> HTTPResponse:
        self.requests.append(request)
        status_code = self.responder(request)
        return HTTPResponse(
            url=request.url,
            status_code=status_code,
            headers={},
            body="",
            response_time=0.0,
        )


class HangingTransport:
    """Transport that never answers within the deadline."""

    def __init__(self) -> None:
        self.requests: list[ProbeRequest] = []

    async def send(self, request: ProbeRequest, deadline: float) -> HTTPResponse:
        self.requests.append(request)
        await asyncio.sleep(deadline + 5)
        raise AssertionError("deadline was not enforced")


class RecordingSleep:
    """Stand-in for asyncio.sleep that records delays without waiting."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        await asyncio.sleep(0)


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def make_transport() -> type[FakeTransport]:
    """Return the FakeTransport class so tests can pick a responder."""
    return FakeTransport


@pytest.fixture
def hanging_transport() -> HangingTransport:
    return HangingTransport()
