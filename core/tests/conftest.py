from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from minisnap_core.app import create_app
from minisnap_core.config import AppConfig
from minisnap_core.content.store import EntryStore

ADMIN_PASSWORD = "s3cret-pass"


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2030, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(tmp_path: Path, clock: FakeClock) -> EntryStore:
    return EntryStore(tmp_path / "content", clock=clock)


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
    return AppConfig(admin_password=ADMIN_PASSWORD, content_dir=tmp_path / "content")


@pytest.fixture
def client(app_config: AppConfig) -> Iterator[TestClient]:
    with TestClient(create_app(app_config)) as c:
        yield c


@pytest.fixture
def admin_client(client: TestClient) -> TestClient:
    r = client.post("/login", data={"password": ADMIN_PASSWORD}, follow_redirects=False)
    assert r.status_code == 302
    return client
