from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from app import create_app
from services.gateway import Gateway
from services.store import ConcurrentDatastore, Datastore


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self):
        self.now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def datastore(clock):
    return Datastore(clock=clock)


@pytest.fixture
def store(datastore):
    return ConcurrentDatastore(datastore)


@pytest.fixture
def gateway(store):
    return Gateway(store)


@pytest.fixture
def client(gateway):
    with TestClient(create_app(gateway)) as c:
        yield c
