"""Shared fixtures for the Opal client tests."""

import httpx
import pytest

from helpers import BASE_URL, FakeSite
from opal.models import AuthRecord
from opal.session import Session
from opal.store import MemoryAuthStore


@pytest.fixture
def record() -> AuthRecord:
    return AuthRecord(username="rider", password="s3cret")


@pytest.fixture
def store(record) -> MemoryAuthStore:
    return MemoryAuthStore(record)


@pytest.fixture
def site() -> FakeSite:
    return FakeSite()


@pytest.fixture
def session(store, site):
    with Session(store, base_url=BASE_URL, transport=httpx.MockTransport(site)) as s:
        yield s
