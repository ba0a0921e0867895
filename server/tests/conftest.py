"""Shared fixtures for the Read-Manga test suite."""

import httpx
import pytest

from readmanga.config import Settings
from readmanga.services.cache import Cache
from readmanga.services.catalog import CatalogService

BASE_URL = "https://api.mangadex.org"
UPLOADS_URL = "https://uploads.mangadex.org"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return Cache(ttl=300, clock=clock)


@pytest.fixture
def make_catalog(cache):
    """Build a CatalogService whose upstream is answered by ``handler``."""

    def factory(handler, timeout=None) -> CatalogService:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=BASE_URL)
        return CatalogService(cache, client, UPLOADS_URL, timeout=timeout)

    return factory


@pytest.fixture
def production_settings():
    return Settings(environment="production", log_level="WARNING")


@pytest.fixture
def development_settings():
    return Settings(environment="development", log_level="WARNING")
