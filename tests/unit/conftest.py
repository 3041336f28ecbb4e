import pytest

from fakes import FakeClock
from quoteboard.core.cache import CacheRegistry


@pytest.fixture
def clock():
    return FakeClock(1_700_000_000.0)


@pytest.fixture
def caches(clock):
    return CacheRegistry(clock=clock)
