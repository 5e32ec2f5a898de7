"""pytest fixtures providing a disposable Redis server per test.

Registered through the pytest11 entry point, so installing redistest is
enough to use the fixtures:

    def test_counter(redis_client):
        assert redis_client.incr("hits") == 1

Settings come from [tool.redistest] in the project's pyproject.toml or
from redistest.toml. Tests are skipped, not failed, when redis-server is
not installed.
"""

from collections.abc import Iterator

import pytest
import redis

from redistest.core.service import ManagedRedis
from redistest.domain.config import FixtureConfig
from redistest.domain.exceptions import FixtureEnvironmentError
from redistest.shared.config_io import load_fixture_config


@pytest.fixture(scope="session")
def redistest_config(pytestconfig: pytest.Config) -> FixtureConfig:
    """Fixture configuration for the session, read from the rootdir."""
    return load_fixture_config(pytestconfig.rootpath)


@pytest.fixture
def redis_service(redistest_config: FixtureConfig) -> Iterator[ManagedRedis]:
    """A freshly started Redis server, stopped after the test."""
    try:
        service = ManagedRedis.start(config=redistest_config)
    except FixtureEnvironmentError as e:
        pytest.skip(e.message)

    try:
        yield service
    finally:
        service.stop()


@pytest.fixture
def redis_client(redis_service: ManagedRedis) -> Iterator[redis.Redis]:
    """A client connected to redis_service."""
    client = redis_service.client(decode_responses=True)
    try:
        yield client
    finally:
        client.close()
