"""Disposable Redis servers for tests.

Spawns a redis-server on temporary storage, waits until it answers, and
cleans everything up afterwards. Requires Redis to be installed (but not
running).

Architecture:
- domain/: configuration, errors and value objects
- ports/: capability protocols (executable lookup, pause/resume)
- adapters/: workspace, locator, launcher, prober and pausers
- core/: the ManagedRedis lifecycle and startup diagnostics
- shared/: TOML config loading
- pytest_plugin.py: redis_service / redis_client fixtures
"""

from redistest.adapters.locator import FixedLocator, PathLocator
from redistest.core.service import ManagedRedis, ServiceState, start, stop
from redistest.domain.config import FixtureConfig
from redistest.domain.exceptions import (
    FixtureEnvironmentError,
    LaunchError,
    ProvisioningError,
    ReadinessError,
    RedisTestError,
    ServerNotFoundError,
    ShutdownError,
    StartupError,
)
from redistest.domain.value_objects import Endpoint
from redistest.version import __version__

__all__ = [
    "Endpoint",
    "FixedLocator",
    "FixtureConfig",
    "FixtureEnvironmentError",
    "LaunchError",
    "ManagedRedis",
    "PathLocator",
    "ProvisioningError",
    "ReadinessError",
    "RedisTestError",
    "ServerNotFoundError",
    "ServiceState",
    "ShutdownError",
    "StartupError",
    "start",
    "stop",
    "__version__",
]
