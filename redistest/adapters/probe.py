"""Readiness probing for a freshly spawned server.

Process start and "ready to accept connections" are not synchronous, and
the only portable readiness signal is a successful round trip. The prober
therefore pings through the connection pool until the server answers or the
attempt budget runs out.
"""

import logging
import time
from collections.abc import Callable
from typing import TypeVar

import redis
from redis.backoff import NoBackoff
from redis.retry import Retry

from redistest.domain.value_objects import Endpoint

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Errors that mean "not ready yet" rather than a bug in the caller.
PROBE_ERRORS: tuple[type[BaseException], ...] = (redis.RedisError, OSError)


def no_retry() -> Retry:
    """Retry policy that makes a single attempt per command."""
    return Retry(NoBackoff(), 0)


def build_pool(endpoint: Endpoint, socket_timeout: float | None = None) -> redis.ConnectionPool:
    """Create a connection pool dialing the server's Unix socket.

    Connections do not retry internally: the fixture wants a frozen or dead
    server to surface as an error promptly, and readiness retries are done
    by wait_until_ready.

    Args:
        endpoint: Where the server listens
        socket_timeout: Per-operation socket timeout (None: block)

    Returns:
        Pool safe for concurrent acquire/release
    """
    return redis.ConnectionPool(
        connection_class=redis.UnixDomainSocketConnection,
        path=endpoint.address,
        socket_timeout=socket_timeout,
        retry=no_retry(),
    )


def ping(pool: redis.ConnectionPool) -> None:
    """Send a single PING over a pooled connection.

    The connection is always handed back to the pool, whether or not the
    round trip succeeded.

    Raises:
        redis.RedisError: If connecting or the command fails
        OSError: For lower level socket failures
    """
    conn = pool.get_connection()
    try:
        conn.send_command("PING")
        conn.read_response()
    finally:
        pool.release(conn)


def retry(
    fn: Callable[[], T],
    attempts: int,
    interval: float,
    errors: tuple[type[BaseException], ...] = PROBE_ERRORS,
) -> T:
    """Call fn until it succeeds or the attempt budget is spent.

    Args:
        fn: Operation to attempt
        attempts: Maximum number of calls (at least one call is made)
        interval: Seconds to sleep between calls
        errors: Exception types treated as retryable

    Returns:
        The first successful result

    Raises:
        The last retryable error once attempts are exhausted. Errors outside
        `errors` propagate immediately.
    """
    while True:
        try:
            return fn()
        except errors:
            attempts -= 1
            if attempts <= 0:
                raise
        time.sleep(interval)


class ServerExitedError(RuntimeError):
    """The server process exited while it was being probed."""

    def __init__(self, returncode: int):
        super().__init__(f"server exited with status {returncode}")
        self.returncode = returncode


def wait_until_ready(
    pool: redis.ConnectionPool,
    attempts: int,
    interval: float,
    exit_status: Callable[[], int | None] | None = None,
) -> None:
    """Block until the server answers PING.

    Args:
        pool: Pool bound to the server endpoint
        attempts: Probe budget
        interval: Seconds between probes
        exit_status: Optional poll of the server process; when it reports an
                     exit status, probing stops instead of spending the rest
                     of the budget on a dead server

    Raises:
        redis.RedisError or OSError: The last probe failure once the budget
            is exhausted
        ServerExitedError: If exit_status reports that the server died
    """
    started = time.monotonic()
    tries = 0

    def probe() -> None:
        nonlocal tries
        tries += 1
        if exit_status is not None:
            returncode = exit_status()
            if returncode is not None:
                raise ServerExitedError(returncode)
        ping(pool)

    retry(probe, attempts, interval)
    elapsed = time.monotonic() - started
    logger.info(f"Server is ready (took {elapsed:.3f}s, {tries} probes)")
