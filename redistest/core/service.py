"""Managed server lifecycle (start/stop/freeze/resume).

A ManagedRedis owns one throwaway redis-server: its temporary workspace,
the process and its captured output, and a connection pool bound to a
private Unix socket. It is only ever handed out once the server answers
PING; any failure on the way there releases everything before raising.
"""

import contextlib
import enum
import logging
import signal
import subprocess
from types import TracebackType

import redis

from redistest.adapters.launcher import launch_server
from redistest.adapters.locator import PathLocator
from redistest.adapters.pause import default_pauser
from redistest.adapters.probe import (
    PROBE_ERRORS,
    ServerExitedError,
    build_pool,
    no_retry,
    wait_until_ready,
)
from redistest.adapters.workspace import Workspace, provision_workspace
from redistest.core.diagnostics import abort_startup, terminate_and_drain
from redistest.domain.config import FixtureConfig
from redistest.domain.exceptions import ShutdownError
from redistest.ports.process import BinaryLocator, Pauser

logger = logging.getLogger(__name__)


class ServiceState(enum.Enum):
    READY = "ready"
    FROZEN = "frozen"
    STOPPED = "stopped"


class ManagedRedis:
    """A running, disposable Redis server.

    Use start() (or redistest.start()) to create one. The control methods
    are meant for a single owner; the pool may be shared freely.

    Attributes:
        pool: Connection pool bound to the server's socket
        endpoint: Where the server listens
        workspace: Temporary directory owned by this server
        process: The server process
        state: Current lifecycle state
    """

    def __init__(
        self,
        workspace: Workspace,
        process: subprocess.Popen,
        pool: redis.ConnectionPool,
        config: FixtureConfig,
        pauser: Pauser,
    ):
        self.workspace = workspace
        self.process = process
        self.pool = pool
        self.endpoint = workspace.endpoint
        self.config = config
        self._pauser = pauser
        self.state = ServiceState.READY

    @classmethod
    def start(
        cls,
        config: FixtureConfig | None = None,
        locator: BinaryLocator | None = None,
        pauser: Pauser | None = None,
    ) -> "ManagedRedis":
        """Start a new Redis server on temporary storage.

        Persistence is disabled for speed, so the server is less durable
        than a production one; that does not matter for disposable test data.

        Args:
            config: Fixture configuration (default: FixtureConfig.default())
            locator: Executable lookup (default: search $PATH)
            pauser: Freeze/resume mechanism (default: platform specific)

        Returns:
            A ready server; its pool answers PING

        Raises:
            ProvisioningError: If the workspace cannot be created
            ServerNotFoundError: If the executable is not installed
            LaunchError: If the process cannot be spawned
            ReadinessError: If the server never answered; the error carries
                the server's stdout and stderr
        """
        config = config or FixtureConfig.default()
        locator = locator or PathLocator()
        pauser = pauser or default_pauser()

        workspace = provision_workspace(config)
        try:
            binary_dir = locator.locate(config.executable)
            process = launch_server(
                binary_dir, config.executable, workspace.config_file
            )
        except BaseException:
            workspace.remove()
            raise

        pool = build_pool(workspace.endpoint, socket_timeout=config.socket_timeout)
        try:
            wait_until_ready(
                pool,
                attempts=config.probe_attempts,
                interval=config.probe_interval,
                exit_status=process.poll,
            )
        except (*PROBE_ERRORS, ServerExitedError) as e:
            pool.disconnect()
            error = abort_startup(
                "Failed to connect to Redis",
                process,
                e,
                timeout=config.shutdown_timeout,
            )
            workspace.remove()
            raise error from e
        except BaseException:
            pool.disconnect()
            terminate_and_drain(process, config.shutdown_timeout)
            workspace.remove()
            raise

        return cls(workspace, process, pool, config, pauser)

    @property
    def network(self) -> str:
        """Transport kind to dial (always "unix")."""
        return self.endpoint.network

    @property
    def address(self) -> str:
        """Socket path to dial."""
        return self.endpoint.address

    def client(self, **kwargs) -> redis.Redis:
        """Create a client for this server.

        Without options the client shares the fixture's connection pool.
        Options such as decode_responses are connection settings, so a client
        given any gets its own pool dialing the same endpoint.
        """
        if not kwargs:
            return redis.Redis(connection_pool=self.pool)
        options = {"socket_timeout": self.config.socket_timeout, "retry": no_retry()}
        options.update(kwargs)
        return redis.Redis(unix_socket_path=self.address, **options)

    def stop(self) -> None:
        """Stop the server and remove its storage.

        Sends SIGINT, waits for the process to exit and closes its output
        pipes. The workspace is removed however shutdown went. Calling stop
        on a stopped server does nothing.

        Raises:
            ShutdownError: If the signal could not be delivered, the server
                did not exit in time (it is killed), or it exited non-zero
        """
        if self.state is ServiceState.STOPPED:
            logger.debug(f"Server {self.process.pid} already stopped")
            return

        try:
            self._shutdown()
        finally:
            self.state = ServiceState.STOPPED
            self.pool.disconnect()
            self.workspace.remove()

    def _shutdown(self) -> None:
        pid = self.process.pid
        if self.state is ServiceState.FROZEN:
            # A stopped process cannot act on SIGINT.
            self.resume()

        try:
            self.process.send_signal(signal.SIGINT)
        except OSError as e:
            # Reap it anyway so its pipes are closed.
            with contextlib.suppress(OSError):
                self.process.kill()
            stdout, stderr = self.process.communicate()
            raise ShutdownError(
                f"Failed to interrupt Redis (PID {pid}): {e}",
                returncode=self.process.returncode,
                stdout=stdout or b"",
                stderr=stderr or b"",
            ) from e

        timeout = self.config.shutdown_timeout
        try:
            stdout, stderr = self.process.communicate(timeout=timeout)
        except subprocess.TimeoutExpired as e:
            logger.warning(f"Redis (PID {pid}) did not stop after {timeout}s, killing")
            self.process.kill()
            stdout, stderr = self.process.communicate()
            raise ShutdownError(
                f"Redis (PID {pid}) did not exit within {timeout}s",
                returncode=self.process.returncode,
                stdout=stdout or b"",
                stderr=stderr or b"",
            ) from e

        returncode = self.process.returncode
        if returncode != 0:
            raise ShutdownError(
                f"Redis (PID {pid}) exited with status {returncode}",
                returncode=returncode,
                stdout=stdout or b"",
                stderr=stderr or b"",
            )
        logger.info(f"Redis (PID {pid}) stopped")

    def freeze(self) -> None:
        """Hang the server, good for testing blocked connections."""
        if self.state is not ServiceState.READY:
            return
        self._pauser.freeze(self.process)
        self.state = ServiceState.FROZEN

    def resume(self) -> None:
        """Resume a frozen server."""
        if self.state is not ServiceState.FROZEN:
            return
        self._pauser.resume(self.process)
        self.state = ServiceState.READY

    continue_ = resume

    def __enter__(self) -> "ManagedRedis":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.stop()

    def __repr__(self) -> str:
        return (
            f"ManagedRedis(pid={self.process.pid}, address={self.address!r}, "
            f"state={self.state.value})"
        )


def start(
    config: FixtureConfig | None = None,
    locator: BinaryLocator | None = None,
    pauser: Pauser | None = None,
) -> ManagedRedis:
    """Start a new Redis server on temporary storage.

    See ManagedRedis.start.
    """
    return ManagedRedis.start(config=config, locator=locator, pauser=pauser)


def stop(service: ManagedRedis | None) -> None:
    """Stop a server if there is one.

    Accepts None so cleanup code can run unconditionally, even when
    starting the server failed.
    """
    if service is None:
        return
    service.stop()


__all__ = ["ManagedRedis", "ServiceState", "start", "stop"]
