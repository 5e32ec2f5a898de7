"""Temporary workspace provisioning.

Each managed server gets its own directory holding the generated redis.conf
and a private socket directory, so any number of fixtures can run side by
side without sharing paths.
"""

import logging
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path

from redistest.domain.config import FixtureConfig
from redistest.domain.exceptions import ProvisioningError
from redistest.domain.value_objects import Endpoint

logger = logging.getLogger(__name__)

SOCKET_DIR_MODE = 0o711
CONFIG_FILE_MODE = 0o644


@dataclass(frozen=True)
class Workspace:
    """Paths making up a provisioned workspace.

    Attributes:
        root: Temporary directory owned by the fixture
        socket_path: Unix socket the server is told to listen on
        config_file: Generated server configuration
    """

    root: Path
    socket_path: Path
    config_file: Path

    @property
    def endpoint(self) -> Endpoint:
        """Endpoint clients dial to reach the server."""
        return Endpoint.unix(self.socket_path)

    def remove(self) -> None:
        """Recursively delete the workspace, ignoring errors."""
        logger.debug(f"Removing workspace {self.root}")
        shutil.rmtree(self.root, ignore_errors=True)
        if self.root.exists():
            logger.warning(f"Failed to fully remove workspace {self.root}")


def render_config(workspace_root: Path, socket_path: Path, extra: tuple[str, ...] = ()) -> str:
    """Render a redis.conf for a disposable server.

    The TCP listener is disabled, the server only listens on the private
    socket, and both append-only logging and RDB snapshots are off: test
    data is throwaway and startup speed matters more than durability.

    Args:
        workspace_root: Working directory for anything the server writes
        socket_path: Socket to listen on
        extra: Additional directives appended one per line

    Returns:
        Configuration file contents
    """
    lines = [
        "port 0",
        f"unixsocket {socket_path}",
        "appendonly no",
        'save ""',
        f"dir {workspace_root}",
        *extra,
    ]
    return "\n".join(lines) + "\n"


def provision_workspace(config: FixtureConfig) -> Workspace:
    """Create a fresh workspace with socket directory and redis.conf.

    Args:
        config: Fixture configuration (temp location, extra directives)

    Returns:
        The provisioned Workspace

    Raises:
        ProvisioningError: If any directory or file cannot be created.
            Nothing is left on disk in that case.
    """
    try:
        root = Path(
            tempfile.mkdtemp(
                prefix=config.temp_prefix,
                dir=str(config.temp_root) if config.temp_root else None,
            )
        )
    except OSError as e:
        raise ProvisioningError(f"Failed to create workspace: {e}") from e

    socket_path = root / "sock" / "redis.sock"
    config_file = root / "redis.conf"
    try:
        socket_path.parent.mkdir(mode=SOCKET_DIR_MODE, parents=True)
        config_file.write_text(
            render_config(root, socket_path, config.extra_directives)
        )
        config_file.chmod(CONFIG_FILE_MODE)
    except OSError as e:
        shutil.rmtree(root, ignore_errors=True)
        raise ProvisioningError(f"Failed to prepare workspace {root}: {e}") from e

    logger.debug(f"Provisioned workspace {root}")
    return Workspace(root=root, socket_path=socket_path, config_file=config_file)
