"""Server process spawning."""

import logging
import subprocess
from pathlib import Path

from redistest.domain.exceptions import LaunchError

logger = logging.getLogger(__name__)


def launch_server(binary_dir: Path, executable: str, config_file: Path) -> subprocess.Popen:
    """Spawn the server with the config file as its only argument.

    Standard output and error are piped back to us rather than inherited,
    so they can be attached to diagnostics later without interleaving with
    the parent's own output. Returns as soon as the process image starts;
    it does not wait for the server to accept connections.

    Args:
        binary_dir: Directory containing the executable
        executable: Executable file name
        config_file: Generated configuration file

    Returns:
        The running process, with stdout and stderr pipes open
        (nothing reads them until the server is stopped, so a server that
        logs more than the pipe buffer holds blocks on its next write)

    Raises:
        LaunchError: If the process could not be spawned (Popen closes any
            pipes it already opened before re-raising)
    """
    cmd = [str(binary_dir / executable), str(config_file)]
    try:
        process = subprocess.Popen(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
    except OSError as e:
        raise LaunchError(f"Failed to start {executable}", cause=e) from e

    logger.info(f"Started {executable} with PID {process.pid}")
    return process
