"""Port interfaces for the capabilities a managed server depends on.

The binary lookup and the pause/resume mechanism are injected rather than
hard-coded, so tests can substitute a fixed executable directory and
platforms without job-control signals can plug in another mechanism.
"""

import subprocess
from pathlib import Path
from typing import Protocol


class BinaryLocator(Protocol):
    """Protocol for resolving where the server executable lives."""

    def locate(self, executable: str) -> Path:
        """Resolve the directory containing an executable.

        Args:
            executable: Bare executable name (e.g. "redis-server")

        Returns:
            Directory that contains the executable

        Raises:
            ServerNotFoundError: If the executable cannot be resolved
        """
        ...


class Pauser(Protocol):
    """Protocol for suspending and resuming a running process.

    Implementations only deliver the request; they do not wait for or
    verify the resulting process state.
    """

    def freeze(self, process: subprocess.Popen) -> None:
        """Stop the process from being scheduled without terminating it."""
        ...

    def resume(self, process: subprocess.Popen) -> None:
        """Let a frozen process run again."""
        ...
