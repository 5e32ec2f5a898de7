"""Domain value objects with validation."""

from dataclasses import dataclass
from pathlib import Path
from typing import Literal


@dataclass(frozen=True)
class Endpoint:
    """Address a managed server listens on.

    The fixture always uses a filesystem socket, so network is "unix" and
    address is the socket path. Together they are enough to dial the server
    with any client, e.g. redis.Redis(unix_socket_path=endpoint.address).

    Attributes:
        network: Transport kind.
        address: Socket path inside the workspace.

    Raises:
        ValueError: If address is empty.
    """

    network: Literal["unix"]
    address: str

    def __post_init__(self) -> None:
        """Validate endpoint address."""
        if not self.address:
            raise ValueError("Endpoint address cannot be empty")

    @classmethod
    def unix(cls, path: Path) -> "Endpoint":
        """Create an endpoint for a Unix domain socket path."""
        return cls(network="unix", address=str(path))
