"""Config domain models for redistest.

A FixtureConfig describes how a throwaway server is provisioned, probed and
shut down. Defaults reproduce the classic fixture behaviour (1000 probes,
10ms apart); every field can be overridden from [tool.redistest] in
pyproject.toml or a standalone redistest.toml.
"""

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class FixtureConfig:
    """Configuration for a managed server fixture.

    Attributes:
        executable: Name of the server binary looked up on the search path
        probe_attempts: Maximum number of liveness probes before giving up
        probe_interval: Seconds to sleep between liveness probes
        socket_timeout: Socket timeout in seconds for pooled connections
        shutdown_timeout: Seconds to wait for the process to exit after
                          SIGINT before it is killed
        temp_prefix: Prefix of the temporary workspace directory name
        temp_root: Parent directory for workspaces (None: system temp dir).
                   Keep it short; Unix socket paths are limited to ~104 chars.
        extra_directives: Additional redis.conf lines appended verbatim. The
                          server log goes to a pipe that is only read at
                          shutdown, so directives that make it chatty (e.g.
                          "loglevel debug") should also set a logfile.

    Raises:
        ValueError: If any numeric setting is out of range or the executable
                    name is empty.
    """

    executable: str = "redis-server"
    probe_attempts: int = 1000
    probe_interval: float = 0.01
    socket_timeout: float | None = None
    shutdown_timeout: float = 10.0
    temp_prefix: str = "redistest"
    temp_root: Path | None = None
    extra_directives: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Validate fixture config after initialization."""
        if not self.executable:
            raise ValueError("executable cannot be empty")
        if self.probe_attempts <= 0:
            raise ValueError(
                f"probe_attempts must be positive, got {self.probe_attempts}"
            )
        if self.probe_interval < 0:
            raise ValueError(
                f"probe_interval cannot be negative, got {self.probe_interval}"
            )
        if self.socket_timeout is not None and self.socket_timeout <= 0:
            raise ValueError(
                f"socket_timeout must be positive, got {self.socket_timeout}"
            )
        if self.shutdown_timeout <= 0:
            raise ValueError(
                f"shutdown_timeout must be positive, got {self.shutdown_timeout}"
            )
        for directive in self.extra_directives:
            if not isinstance(directive, str):
                raise ValueError(
                    f"extra directive must be a string, got {directive!r}"
                )
            if "\n" in directive:
                raise ValueError(
                    f"extra directive must be a single line, got {directive!r}"
                )

    @staticmethod
    def default() -> "FixtureConfig":
        """Create a config with all default values."""
        return FixtureConfig()

    @staticmethod
    def from_partial(base: "FixtureConfig", data: dict[str, Any]) -> "FixtureConfig":
        """Apply a partial mapping of overrides on top of an existing config.

        Args:
            base: Config whose values are kept where data has no entry
            data: Raw key/value overrides (e.g. parsed from TOML)

        Returns:
            New validated FixtureConfig

        Raises:
            ValueError: If data contains unknown keys or invalid values
        """
        known = {f.name for f in fields(FixtureConfig)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown fixture config keys: {', '.join(unknown)}")

        overrides = dict(data)
        if overrides.get("temp_root") is not None:
            overrides["temp_root"] = Path(overrides["temp_root"])
        if "extra_directives" in overrides:
            directives = overrides["extra_directives"]
            if isinstance(directives, str):
                directives = [directives]
            if not isinstance(directives, (list, tuple)):
                raise ValueError(
                    f"extra_directives must be a list of strings, got {directives!r}"
                )
            overrides["extra_directives"] = tuple(directives)
        return replace(base, **overrides)
