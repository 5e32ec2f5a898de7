"""Domain exceptions for redistest.

Every failure raised by the fixture derives from RedisTestError so callers
can catch the whole family at once, while the subclasses keep the failure
kinds distinguishable (missing dependency vs. broken fixture vs. shutdown).
"""


class RedisTestError(Exception):
    """Base exception for all fixture errors.

    Attributes:
        message: User-facing error message.
        hint: Optional actionable suggestion.
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class FixtureEnvironmentError(RedisTestError):
    """Raised when the environment lacks something the fixture depends on."""

    pass


class ServerNotFoundError(FixtureEnvironmentError):
    """Raised when the server executable is not on the search path."""

    def __init__(self, executable: str) -> None:
        super().__init__(
            f"Did not find {executable} installed",
            hint=f"Install Redis so that '{executable}' is on your PATH",
        )
        self.executable = executable


class ProvisioningError(RedisTestError):
    """Raised when the temporary workspace cannot be created."""

    pass


class StartupError(RedisTestError):
    """Failure after the server process was (or was about to be) spawned.

    Carries the triggering error and the raw output the process emitted, so
    a failed start can be diagnosed from the exception alone.

    Attributes:
        cause: The error that triggered the failure, if any.
        stdout: Everything the process wrote to standard output.
        stderr: Everything the process wrote to standard error.
    """

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        stdout: bytes = b"",
        stderr: bytes = b"",
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.cause = cause
        self.stdout = stdout
        self.stderr = stderr

    def __str__(self) -> str:
        text = self.message
        if self.cause is not None:
            text += f": {self.cause}"
        out = self.stdout.decode("utf-8", errors="replace")
        err = self.stderr.decode("utf-8", errors="replace")
        return f"{text}\nOUT: {out}\nERR: {err}"


class LaunchError(StartupError):
    """Raised when the server process could not be spawned."""

    pass


class ReadinessError(StartupError):
    """Raised when the server never answered the liveness probe."""

    pass


class ShutdownError(RedisTestError):
    """Raised when interrupting or reaping the server fails during stop.

    Attributes:
        returncode: Exit status of the process, if it was reaped.
        stdout: Output captured while draining the process, if any.
        stderr: Error output captured while draining the process, if any.
    """

    def __init__(
        self,
        message: str,
        returncode: int | None = None,
        stdout: bytes = b"",
        stderr: bytes = b"",
    ) -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
