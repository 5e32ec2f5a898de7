"""Startup failure handling.

Once a server process exists, every failure has to tear it down again and
should tell the caller what the server printed. abort_startup does both and
hands back a single error carrying the cause and the captured output.
"""

import contextlib
import logging
import signal
import subprocess

from redistest.domain.exceptions import ReadinessError, StartupError

logger = logging.getLogger(__name__)


def terminate_and_drain(
    process: subprocess.Popen, timeout: float
) -> tuple[bytes, bytes]:
    """Interrupt a process, reap it and collect everything it wrote.

    SIGINT is tried first; if the process has not exited within `timeout`
    it is killed. Both output pipes are read to EOF and closed.

    Args:
        process: Process started with stdout/stderr pipes
        timeout: Seconds to wait after SIGINT

    Returns:
        (stdout, stderr) bytes captured from the process
    """
    with contextlib.suppress(ProcessLookupError):
        process.send_signal(signal.SIGINT)
    try:
        stdout, stderr = process.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        logger.warning(
            f"Process {process.pid} ignored SIGINT for {timeout}s, killing it"
        )
        process.kill()
        stdout, stderr = process.communicate()
    return stdout or b"", stderr or b""


def abort_startup(
    message: str,
    process: subprocess.Popen,
    cause: BaseException,
    timeout: float = 10.0,
    error_cls: type[StartupError] = ReadinessError,
) -> StartupError:
    """Tear down a half-started server and build a diagnostic error.

    The exit status of the forced termination is ignored; only the output
    matters here.

    Args:
        message: Short description of what failed
        process: The half-started server
        cause: Error that triggered the abort
        timeout: Seconds to wait for the process after SIGINT
        error_cls: StartupError subclass to construct

    Returns:
        Error embedding the cause and the process's stdout/stderr, ready to
        be raised with `raise ... from cause`
    """
    stdout, stderr = terminate_and_drain(process, timeout)
    logger.debug(f"Aborted startup of PID {process.pid}: {message}: {cause}")
    return error_cls(message, cause=cause, stdout=stdout, stderr=stderr)
