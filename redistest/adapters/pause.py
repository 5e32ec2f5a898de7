"""Pause/resume mechanisms for a running server.

Used to simulate a hung backend: a frozen server keeps its socket open but
never answers, which exercises client-side timeouts and retries.
"""

import signal
import subprocess

import psutil

from redistest.ports.process import Pauser


class SignalPauser:
    """Freeze with SIGSTOP and resume with SIGCONT.

    Signals go to the process itself, not to its process group.
    """

    def freeze(self, process: subprocess.Popen) -> None:
        process.send_signal(signal.SIGSTOP)

    def resume(self, process: subprocess.Popen) -> None:
        process.send_signal(signal.SIGCONT)


class PsutilPauser:
    """Freeze and resume through psutil.

    Works on platforms without job-control signals (psutil uses the native
    suspend/resume primitive there).
    """

    def freeze(self, process: subprocess.Popen) -> None:
        psutil.Process(process.pid).suspend()

    def resume(self, process: subprocess.Popen) -> None:
        psutil.Process(process.pid).resume()


def default_pauser() -> Pauser:
    """Pick the pause mechanism for the current platform."""
    if hasattr(signal, "SIGSTOP") and hasattr(signal, "SIGCONT"):
        return SignalPauser()
    return PsutilPauser()
