"""Server executable lookup."""

import shutil
from pathlib import Path

from redistest.domain.exceptions import ServerNotFoundError


class PathLocator:
    """Resolve executables through the executable search path.

    Args:
        search_path: os.pathsep-separated directories to search instead
                     of $PATH (default: the ambient $PATH)
    """

    def __init__(self, search_path: str | None = None):
        self.search_path = search_path

    def locate(self, executable: str) -> Path:
        found = shutil.which(executable, path=self.search_path)
        if found is None:
            raise ServerNotFoundError(executable)
        # Not resolved: redis-server is often a symlink whose target
        # behaves differently depending on argv[0].
        return Path(found).absolute().parent


class FixedLocator:
    """Always resolve to a known directory, checking the executable exists."""

    def __init__(self, directory: Path | str):
        self.directory = Path(directory)

    def locate(self, executable: str) -> Path:
        if not (self.directory / executable).is_file():
            raise ServerNotFoundError(executable)
        return self.directory
