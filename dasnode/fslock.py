"""Lock files that keep several processes from managing the same directory."""

from __future__ import annotations

import fcntl
import os
from types import TracebackType


class LockedError(Exception):
    """Raised when locking a file that is already locked."""

    def __init__(self, message: str = "fslock: directory is locked") -> None:
        super().__init__(message)


class Locker:
    """An exclusive, non-blocking lock on a file at ``path``.

    The lock file holds the id of the process owning it and is removed on
    unlock. Only Unix-like systems are supported.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = os.fspath(path)
        self._fd: int | None = None

    @property
    def locked(self) -> bool:
        return self._fd is not None

    def lock(self) -> None:
        """Lock the file; raise LockedError if another locker holds it."""
        try:
            fd = os.open(self.path, os.O_CREAT | os.O_RDWR, 0o666)
        except OSError as exc:
            raise OSError(f"fslock: error opening file: {exc}") from exc
        try:
            try:
                os.write(fd, str(os.getpid()).encode("ascii"))
            except OSError as exc:
                raise OSError(f"fslock: error writing process id: {exc}") from exc
            try:
                fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
            except BlockingIOError:
                raise LockedError() from None
            except OSError as exc:
                raise OSError(f"fslock: flocking error: {exc}") from exc
        except BaseException:
            os.close(fd)
            raise
        self._fd = fd

    def unlock(self) -> None:
        """Free the lock and remove the lock file; a no-op when not locked."""
        if self._fd is None:
            return
        fd = self._fd
        try:
            fcntl.flock(fd, fcntl.LOCK_UN | fcntl.LOCK_NB)
        except OSError as exc:
            raise OSError(f"fslock: unflocking error: {exc}") from exc
        self._fd = None
        try:
            os.close(fd)
        except OSError as exc:
            raise OSError(f"fslock: while closing file: {exc}") from exc
        os.remove(self.path)

    def __enter__(self) -> Locker:
        if not self.locked:
            self.lock()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.unlock()


def lock(path: str | os.PathLike[str]) -> Locker:
    """Create a Locker for ``path`` and lock it immediately."""
    locker = Locker(path)
    locker.lock()
    return locker