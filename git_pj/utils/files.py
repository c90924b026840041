"""Locked, atomic JSON file helpers."""
import json
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from git_pj.logging_config import get_logger

# Import fcntl for POSIX file locking (Unix/Linux/macOS)
try:
    import fcntl
    HAS_FCNTL = True
except ImportError:
    HAS_FCNTL = False

logger = get_logger(__name__)

LOCK_SUFFIX = ".lock"
TEMP_SUFFIX = ".tmp"


@contextmanager
def acquire_file_lock(file_handle, operation: str = "read"):
    """Acquire an advisory lock on an open file.

    Args:
        file_handle: Open file handle to lock
        operation: Type of operation ("read" or "write")

    Yields:
        None when lock is acquired
    """
    if not HAS_FCNTL:
        logger.debug("File locking not available on this platform")
        yield
        return

    # Exclusive lock for writes, shared lock for reads
    lock_type = fcntl.LOCK_EX if operation == "write" else fcntl.LOCK_SH
    fcntl.flock(file_handle.fileno(), lock_type)
    try:
        yield
    finally:
        fcntl.flock(file_handle.fileno(), fcntl.LOCK_UN)


def lock_path_for(path: Path) -> Path:
    """Sidecar file that readers and writers of ``path`` lock."""
    path = Path(path)
    return path.with_name(path.name + LOCK_SUFFIX)


def locked_read_json(path: Path) -> Any:
    """Read a JSON document under a shared lock."""
    path = Path(path)
    with open(lock_path_for(path), "a") as lock:
        with acquire_file_lock(lock, operation="read"):
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)


def atomic_write_json(path: Path, data: Any) -> None:
    """Write a JSON document to a unique temp file, then rename it into place.

    Writers are serialised by an exclusive lock on the sidecar lock file, so
    the last writer wins and the document is never torn.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(lock_path_for(path), "a") as lock:
        with acquire_file_lock(lock, operation="write"):
            fd, temp_name = tempfile.mkstemp(prefix=f"{path.name}.", suffix=TEMP_SUFFIX, dir=str(path.parent))
            temp_file = Path(temp_name)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2)
                    f.flush()
                    os.fsync(f.fileno())

                # Atomic rename (POSIX systems guarantee atomicity)
                os.replace(temp_file, path)
            finally:
                if temp_file.exists():
                    temp_file.unlink()
