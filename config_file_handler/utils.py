import json
import logging
import os
from pathlib import Path

from filelock import FileLock

from .errors import ConfigIOError, LockAcquisitionError, MalformedConfig

logger = logging.getLogger(__name__)

LOCK_SUFFIX = ".lock"


def serialize(value) -> bytes:
    """Encode a payload as pretty-printed UTF-8 JSON."""
    try:
        return json.dumps(value, indent=4).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise MalformedConfig(f"Payload is not JSON serializable: {exc}") from exc


def deserialize(data: bytes):
    """Decode UTF-8 JSON bytes."""
    try:
        return json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise MalformedConfig(f"Invalid JSON: {exc}") from exc


def lock_path_for(path) -> str:
    return str(path) + LOCK_SUFFIX


class ConfigFileHandle:
    """A config file path plus the exclusive lock held on it.

    Use it as a context manager so the lock is released however the block
    exits::

        with open_config(path) as handle:
            data = handle.read()
            data["runs"] += 1
            handle.write(data)
    """

    def __init__(self, path, lock: FileLock):
        self.path = Path(path)
        self._lock = lock

    @property
    def closed(self) -> bool:
        return not self._lock.is_locked

    def _check_open(self):
        if self.closed:
            raise ValueError(f"I/O operation on closed config handle for {self.path}")

    def read(self):
        """Read and parse the whole file. The lock stays held."""
        self._check_open()
        try:
            with open(self.path, "rb") as f:
                data = f.read()
        except OSError as exc:
            raise ConfigIOError(f"Could not read {self.path}: {exc}") from exc
        return deserialize(data)

    def write(self, payload):
        """Replace the file's contents with ``payload``."""
        self._check_open()
        data = serialize(payload)
        try:
            # "wb" truncates first; leftovers from a longer payload must not survive
            with open(self.path, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
        except OSError as exc:
            raise ConfigIOError(f"Could not write {self.path}: {exc}") from exc

    def close(self):
        if self._lock.is_locked:
            self._lock.release()
            logger.debug("Released lock on %s", self.path)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def __repr__(self):
        state = "closed" if self.closed else "locked"
        return f"<ConfigFileHandle {str(self.path)!r} {state}>"


def open_config(path) -> ConfigFileHandle:
    """Lock ``path`` for exclusive use, blocking until the lock is free."""
    path = Path(path).absolute()
    lock = FileLock(lock_path_for(path), timeout=-1)
    try:
        lock.acquire()
    except OSError as exc:
        raise LockAcquisitionError(f"Could not lock {path}: {exc}") from exc
    logger.debug("Acquired lock on %s", path)
    return ConfigFileHandle(path, lock)


def read(handle: ConfigFileHandle):
    return handle.read()


def write(handle: ConfigFileHandle, payload):
    handle.write(payload)


def close(handle: ConfigFileHandle):
    handle.close()


def cleanup(path) -> bool:
    """Delete the config file. Returns False if it was already gone."""
    path = Path(path)
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    except OSError as exc:
        raise ConfigIOError(f"Could not remove {path}: {exc}") from exc
    logger.info("Removed config file %s", path)
    return True


def safe_load_json(path, default=None):
    """Locked JSON load. Missing file gives ``default``; a corrupt one raises."""
    if default is None:
        default = {}

    if not os.path.exists(path):
        return default

    with open_config(path) as handle:
        return handle.read()


def safe_save_json(path, data):
    """Locked JSON save. Creates the parent directory if needed."""
    try:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ConfigIOError(f"Could not create directory for {path}: {exc}") from exc
    with open_config(path) as handle:
        handle.write(data)
