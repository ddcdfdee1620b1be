"""Finding, creating and working with a named config file.

:func:`find_or_create` is the core: it scans the search paths for an
existing file and, failing that, writes the default payload into the first
directory that will take it. :class:`FileHandler` wraps the resolved path
with locked read, write and update helpers.
"""

import logging
import os
import shutil
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .errors import (
    ConfigIOError,
    ConfigNotFound,
    LockAcquisitionError,
    NoWritableLocation,
)
from .paths import DIR_LOOKUP_ERRORS, Environment, resolve_search_paths
from .utils import ConfigFileHandle, cleanup, open_config

logger = logging.getLogger(__name__)


def _check_name(name) -> str:
    name = os.fspath(name)
    if not name or Path(name).name != name or name in (".", ".."):
        raise ValueError(f"Config name must be a bare file name, got {name!r}")
    return name


def _is_readable_file(path: Path) -> bool:
    return path.is_file() and os.access(path, os.R_OK)


def find_existing(name, search_paths: Iterable) -> Path:
    """Return the first readable ``name`` in the search paths."""
    name = _check_name(name)
    search_paths = [Path(p) for p in search_paths]
    for directory in search_paths:
        candidate = directory / name
        if _is_readable_file(candidate):
            return candidate
    raise ConfigNotFound(name, search_paths)


def _create_default(path: Path, payload) -> bool:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open_config(path) as handle:
        if _is_readable_file(path):
            # someone else created it while we waited on the lock
            return False
        if path.exists():
            raise ConfigIOError(f"{path} exists but is not a readable file")
        handle.write(payload)
    return True


def find_or_create(name, default_payload, search_paths: Iterable) -> Tuple[Path, bool]:
    """Locate ``name`` or create it holding ``default_payload``.

    Returns ``(path, created)``. Discovery takes the first readable file in
    search order. Creation takes the first directory that accepts a new
    file, so a read-only install directory falls through to the next
    candidate.

    Raises:
        NoWritableLocation: no candidate directory accepted the file.
        MalformedConfig: ``default_payload`` is not JSON serializable.
    """
    name = _check_name(name)
    search_paths = [Path(p) for p in search_paths]

    try:
        return find_existing(name, search_paths), False
    except ConfigNotFound:
        pass

    for directory in search_paths:
        candidate = directory / name
        try:
            created = _create_default(candidate, default_payload)
        except (OSError, LockAcquisitionError, ConfigIOError) as exc:
            logger.debug("Cannot create %s: %s", candidate, exc)
            continue
        if created:
            logger.info("Created default config file %s", candidate)
        return candidate, created

    raise NoWritableLocation(name, search_paths)


def cleanup_all(name, search_paths: Iterable) -> List[Path]:
    """Remove ``name`` from every search path. Returns the removed paths."""
    name = _check_name(name)
    return [Path(d) / name for d in search_paths if cleanup(Path(d) / name)]


class FileHandler:
    """Reads and writes one resolved config file under its lock.

    Build it with :meth:`new` (create a default if missing) or
    :meth:`open_existing` (fail if missing).
    """

    def __init__(self, path, created: bool = False):
        self.path = Path(path)
        self.created = created

    @classmethod
    def new(
        cls,
        name,
        default=None,
        extra_paths: Iterable = (),
        environment: Optional[Environment] = None,
        include_system_cache: bool = False,
    ) -> "FileHandler":
        """Find ``name`` or create it with ``default`` (a value or a factory)."""
        search_paths = resolve_search_paths(
            extra_paths, environment, include_system_cache=include_system_cache
        )
        if callable(default):
            payload = default()
        elif default is None:
            payload = {}
        else:
            payload = default
        path, created = find_or_create(name, payload, search_paths)
        return cls(path, created)

    @classmethod
    def open_existing(
        cls,
        name,
        extra_paths: Iterable = (),
        environment: Optional[Environment] = None,
        include_system_cache: bool = False,
    ) -> "FileHandler":
        search_paths = resolve_search_paths(
            extra_paths, environment, include_system_cache=include_system_cache
        )
        return cls(find_existing(name, search_paths))

    def locked(self) -> ConfigFileHandle:
        return open_config(self.path)

    def read_file(self):
        with self.locked() as handle:
            return handle.read()

    def write_file(self, payload):
        with self.locked() as handle:
            handle.write(payload)

    def update(self, func):
        """Locked read-modify-write.

        ``func`` gets the current payload and returns the new one. Returning
        None keeps the (possibly mutated) payload it was given.
        """
        with self.locked() as handle:
            payload = handle.read()
            result = func(payload)
            if result is None:
                result = payload
            handle.write(result)
            return result

    def cleanup(self) -> bool:
        return cleanup(self.path)

    def __repr__(self):
        return f"FileHandler({str(self.path)!r}, created={self.created})"


class ScopedUserConfigDirRemover:
    """Removes the user config directory when the block exits.

    Tests and examples often create that directory as a side effect::

        with ScopedUserConfigDirRemover():
            handler = FileHandler.new("test.json")
            handler.write_file(111)
    """

    def __init__(self, environment: Optional[Environment] = None):
        self.environment = environment or Environment.current()

    def remove_dir(self):
        try:
            path = self.environment.user_config_dir()
        except DIR_LOOKUP_ERRORS as exc:
            logger.debug("No user config directory to remove: %s", exc)
            return
        shutil.rmtree(path, ignore_errors=True)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.remove_dir()
