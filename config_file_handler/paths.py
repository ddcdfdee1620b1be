"""Candidate directories for a config file.

The search order is:

1. the directory holding the running program
2. the per-user config directory for the platform (via ``platformdirs``)
3. any extra directories supplied by the caller, then any listed in the
   ``CONFIG_FILE_HANDLER_PATH`` environment variable
4. optionally, the system-wide cache directory

Process-wide facts (where the program lives, what it is called) are held in
an :class:`Environment` so tests can pass in a fake one.
"""

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from platformdirs import PlatformDirs

from .errors import PathResolutionError

logger = logging.getLogger(__name__)

DEFAULT_APP_NAME = "config_file_handler"
EXTRA_PATHS_ENV = "CONFIG_FILE_HANDLER_PATH"

# platformdirs falls back to the passwd database when HOME is unset, which
# raises KeyError if the user has no entry.
DIR_LOOKUP_ERRORS = (OSError, KeyError, RuntimeError)


def exe_path() -> Optional[Path]:
    """Path of the running program, or None if it can't be worked out."""
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve()
    argv0 = sys.argv[0] if sys.argv else ""
    if argv0 and Path(argv0).is_file():
        return Path(argv0).resolve()
    return None


def exe_file_stem(executable=None, default=DEFAULT_APP_NAME) -> str:
    """File name of the running program without its extension.

    ``C:\\Abc.exe`` gives ``"Abc"``. Falls back to ``default`` when the
    program path is unknown.
    """
    if executable is None:
        executable = exe_path()
    if executable is None:
        return default
    executable = Path(executable)
    stem = executable.stem
    # `python -m pkg` runs pkg/__main__.py
    if stem == "__main__" and executable.parent.name:
        stem = executable.parent.name
    return stem or default


class UserConfigDirs:
    """Capability that knows where per-user config lives on this platform."""

    def user_config_dir(self) -> Path:
        raise NotImplementedError


class PlatformConfigDirs(UserConfigDirs):
    """``platformdirs`` backed directories, chosen for the running OS."""

    def __init__(self, app_name: str):
        self.app_name = app_name
        self._dirs = PlatformDirs(app_name, appauthor=False)

    def user_config_dir(self) -> Path:
        return Path(self._dirs.user_config_dir)

    def site_cache_dir(self) -> Path:
        return Path(self._dirs.site_cache_dir)

    def __repr__(self):
        return f"PlatformConfigDirs({self.app_name!r})"


def _extra_paths_from_env(environ=None) -> List[Path]:
    environ = os.environ if environ is None else environ
    raw = environ.get(EXTRA_PATHS_ENV, "")
    return [Path(p) for p in raw.split(os.pathsep) if p.strip()]


@dataclass
class Environment:
    """Process facts the search path depends on."""

    executable: Optional[Path] = None
    app_name: str = DEFAULT_APP_NAME
    config_dirs: Optional[UserConfigDirs] = None
    extra_paths: List[Path] = field(default_factory=list)

    def __post_init__(self):
        if self.executable is not None:
            self.executable = Path(self.executable)
        if self.config_dirs is None:
            self.config_dirs = PlatformConfigDirs(self.app_name)
        self.extra_paths = [Path(p) for p in self.extra_paths]

    @classmethod
    def current(cls, environ=None) -> "Environment":
        """Build an Environment from the running process."""
        executable = exe_path()
        return cls(
            executable=executable,
            app_name=exe_file_stem(executable),
            extra_paths=_extra_paths_from_env(environ),
        )

    def executable_dir(self) -> Path:
        if self.executable is None:
            raise PathResolutionError("Could not determine the running executable's location")
        return self.executable.parent

    def user_config_dir(self) -> Path:
        return self.config_dirs.user_config_dir()

    def site_cache_dir(self) -> Optional[Path]:
        """System-wide cache directory, or None if the resolver has none."""
        lookup = getattr(self.config_dirs, "site_cache_dir", None)
        if lookup is None:
            return None
        return lookup()


def resolve_search_paths(
    extra_paths: Iterable = (),
    environment: Optional[Environment] = None,
    strict: bool = False,
    include_system_cache: bool = False,
) -> List[Path]:
    """Return the candidate directories in priority order.

    A missing executable location never stops the other candidates from
    being collected. With ``strict`` the collected candidates are attached
    to the :class:`PathResolutionError` that is then raised; otherwise the
    problem is logged and the remaining candidates returned.
    """
    if environment is None:
        environment = Environment.current()

    paths: List[Path] = []
    exe_error = None

    try:
        paths.append(environment.executable_dir())
    except PathResolutionError as exc:
        exe_error = exc

    try:
        paths.append(environment.user_config_dir())
    except DIR_LOOKUP_ERRORS as exc:
        logger.debug("Skipping user config directory: %s", exc)

    paths.extend(Path(p) for p in extra_paths)
    paths.extend(environment.extra_paths)

    if include_system_cache:
        try:
            cache_dir = environment.site_cache_dir()
        except DIR_LOOKUP_ERRORS as exc:
            logger.debug("Skipping system cache directory: %s", exc)
        else:
            if cache_dir is None:
                logger.debug("No system cache directory for %r", environment.config_dirs)
            else:
                paths.append(cache_dir)

    unique: List[Path] = []
    for path in paths:
        if path not in unique:
            unique.append(path)

    if exe_error is not None:
        if strict:
            raise PathResolutionError(str(exe_error), search_paths=unique) from exe_error
        logger.warning("%s; searching %d other location(s)", exe_error, len(unique))

    return unique
