"""Locate, create, read and write an application's JSON config file."""

from .errors import (
    ConfigFileError,
    ConfigIOError,
    ConfigNotFound,
    LockAcquisitionError,
    MalformedConfig,
    NoWritableLocation,
    PathResolutionError,
)
from .handler import (
    FileHandler,
    ScopedUserConfigDirRemover,
    cleanup_all,
    find_existing,
    find_or_create,
)
from .paths import (
    Environment,
    PlatformConfigDirs,
    UserConfigDirs,
    exe_file_stem,
    resolve_search_paths,
)
from .utils import (
    ConfigFileHandle,
    cleanup,
    close,
    open_config,
    read,
    safe_load_json,
    safe_save_json,
    write,
)

__version__ = "0.1.0"

__all__ = [
    "ConfigFileError",
    "ConfigFileHandle",
    "ConfigIOError",
    "ConfigNotFound",
    "Environment",
    "FileHandler",
    "LockAcquisitionError",
    "MalformedConfig",
    "NoWritableLocation",
    "PathResolutionError",
    "PlatformConfigDirs",
    "ScopedUserConfigDirRemover",
    "UserConfigDirs",
    "cleanup",
    "cleanup_all",
    "close",
    "exe_file_stem",
    "find_existing",
    "find_or_create",
    "open_config",
    "read",
    "resolve_search_paths",
    "safe_load_json",
    "safe_save_json",
    "write",
]
