"""Error types raised by config_file_handler."""


class ConfigFileError(Exception):
    """Base class for every error raised by this package."""


class PathResolutionError(ConfigFileError):
    """The running executable's location could not be determined.

    ``search_paths`` holds the candidates that were still resolved, so the
    caller can carry on with them.
    """

    def __init__(self, message, search_paths=None):
        super().__init__(message)
        self.search_paths = list(search_paths or [])


class NoWritableLocation(ConfigFileError):
    """No candidate directory accepted a new config file."""

    def __init__(self, name, search_paths):
        self.name = name
        self.search_paths = list(search_paths)
        tried = ", ".join(str(p) for p in self.search_paths) or "<none>"
        super().__init__(f"Could not create {name!r} in any of: {tried}")


class ConfigNotFound(ConfigFileError):
    """No existing config file was found in the search paths."""

    def __init__(self, name, search_paths):
        self.name = name
        self.search_paths = list(search_paths)
        tried = ", ".join(str(p) for p in self.search_paths) or "<none>"
        super().__init__(f"Config file {name!r} not found in: {tried}")


class LockAcquisitionError(ConfigFileError):
    """The OS lock primitive failed (contention blocks, it never raises this)."""


class ConfigIOError(ConfigFileError):
    """Reading, writing, creating or deleting the config file failed."""


class MalformedConfig(ConfigFileError):
    """The payload could not be parsed or serialized as JSON."""
