import pytest

from config_file_handler.paths import Environment, UserConfigDirs


class FakeConfigDirs(UserConfigDirs):
    def __init__(self, path):
        self.path = path

    def user_config_dir(self):
        return self.path


class BrokenConfigDirs(UserConfigDirs):
    """Mimics platformdirs when HOME is unset and there is no passwd entry."""

    def user_config_dir(self):
        raise KeyError("getpwuid(): uid not found")


def make_unwritable_dir(tmp_path, name="readonly"):
    """A directory path that can never be created, even by root."""
    blocker = tmp_path / name
    blocker.write_text("not a directory")
    return blocker / "sub"


@pytest.fixture
def user_dir(tmp_path):
    return tmp_path / "user"


@pytest.fixture
def env(tmp_path, user_dir):
    return Environment(
        executable=tmp_path / "bin" / "myapp",
        app_name="myapp",
        config_dirs=FakeConfigDirs(user_dir),
    )
