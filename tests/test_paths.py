import os
from pathlib import Path

import pytest

from config_file_handler import paths
from config_file_handler.errors import PathResolutionError
from config_file_handler.paths import (
    DEFAULT_APP_NAME,
    EXTRA_PATHS_ENV,
    Environment,
    PlatformConfigDirs,
    exe_file_stem,
    resolve_search_paths,
)
from conftest import BrokenConfigDirs, FakeConfigDirs


def test_search_path_order(tmp_path, env, user_dir):
    extra = [tmp_path / "extra1", tmp_path / "extra2"]
    assert resolve_search_paths(extra, env) == [tmp_path / "bin", user_dir, *extra]


def test_environment_extra_paths_come_after_caller_paths(tmp_path, user_dir):
    env = Environment(
        executable=tmp_path / "bin" / "myapp",
        config_dirs=FakeConfigDirs(user_dir),
        extra_paths=[tmp_path / "from_env"],
    )
    result = resolve_search_paths([tmp_path / "caller"], env)
    assert result[-2:] == [tmp_path / "caller", tmp_path / "from_env"]


def test_duplicates_keep_first_position(tmp_path, env, user_dir):
    result = resolve_search_paths([tmp_path / "bin", tmp_path / "x"], env)
    assert result == [tmp_path / "bin", user_dir, tmp_path / "x"]


def test_unknown_executable_still_returns_other_candidates(tmp_path, user_dir):
    env = Environment(executable=None, config_dirs=FakeConfigDirs(user_dir))
    assert resolve_search_paths([tmp_path / "extra"], env) == [user_dir, tmp_path / "extra"]


def test_unknown_executable_strict(tmp_path, user_dir):
    env = Environment(executable=None, config_dirs=FakeConfigDirs(user_dir))
    with pytest.raises(PathResolutionError) as excinfo:
        resolve_search_paths([tmp_path / "extra"], env, strict=True)
    assert excinfo.value.search_paths == [user_dir, tmp_path / "extra"]


def test_broken_user_config_dir_is_skipped(tmp_path):
    env = Environment(executable=tmp_path / "bin" / "myapp", config_dirs=BrokenConfigDirs())
    assert resolve_search_paths([tmp_path / "extra"], env) == [tmp_path / "bin", tmp_path / "extra"]


def test_system_cache_is_opt_in(tmp_path):
    env = Environment(executable=tmp_path / "bin" / "myapp", app_name="myapp")
    without = resolve_search_paths((), env)
    with_cache = resolve_search_paths((), env, include_system_cache=True)
    assert with_cache[:-1] == without
    assert with_cache[-1] == PlatformConfigDirs("myapp").site_cache_dir()


def test_system_cache_skipped_when_unsupported(tmp_path, env):
    assert resolve_search_paths((), env, include_system_cache=True) == resolve_search_paths((), env)


def test_platform_config_dir_uses_app_name():
    assert PlatformConfigDirs("myapp").user_config_dir().name == "myapp"


def test_exe_file_stem():
    assert exe_file_stem(Path("/opt/app/Abc.exe")) == "Abc"
    assert exe_file_stem(Path("/opt/app/myapp")) == "myapp"
    assert exe_file_stem(Path("/opt/tool/__main__.py")) == "tool"


def test_exe_file_stem_falls_back_to_default(monkeypatch):
    monkeypatch.setattr(paths, "exe_path", lambda: None)
    assert exe_file_stem() == DEFAULT_APP_NAME
    assert exe_file_stem(default="fallback") == "fallback"


def test_exe_path_for_script(tmp_path, monkeypatch):
    script = tmp_path / "tool.py"
    script.write_text("")
    monkeypatch.setattr(paths.sys, "argv", [str(script)])
    assert paths.exe_path() == script.resolve()

    monkeypatch.setattr(paths.sys, "argv", ["-c"])
    assert paths.exe_path() is None


def test_environment_current_reads_extra_paths(tmp_path, monkeypatch):
    monkeypatch.setattr(paths, "exe_path", lambda: None)
    a, b = tmp_path / "a", tmp_path / "b"
    env = Environment.current(environ={EXTRA_PATHS_ENV: f"{a}{os.pathsep}{b}"})
    assert env.extra_paths == [a, b]
    assert env.app_name == DEFAULT_APP_NAME
    with pytest.raises(PathResolutionError):
        env.executable_dir()


def test_environment_site_cache_dir_is_optional(env):
    assert env.site_cache_dir() is None
