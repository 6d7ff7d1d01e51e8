from __future__ import annotations

"""
Integration tests for FileSystem Infrastructure.

Validates path normalization and cross-platform data directory resolution.
"""

import os
from pathlib import Path
from unittest.mock import patch

from dircomp.infra.fs import get_user_data_dir, normalize_path

# -----------------------------------------------------------------------------
# PATH RESOLUTION TESTS
# -----------------------------------------------------------------------------

def test_get_user_data_dir_windows() -> None:
    """Resolution of %LOCALAPPDATA% on Windows systems."""
    mock_appdata = "C:/Users/Test/AppData/Local"
    with patch("os.name", "nt"):
        with patch.dict(os.environ, {"LOCALAPPDATA": mock_appdata}):
            # makedirs is mocked to avoid physical side effects during OS-spoofing
            with patch("os.makedirs"):
                path = get_user_data_dir()
                assert "DirComp" in path
                assert path.lower().startswith(os.path.abspath(mock_appdata).lower())


def test_get_user_data_dir_unix() -> None:
    """Resolution of ~/.dircomp on Unix-like systems."""
    mock_home = "/home/testuser"
    with patch("os.name", "posix"):
        with patch("os.path.expanduser", return_value=mock_home):
            with patch("os.makedirs"):
                path = get_user_data_dir()
                normalized_path = path.replace("\\", "/")
                assert normalized_path.endswith("/home/testuser/.dircomp")


def test_get_user_data_dir_tolerates_makedirs_failure() -> None:
    with patch("os.makedirs", side_effect=OSError("read-only")):
        assert os.path.isabs(get_user_data_dir())


def test_normalize_path_expansion() -> None:
    """Expansion of environment variables and user shortcuts."""
    with patch.dict(os.environ, {"TEST_VAR": "my_folder"}):
        path = normalize_path("$TEST_VAR/sub", fallback=".")
        assert path.lower().endswith(os.path.join("my_folder", "sub").lower())

        with patch("os.path.expanduser", side_effect=lambda p: p.replace("~", "/home/user")):
            path = normalize_path("~/code", fallback=".")
            assert "code" in Path(path).parts


def test_normalize_path_fallbacks(tmp_path: Path) -> None:
    assert normalize_path("   ", fallback=str(tmp_path)) == str(tmp_path)
    assert normalize_path(None, fallback=str(tmp_path)) == str(tmp_path)
    assert normalize_path("", fallback="") == ""


def test_normalize_path_makes_relative_paths_absolute() -> None:
    path = normalize_path("some/relative/dir")
    assert os.path.isabs(path)
    assert path.endswith(os.path.join("some", "relative", "dir"))
