"""Tests for storage root discovery."""

import pytest

from filesmanager.domain.errors import BootstrapFailure
from filesmanager.infrastructure.storage.root_locator import (
    is_location_usable,
    locate_storage_root,
    user_data_dir,
)


@pytest.fixture
def home(tmp_path):
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def temp_dir(tmp_path):
    path = tmp_path / "tmp"
    path.mkdir()
    return path


def test_is_location_usable(tmp_path):
    existing = tmp_path / "existing"
    existing.mkdir()
    plain_file = tmp_path / "plain.txt"
    plain_file.write_text("x")

    assert is_location_usable(existing) is True
    assert is_location_usable(tmp_path / "new") is True
    assert is_location_usable(tmp_path / "missing" / "child") is False
    assert is_location_usable(plain_file) is False


def test_user_data_dir_per_platform(home):
    assert user_data_dir(home, windows=False) == home / ".filesmanager"
    assert user_data_dir(home, windows=True) == home / "AppData" / "Local" / "FilesManager"


def test_configured_location_wins(tmp_path, home, temp_dir):
    configured = tmp_path / "configured"

    root = locate_storage_root(str(configured), home=home, temp_dir=temp_dir, windows=False)

    assert root == configured
    assert configured.is_dir()
    assert not (home / ".filesmanager").exists()


def test_existing_configured_location_is_reused(tmp_path, home, temp_dir):
    configured = tmp_path / "configured"
    configured.mkdir()
    (configured / "kept.txt").write_text("still here")

    root = locate_storage_root(str(configured), home=home, temp_dir=temp_dir, windows=False)

    assert root == configured
    assert (configured / "kept.txt").read_text() == "still here"


@pytest.mark.parametrize("configured", [None, "", "   "])
def test_blank_configuration_uses_user_data_dir(configured, home, temp_dir):
    root = locate_storage_root(configured, home=home, temp_dir=temp_dir, windows=False)
    assert root == home / ".filesmanager"
    assert root.is_dir()


def test_unusable_configuration_falls_back_to_user_data_dir(tmp_path, home, temp_dir):
    configured = tmp_path / "no-parent" / "storage"

    root = locate_storage_root(str(configured), home=home, temp_dir=temp_dir, windows=False)

    assert root == home / ".filesmanager"
    assert not configured.exists()


def test_windows_user_data_dir(home, temp_dir):
    (home / "AppData" / "Local").mkdir(parents=True)

    root = locate_storage_root(None, home=home, temp_dir=temp_dir, windows=True)

    assert root == home / "AppData" / "Local" / "FilesManager"
    assert root.is_dir()


def test_temp_fallback(tmp_path, temp_dir):
    missing_home = tmp_path / "nobody"

    root = locate_storage_root(None, home=missing_home, temp_dir=temp_dir, windows=False)

    assert root == temp_dir / "filesmanager"
    assert root.is_dir()


def test_bootstrap_failure_when_fallback_cannot_be_created(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")

    with pytest.raises(BootstrapFailure) as info:
        locate_storage_root(None, home=tmp_path / "nobody", temp_dir=blocker, windows=False)

    assert info.value.operation == "bootstrap"
    assert isinstance(info.value.__cause__, OSError)
