# ==============================================
# Pytest Configuration and Fixtures
# ==============================================
#
# Shared fixtures for all tests. Every test gets its own
# storage roots under tmp_path, so nothing touches the real
# user profile directories.
# ==============================================

import pytest

from settings_store.config import AppConfig, reset_config
from settings_store.routing.path_resolver import StorageRoots
from settings_store.setting_manager import SettingManager


@pytest.fixture
def roots(tmp_path) -> StorageRoots:
    """Three separate storage roots inside a temp directory."""
    return StorageRoots(
        roaming=tmp_path / "roaming",
        local=tmp_path / "local",
        application=tmp_path / "application",
    )


@pytest.fixture
def config(roots) -> AppConfig:
    return AppConfig(roots=roots)


@pytest.fixture
def manager(config) -> SettingManager:
    """A fresh manager for the test application."""
    return SettingManager("M3Logic", "Test App", "Settings.db", config=config)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove SETTINGS_* variables and reset the config singleton."""
    for name in (
        "SETTINGS_ROAMING_ROOT",
        "SETTINGS_LOCAL_ROOT",
        "SETTINGS_APPLICATION_ROOT",
        "SETTINGS_NOT_FOUND_BEHAVIOR",
        "SETTINGS_CACHE_WRITE_POLICY",
        "SETTINGS_BUSY_TIMEOUT_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield monkeypatch
    reset_config()
