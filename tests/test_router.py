# ==============================================
# Tests for Routing Module
# ==============================================

import pytest
from dataclasses import FrozenInstanceError
from pathlib import Path

from settings_store.exceptions import InvalidConfiguration, InvalidKey
from settings_store.routing.path_resolver import default_storage_roots
from settings_store.routing.store_router import StoreRouter
from settings_store.routing.store_tier import StoreAddress, StoreTier


@pytest.fixture
def router(roots):
    return StoreRouter.for_application("M3Logic", "Test App", "Settings.db", roots)


class TestStoreTier:
    def test_known_prefixes(self):
        """Each prefix maps to its own tier."""
        assert StoreTier.from_prefix("@ru") is StoreTier.ROAMING_USER
        assert StoreTier.from_prefix("@lu") is StoreTier.LOCAL_USER
        assert StoreTier.from_prefix("@ap") is StoreTier.APPLICATION

    def test_unknown_prefix_uses_default(self):
        """Unknown prefixes fall back to roaming."""
        assert StoreTier.from_prefix("@zz") is StoreTier.ROAMING_USER
        assert StoreTier.from_prefix("Foo") is StoreTier.ROAMING_USER


class TestStoreRouter:
    def test_routing_determinism(self, router, roots):
        """@ru, @lu, @ap and unprefixed keys land in the right directory as "Foo"."""
        expected = {
            "@ruFoo": roots.roaming,
            "@luFoo": roots.local,
            "@apFoo": roots.application,
            "Foo": roots.roaming,
        }
        for key, root in expected.items():
            address, stripped = router.resolve(key)
            assert address.directory == root / "M3Logic" / "Test App"
            assert address.file_name == "Settings.db"
            assert stripped == "Foo"

    def test_resolve_is_stable(self, router):
        """Resolving the same key twice gives the same address."""
        assert router.resolve("@luFoo") == router.resolve("@luFoo")

    def test_unknown_prefix_is_stripped_and_routed_to_default(self, router):
        address, stripped = router.resolve("@zzFoo")
        assert address.tier is StoreTier.ROAMING_USER
        assert stripped == "Foo"

    def test_short_keys_without_marker_are_accepted(self, router):
        address, stripped = router.resolve("A")
        assert address.tier is StoreTier.ROAMING_USER
        assert stripped == "A"

    @pytest.mark.parametrize("key", ["", "@", "@r", "@ru", None, 42])
    def test_invalid_keys(self, router, key):
        """Empty, too-short-prefix and prefix-only keys are rejected."""
        with pytest.raises(InvalidKey):
            router.resolve(key)

    def test_connection_descriptor_is_read_write_uri(self, router):
        address = router.address_for(StoreTier.APPLICATION)
        assert address.connection.startswith("file:")
        assert address.connection.endswith("?mode=rw")
        assert address.path == address.directory / "Settings.db"

    def test_addresses_cover_every_tier(self, router):
        assert set(router.addresses) == set(StoreTier)
        with pytest.raises(TypeError):
            router.addresses[StoreTier.APPLICATION] = None

    def test_addresses_are_frozen(self, router):
        address = router.address_for(StoreTier.LOCAL_USER)
        with pytest.raises(FrozenInstanceError):
            address.file_name = "Other.db"

    @pytest.mark.parametrize(
        "names",
        [
            ("", "Test App", "Settings.db"),
            ("M3Logic", "", "Settings.db"),
            ("M3Logic", "Test App", ""),
            (None, "Test App", "Settings.db"),
        ],
    )
    def test_missing_names_rejected(self, roots, names):
        with pytest.raises(InvalidConfiguration):
            StoreRouter.for_application(*names, roots)

    def test_router_needs_all_tiers(self, tmp_path):
        only_one = {
            StoreTier.ROAMING_USER: StoreAddress(
                StoreTier.ROAMING_USER, tmp_path, "Settings.db", "file:x?mode=rw"
            )
        }
        with pytest.raises(InvalidConfiguration):
            StoreRouter(only_one)


class TestPathResolver:
    def test_windows_uses_appdata_variables(self, monkeypatch, tmp_path):
        monkeypatch.setenv("APPDATA", str(tmp_path / "Roaming"))
        monkeypatch.setenv("LOCALAPPDATA", str(tmp_path / "Local"))
        monkeypatch.setenv("PROGRAMDATA", str(tmp_path / "ProgramData"))
        roots = default_storage_roots("win32")
        assert roots.roaming == tmp_path / "Roaming"
        assert roots.local == tmp_path / "Local"
        assert roots.application == tmp_path / "ProgramData"

    def test_linux_uses_xdg_variables(self, monkeypatch, tmp_path):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
        roots = default_storage_roots("linux")
        assert roots.roaming == tmp_path / "config"
        assert roots.local == tmp_path / "data"
        assert roots.application == Path("/var/lib")

    def test_linux_falls_back_to_home(self, monkeypatch):
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.delenv("XDG_DATA_HOME", raising=False)
        roots = default_storage_roots("linux")
        assert roots.roaming == Path.home() / ".config"
        assert roots.local == Path.home() / ".local" / "share"

    def test_macos_application_support(self):
        roots = default_storage_roots("darwin")
        assert roots.roaming == Path.home() / "Library" / "Application Support"
        assert roots.application == Path("/Library/Application Support")
