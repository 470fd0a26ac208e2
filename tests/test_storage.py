# ==============================================
# Tests for Storage Module
# ==============================================
#
# SQLiteClient against real temp-directory databases,
# and StoreProvisioner creating them.
# ==============================================

import sqlite3

import pytest

from settings_store.exceptions import CreateFailed, StoreMissing
from settings_store.routing.store_router import StoreRouter
from settings_store.routing.store_tier import StoreTier
from settings_store.storage.provisioner import StoreProvisioner
from settings_store.storage.sqlite_client import SQLiteClient


@pytest.fixture
def client():
    return SQLiteClient(busy_timeout_seconds=1.0)


@pytest.fixture
def provisioner(client):
    return StoreProvisioner(client)


@pytest.fixture
def address(roots):
    router = StoreRouter.for_application("M3Logic", "Test App", "Settings.db", roots)
    return router.address_for(StoreTier.APPLICATION)


def table_columns(path):
    connection = sqlite3.connect(str(path))
    try:
        return [
            (row[1], row[2], row[3], row[5])
            for row in connection.execute("PRAGMA table_info(Setting)")
        ]
    finally:
        connection.close()


def read_rows(path):
    """All (Key, Value) rows of a store, straight from SQLite."""
    connection = sqlite3.connect(str(path))
    try:
        return connection.execute('SELECT "Key", "Value" FROM Setting ORDER BY "Key"').fetchall()
    finally:
        connection.close()


def has_setting_table(path):
    if not path.is_file():
        return False
    connection = sqlite3.connect(str(path))
    try:
        row = connection.execute(
            "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = 'Setting'"
        ).fetchone()
        return row is not None
    finally:
        connection.close()



class TestSQLiteClient:
    def test_fetch_from_missing_file(self, client, address):
        """No database file → StoreMissing, and no file gets created."""
        with pytest.raises(StoreMissing):
            client.fetch_value(address, "Foo")
        assert not address.path.exists()

    def test_upsert_into_missing_file(self, client, address):
        with pytest.raises(StoreMissing):
            client.upsert(address, "Foo", '"bar"')
        assert not address.path.exists()

    def test_empty_file_is_missing_store(self, client, address):
        """A zero-byte file has no Setting table → StoreMissing."""
        address.directory.mkdir(parents=True)
        address.path.touch()
        with pytest.raises(StoreMissing):
            client.upsert(address, "Foo", '"bar"')
        with pytest.raises(StoreMissing):
            client.fetch_value(address, "Foo")

    def test_upsert_and_fetch(self, client, provisioner, address):
        provisioner.ensure(address)
        client.upsert(address, "Foo", '"bar"')
        assert client.fetch_value(address, "Foo") == '"bar"'

    def test_fetch_missing_row(self, client, provisioner, address):
        provisioner.ensure(address)
        assert client.fetch_value(address, "Nope") is None

    def test_upsert_replaces(self, client, provisioner, address):
        """A second upsert overwrites: still one row per key."""
        provisioner.ensure(address)
        client.upsert(address, "Foo", '"one"')
        client.upsert(address, "Foo", '"two"')
        assert read_rows(address.path) == [("Foo", '"two"')]

    def test_numeric_looking_values_stay_text(self, client, provisioner, address):
        provisioner.ensure(address)
        client.upsert(address, "Number", "123.4560")
        assert client.fetch_value(address, "Number") == "123.4560"

    def test_table_created_by_provisioner(self, provisioner, address):
        assert has_setting_table(address.path) is False
        provisioner.ensure(address)
        assert has_setting_table(address.path) is True

    def test_corrupt_file_is_not_a_missing_store(self, client, address):
        """Garbage in the file is a real engine error, not StoreMissing."""
        address.directory.mkdir(parents=True)
        address.path.write_bytes(b"this is definitely not a sqlite database" * 50)
        with pytest.raises(sqlite3.DatabaseError):
            client.fetch_value(address, "Foo")

    def test_file_removed_before_open(self, client, provisioner, address, monkeypatch):
        """A store deleted after the existence check is still StoreMissing."""
        provisioner.ensure(address)
        real_connect = sqlite3.connect

        def connect_after_delete(*args, **kwargs):
            address.path.unlink()
            return real_connect(*args, **kwargs)

        monkeypatch.setattr(sqlite3, "connect", connect_after_delete)
        with pytest.raises(StoreMissing):
            client.fetch_value(address, "Foo")
        assert not address.path.exists()


class TestStoreProvisioner:
    def test_creates_directories_and_schema(self, provisioner, address):
        provisioner.ensure(address)
        assert address.directory.is_dir()
        assert address.path.is_file()
        assert table_columns(address.path) == [
            ("Key", "TEXT", 1, 1),
            ("Value", "TEXT", 0, 0),
        ]

    def test_idempotent(self, client, provisioner, address):
        """Running twice keeps existing rows."""
        provisioner.ensure(address)
        client.upsert(address, "Foo", '"bar"')
        provisioner.ensure(address)
        assert client.fetch_value(address, "Foo") == '"bar"'

    def test_repairs_empty_file(self, client, provisioner, address):
        address.directory.mkdir(parents=True)
        address.path.touch()
        provisioner.ensure(address)
        assert has_setting_table(address.path)

    def test_file_in_place_of_directory(self, provisioner, address):
        """A regular file where a directory is needed → CreateFailed."""
        blocker = address.directory.parent
        blocker.parent.mkdir(parents=True)
        blocker.write_text("not a directory")
        with pytest.raises(CreateFailed) as excinfo:
            provisioner.ensure(address)
        assert excinfo.value.path == address.path
        assert isinstance(excinfo.value.__cause__, OSError)
