# ==============================================
# SQLiteClient
# ==============================================
#
# PURPOSE:
#   Runs every statement against a tier's SQLite backing store:
#   reading one value, upserting one value, and creating the
#   Setting table.
#
# CONNECTIONS:
#   Nothing is held between calls. Each operation opens its own
#   connection for the address it was given and closes it on every
#   exit path, error paths included.
#
# MISSING STORES:
#   A store that is not there yet (file absent, empty, or without
#   the Setting table) is reported as StoreMissing, never as a raw
#   sqlite3 error. Any other sqlite3.Error propagates unchanged.
#
# CLASS: SQLiteClient
# -------------------
#   Constructor:
#   ------------
#   - __init__(busy_timeout_seconds: float = 5.0)
#
#   Methods:
#   --------
#   - fetch_value(address, key) -> str | None
#       SELECT Value FROM Setting WHERE Key = ?
#
#   - upsert(address, key, value) -> None
#       INSERT OR REPLACE INTO Setting (Key, Value) VALUES (?, ?)
#
#   - create_table(address) -> None
#       Create the database file (if needed) and the Setting table.
#
# ==============================================

import logging
import sqlite3
from contextlib import contextmanager
from typing import Iterator, Optional

from settings_store.exceptions import StoreMissing
from settings_store.routing.store_tier import StoreAddress

logger = logging.getLogger(__name__)

TABLE_NAME = "Setting"

CREATE_TABLE_SQL = (
    f'CREATE TABLE IF NOT EXISTS {TABLE_NAME} '
    '("Key" TEXT PRIMARY KEY UNIQUE NOT NULL, "Value" TEXT)'
)
SELECT_VALUE_SQL = f'SELECT "Value" FROM {TABLE_NAME} WHERE "Key" = ?'
UPSERT_SQL = f'INSERT OR REPLACE INTO {TABLE_NAME} ("Key", "Value") VALUES (?, ?)'
TABLE_EXISTS_SQL = "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?"


class SQLiteClient:
    def __init__(self, busy_timeout_seconds: float = 5.0):
        self.busy_timeout_seconds = busy_timeout_seconds

    @contextmanager
    def _connect(self, address: StoreAddress) -> Iterator[sqlite3.Connection]:
        # mode=rw in the connection URI: a missing file is never created here
        if not address.path.is_file():
            raise StoreMissing(address)
        try:
            connection = sqlite3.connect(
                address.connection, uri=True, timeout=self.busy_timeout_seconds
            )
        except sqlite3.OperationalError as exc:
            # Removed between the check above and the open
            if not address.path.is_file():
                raise StoreMissing(address) from exc
            raise
        try:
            yield connection
        finally:
            connection.close()

    def fetch_value(self, address: StoreAddress, key: str) -> Optional[str]:
        """
        Read the stored value for a stripped key.

        Returns:
            The stored string, or None when no row exists

        Raises:
            StoreMissing: if the store at `address` has not been created
        """
        with self._connect(address) as connection:
            try:
                row = connection.execute(SELECT_VALUE_SQL, (key,)).fetchone()
            except sqlite3.OperationalError as exc:
                if not self._has_table(connection):
                    raise StoreMissing(address) from exc
                raise
        logger.debug("Read %r from %s (%s)", key, address, "hit" if row else "miss")
        return row[0] if row else None

    def upsert(self, address: StoreAddress, key: str, value: str) -> None:
        """
        Insert or replace the value for a stripped key.

        Raises:
            StoreMissing: if the store at `address` has not been created
        """
        with self._connect(address) as connection:
            try:
                with connection:
                    connection.execute(UPSERT_SQL, (key, value))
            except sqlite3.OperationalError as exc:
                if not self._has_table(connection):
                    raise StoreMissing(address) from exc
                raise
        logger.debug("Wrote %r to %s", key, address)

    def create_table(self, address: StoreAddress) -> None:
        # Plain path (not the rw URI) so sqlite creates the file
        connection = sqlite3.connect(str(address.path), timeout=self.busy_timeout_seconds)
        try:
            with connection:
                connection.execute(CREATE_TABLE_SQL)
        finally:
            connection.close()

    @staticmethod
    def _has_table(connection: sqlite3.Connection) -> bool:
        return connection.execute(TABLE_EXISTS_SQL, (TABLE_NAME,)).fetchone() is not None
