# ==============================================
# StoreProvisioner
# ==============================================
#
# PURPOSE:
#   Makes sure the backing store at a StoreAddress exists:
#     1. Create every missing directory segment
#     2. Create the database file and the Setting table
#
#   Running it against a store that already exists changes nothing.
#   Any failure is raised as CreateFailed with the cause chained.
#
# ==============================================

import logging
import sqlite3

from settings_store.exceptions import CreateFailed
from settings_store.routing.store_tier import StoreAddress
from settings_store.storage.sqlite_client import SQLiteClient

logger = logging.getLogger(__name__)


class StoreProvisioner:
    def __init__(self, client: SQLiteClient):
        self.client = client

    def ensure(self, address: StoreAddress) -> None:
        """
        Create the store at `address` if it is not there yet.

        Raises:
            CreateFailed: directory or table could not be created
        """
        try:
            address.directory.mkdir(parents=True, exist_ok=True)
            self.client.create_table(address)
        except (OSError, sqlite3.Error) as exc:
            raise CreateFailed(address.path, exc) from exc
        logger.info("Provisioned settings store %s", address)
