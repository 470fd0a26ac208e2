# ==============================================
# StoreRouter
# ==============================================
#
# PURPOSE:
#   Takes a raw setting key, works out which store tier it belongs
#   to from its prefix, and hands back the tier's StoreAddress plus
#   the key with its prefix stripped.
#
# KEY FORMAT:
#   "@ruTheme"   → ROAMING_USER, stored as "Theme"
#   "@luWindow"  → LOCAL_USER,   stored as "Window"
#   "@apLicense" → APPLICATION,  stored as "License"
#   "Theme"      → ROAMING_USER, stored as "Theme"
#   "@xxTheme"   → ROAMING_USER, stored as "Theme" (unknown prefix)
#
# CLASS: StoreRouter
# ------------------
#   Stateless — holds the three addresses built at construction.
#
#   Constructor:
#   ------------
#   - __init__(addresses: dict[StoreTier, StoreAddress])
#   - for_application(domain_name, application_name, database_name, roots)
#       (classmethod) Build the addresses from names + storage roots.
#
#   Methods:
#   --------
#   - resolve(key: str) -> tuple[StoreAddress, str]
#   - tier_for(key: str) -> StoreTier
#   - strip(key: str) -> str
#   - address_for(tier: StoreTier) -> StoreAddress
#
# ==============================================

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from settings_store.exceptions import InvalidConfiguration, InvalidKey
from settings_store.routing.path_resolver import StorageRoots
from settings_store.routing.store_tier import (
    PREFIX_LENGTH,
    PREFIX_MARKER,
    StoreAddress,
    StoreTier,
)

logger = logging.getLogger(__name__)


def build_connection(path: Path) -> str:
    """SQLite URI for an existing store; mode=rw never creates the file."""
    return f"{path.absolute().as_uri()}?mode=rw"


class StoreRouter:
    def __init__(self, addresses: Mapping[StoreTier, StoreAddress]):
        missing = [tier.name for tier in StoreTier if tier not in addresses]
        if missing:
            raise InvalidConfiguration(f"No store address for tier(s): {', '.join(missing)}")
        self._addresses = MappingProxyType(dict(addresses))

    @classmethod
    def for_application(
        cls,
        domain_name: str,
        application_name: str,
        database_name: str,
        roots: StorageRoots,
    ) -> "StoreRouter":
        """
        Build a router whose tiers live under <root>/<domain>/<application>/.

        Args:
            domain_name: Vendor or organisation directory, e.g. "M3Logic"
            application_name: Application directory, e.g. "Test App"
            database_name: Database file name, e.g. "Settings.db"
            roots: Storage roots for the three tiers

        Raises:
            InvalidConfiguration: if any name is missing or empty
        """
        if not domain_name or not application_name or not database_name:
            raise InvalidConfiguration(
                "Domain, application and database name are all required to be non-empty."
            )

        tier_roots = {
            StoreTier.ROAMING_USER: roots.roaming,
            StoreTier.LOCAL_USER: roots.local,
            StoreTier.APPLICATION: roots.application,
        }
        addresses = {}
        for tier, root in tier_roots.items():
            directory = Path(root) / domain_name / application_name
            addresses[tier] = StoreAddress(
                tier=tier,
                directory=directory,
                file_name=database_name,
                connection=build_connection(directory / database_name),
            )
        return cls(addresses)

    @property
    def addresses(self) -> Mapping[StoreTier, StoreAddress]:
        return self._addresses

    def address_for(self, tier: StoreTier) -> StoreAddress:
        return self._addresses[tier]

    def tier_for(self, key: str) -> StoreTier:
        self._validate(key)
        if key.startswith(PREFIX_MARKER):
            return StoreTier.from_prefix(key[:PREFIX_LENGTH])
        return StoreTier.default()

    def strip(self, key: str) -> str:
        # Any "@xx" prefix is removed, recognized or not
        self._validate(key)
        stripped = key[PREFIX_LENGTH:] if key.startswith(PREFIX_MARKER) else key
        if not stripped:
            raise InvalidKey(key, "nothing left after the routing prefix")
        return stripped

    def resolve(self, key: str) -> tuple[StoreAddress, str]:
        """
        Route a key to its store.

        Returns:
            (address, stripped_key)

        Raises:
            InvalidKey: for empty keys, or "@" keys shorter than a full prefix
        """
        stripped = self.strip(key)
        address = self._addresses[self.tier_for(key)]
        logger.debug("Routed %r to %s as %r", key, address, stripped)
        return address, stripped

    @staticmethod
    def _validate(key: str) -> None:
        if not isinstance(key, str) or not key:
            raise InvalidKey(key, "key must be a non-empty string")
        if key.startswith(PREFIX_MARKER) and len(key) < PREFIX_LENGTH:
            raise InvalidKey(key, f"routing prefix must be {PREFIX_LENGTH} characters")
