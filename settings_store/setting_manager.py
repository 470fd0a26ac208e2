# ==============================================
# SettingManager — Public Entry Point
# ==============================================
#
# PURPOSE:
#   Stores and retrieves settings. The key's prefix decides which
#   store the setting lives in; values are encoded by a codec and
#   kept in a per-instance cache after the first read or write.
#
#   Prefix | Storage location example
#   -------+-------------------------------------------------------------
#   @ru    | C:\Users\me\AppData\Roaming\<Domain>\<Application>\<db>
#   @lu    | C:\Users\me\AppData\Local\<Domain>\<Application>\<db>
#   @ap    | C:\ProgramData\<Domain>\<Application>\<db>
#   none   | same as @ru
#
# HOW THE PIECES CONNECT:
#
#   ┌──────────────────────────────────────────────────────────┐
#   │                      SettingManager                      │
#   │                                                          │
#   │   SettingCache ── hit? ──────────────────────► return    │
#   │        │ miss                                            │
#   │        ▼                                                 │
#   │   StoreRouter.resolve(key) → (StoreAddress, stripped)    │
#   │        │                                                 │
#   │        ▼                                                 │
#   │   SQLiteClient.fetch_value / upsert                      │
#   │        │ StoreMissing (save only)                        │
#   │        ▼                                                 │
#   │   StoreProvisioner.ensure(address) → retry upsert once   │
#   │        │                                                 │
#   │        ▼                                                 │
#   │   Codec.encode / decode  →  SettingCache.put             │
#   └──────────────────────────────────────────────────────────┘
#
# CLASS: SettingManager
# ---------------------
#
#   Constructor:
#   ------------
#   - __init__(domain_name, application_name, database_name, *,
#              config=None, roots=None, codec=None, cache=None, client=None)
#
#   Public Methods:
#   ---------------
#   - save(key: str, value: Any) -> None
#   - get(key: str, default=None, value_type=None) -> Any
#
#   Properties:
#   -----------
#   - not_found_behavior: NotFoundBehavior   (settable)
#   - cache_write_policy: CacheWritePolicy
#   - addresses: Mapping[StoreTier, StoreAddress]
#   - router / cache
#
# USAGE:
# ------
#   settings = SettingManager("M3Logic", "Test App", "Settings.db")
#   settings.save("@apTheme", "dark")
#   theme = settings.get("@apTheme", "light", str)
#
# ==============================================

import copy
import logging
import sqlite3
from typing import Any, Mapping, Optional, Type, TypeVar, get_origin

from settings_store.config import AppConfig, get_config
from settings_store.exceptions import (
    CreateFailed,
    DecodeFailed,
    NotFound,
    PersistFailed,
    StoreMissing,
)
from settings_store.persistence.codec import Codec, JsonCodec, zero_value
from settings_store.persistence.setting_cache import SettingCache
from settings_store.policies import CacheWritePolicy, NotFoundBehavior
from settings_store.routing.path_resolver import StorageRoots
from settings_store.routing.store_router import StoreRouter
from settings_store.routing.store_tier import StoreAddress, StoreTier
from settings_store.storage.provisioner import StoreProvisioner
from settings_store.storage.sqlite_client import SQLiteClient

logger = logging.getLogger(__name__)

T = TypeVar("T")

EMPTY_VALUE = ""


class SettingManager:
    """
    Manages storage and retrieval of settings across the roaming-user,
    local-user and application stores.

    Values must be serializable by the configured codec (JSON by default).
    Designed for ease of use, not raw speed.
    """

    def __init__(
        self,
        domain_name: str,
        application_name: str,
        database_name: str,
        *,
        config: Optional[AppConfig] = None,
        roots: Optional[StorageRoots] = None,
        codec: Optional[Codec] = None,
        cache: Optional[SettingCache] = None,
        client: Optional[SQLiteClient] = None,
    ):
        """
        Args:
            domain_name: The domain for the data store, i.e. <root>/Domain/ApplicationName
            application_name: The application for the data store, i.e. <root>/Domain/ApplicationName
            database_name: File name of the settings database, i.e. Settings.db
            config: Configuration. If None, loads from environment.
            roots: Storage roots. If None, taken from config.
            codec: Value codec. Defaults to JsonCodec.
            cache: Cache to use. Defaults to a fresh SettingCache.
            client: Storage engine client. Defaults to an SQLiteClient built from config.

        Raises:
            InvalidConfiguration: if any of the three names is missing or empty
        """
        self._config = config or get_config()

        self._router = StoreRouter.for_application(
            domain_name,
            application_name,
            database_name,
            roots or self._config.roots,
        )
        self._client = client or SQLiteClient(self._config.engine.busy_timeout_seconds)
        self._provisioner = StoreProvisioner(self._client)
        self._codec = codec or JsonCodec()
        self._cache = cache if cache is not None else SettingCache()

        self.not_found_behavior = self._config.manager.not_found_behavior
        self._cache_write_policy = self._config.manager.cache_write_policy

    # ------------------------------------------------------------------ #
    #  Properties                                                        #
    # ------------------------------------------------------------------ #
    @property
    def not_found_behavior(self) -> NotFoundBehavior:
        """
        Whether get() raises NotFound for a missing setting or returns a default.
        Default behavior is to return the default.
        """
        return self._not_found_behavior

    @not_found_behavior.setter
    def not_found_behavior(self, behavior: NotFoundBehavior) -> None:
        self._not_found_behavior = NotFoundBehavior(behavior)

    @property
    def cache_write_policy(self) -> CacheWritePolicy:
        return self._cache_write_policy

    @property
    def addresses(self) -> Mapping[StoreTier, StoreAddress]:
        return self._router.addresses

    @property
    def router(self) -> StoreRouter:
        return self._router

    @property
    def cache(self) -> SettingCache:
        return self._cache

    # ------------------------------------------------------------------ #
    #  API                                                               #
    # ------------------------------------------------------------------ #
    def save(self, key: str, value: Any) -> None:
        """
        Save a value to the store selected by the key's prefix.

        The store is created on first use. The cache keeps a copy of the
        value, and is only updated once the value has reached durable storage.

        Args:
            key: Setting key, optionally prefixed with @ru, @lu or @ap
            value: Value to store; None is stored as an empty value

        Raises:
            InvalidKey: the key cannot be routed
            PersistFailed: the value could not be written, even after
                creating the store
        """
        encoded = EMPTY_VALUE if value is None else self._codec.encode(value)
        address, stripped = self._router.resolve(key)
        # Later changes to the caller's object must not reach the cache
        snapshot = copy.deepcopy(value)

        try:
            self._client.upsert(address, stripped, encoded)
        except StoreMissing:
            logger.warning("Settings store %s missing while saving %r, creating it", address, key)
            self._provision_and_retry(key, address, stripped, encoded)
        except sqlite3.Error as exc:
            raise PersistFailed(key, address, exc) from exc

        if self._cache_write_policy is CacheWritePolicy.FIRST_WRITE_WINS:
            self._cache.put_if_absent(key, snapshot)
        else:
            self._cache.put(key, snapshot)

    def get(self, key: str, default: Any = None, value_type: Optional[Type[T]] = None) -> Any:
        """
        Retrieve the setting associated with a key.

        Args:
            key: Setting key, optionally prefixed with @ru, @lu or @ap
            default: Value returned when nothing is stored for the key
            value_type: Type to decode the stored value into

        Returns:
            The cached or stored value; otherwise `default`, or the zero
            value of `value_type` when no default is given

        Raises:
            InvalidKey: the key cannot be routed
            NotFound: nothing stored and not_found_behavior is THROW_ERROR
            DecodeFailed: the stored or cached value cannot be turned into `value_type`
        """
        found, cached = self._cache.lookup(key)
        if found and cached is not None:
            logger.debug("Cache hit for %r", key)
            return self._from_cache(key, cached, value_type)

        address, stripped = self._router.resolve(key)
        try:
            retrieved = self._client.fetch_value(address, stripped)
        except StoreMissing:
            # Reads never create stores
            retrieved = None

        # Empty stored values are treated exactly like missing ones
        if retrieved is None or not retrieved.strip():
            return self._not_found(key, address, default, value_type)

        try:
            value = self._codec.decode(retrieved, value_type)
        except (ValueError, TypeError, KeyError) as exc:
            raise DecodeFailed(key, exc) from exc

        self._cache.put(key, value)
        return copy.deepcopy(value)

    # ------------------------------------------------------------------ #
    #  Internals                                                         #
    # ------------------------------------------------------------------ #
    def _from_cache(self, key: str, cached: Any, value_type: Optional[type]) -> Any:
        """
        A copy of a cached value, typed the way a read from the store would be.

        A cached value that is not already a `value_type` goes through the
        codec, so a cache hit and a fresh read accept and reject the same
        types.
        """
        origin = get_origin(value_type) or value_type
        if value_type is None or value_type is Any or not isinstance(origin, type):
            return copy.deepcopy(cached)
        if isinstance(cached, origin):
            return copy.deepcopy(cached)

        try:
            return self._codec.decode(self._codec.encode(cached), value_type)
        except (ValueError, TypeError, KeyError) as exc:
            raise DecodeFailed(key, exc) from exc

    def _provision_and_retry(
        self, key: str, address: StoreAddress, stripped: str, encoded: str
    ) -> None:
        try:
            self._provisioner.ensure(address)
        except CreateFailed as exc:
            raise PersistFailed(key, address, exc) from exc

        try:
            self._client.upsert(address, stripped, encoded)
        except (StoreMissing, sqlite3.Error) as exc:
            raise PersistFailed(key, address, exc) from exc

    def _not_found(
        self,
        key: str,
        address: StoreAddress,
        default: Any,
        value_type: Optional[type],
    ) -> Any:
        if self._not_found_behavior is NotFoundBehavior.THROW_ERROR:
            raise NotFound(key, address)
        if default is not None:
            return default
        return zero_value(value_type)
