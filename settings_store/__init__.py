# ==============================================
# Settings Store
# ==============================================
#
# Package Structure:
#
# settings_store/
# ├── routing/            # Key prefix → store tier → StoreAddress
# ├── storage/            # SQLite client + on-demand store provisioning
# ├── persistence/        # Value codec + in-memory cache
# ├── config.py           # Configuration management (.env / environment)
# ├── exceptions.py       # Error hierarchy
# ├── policies.py         # NotFoundBehavior / CacheWritePolicy
# └── setting_manager.py  # Public entry point
#
# ==============================================

import logging

from .exceptions import (
    SettingsError,
    InvalidConfiguration,
    InvalidKey,
    StoreMissing,
    CreateFailed,
    PersistFailed,
    NotFound,
    DecodeFailed,
)
from .policies import NotFoundBehavior, CacheWritePolicy
from .routing import StoreTier, StoreAddress, StorageRoots, StoreRouter, default_storage_roots
from .persistence import Codec, JsonCodec, SettingCache
from .setting_manager import SettingManager

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "SettingManager",
    "NotFoundBehavior",
    "CacheWritePolicy",
    "StoreTier",
    "StoreAddress",
    "StorageRoots",
    "StoreRouter",
    "default_storage_roots",
    "Codec",
    "JsonCodec",
    "SettingCache",
    "SettingsError",
    "InvalidConfiguration",
    "InvalidKey",
    "StoreMissing",
    "CreateFailed",
    "PersistFailed",
    "NotFound",
    "DecodeFailed",
]
