# ==============================================
# ROUTING (key → store)
# ==============================================
#
# This package decides where a setting lives.
# Pure computation, no I/O.
#
# Modules:
# --------
# - store_tier.py     → StoreTier enum and StoreAddress data class
# - path_resolver.py  → OS-provided storage roots
# - store_router.py   → Maps a key prefix to a StoreAddress
#
# ==============================================

from .store_tier import StoreTier, StoreAddress
from .path_resolver import StorageRoots, default_storage_roots
from .store_router import StoreRouter

__all__ = [
    "StoreTier",
    "StoreAddress",
    "StorageRoots",
    "default_storage_roots",
    "StoreRouter",
]
