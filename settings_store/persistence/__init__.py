# ==============================================
# PERSISTENCE (values across restarts)
# ==============================================
#
# This package handles how setting values are represented:
# as strings in the backing store, and as decoded objects
# in the per-manager cache.
#
# Modules:
# --------
# - codec.py          → Codec protocol + JsonCodec
# - setting_cache.py  → Thread-safe in-memory cache
#
# ==============================================

from .codec import Codec, JsonCodec, zero_value
from .setting_cache import SettingCache

__all__ = [
    "Codec",
    "JsonCodec",
    "zero_value",
    "SettingCache",
]
