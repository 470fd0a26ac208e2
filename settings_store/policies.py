# ==============================================
# Manager Policies
# ==============================================
#
# ENUMS:
# ------
# - NotFoundBehavior(Enum): RETURN_DEFAULT, THROW_ERROR
#     What get() does when a key has no stored value.
#
# - CacheWritePolicy(Enum): REFRESH, FIRST_WRITE_WINS
#     How save() updates the in-memory cache.
#
# Both enums use lowercase string values so they can be read
# directly from environment variables (see config.py).
# ==============================================

from enum import Enum


class NotFoundBehavior(Enum):
    """
    Behavior of get() for a key with no stored value.

    - RETURN_DEFAULT: return the caller's default, or the type's zero value (default)
    - THROW_ERROR: raise NotFound
    """
    RETURN_DEFAULT = "return_default"
    THROW_ERROR = "throw_error"


class CacheWritePolicy(Enum):
    """
    How save() treats a key that is already cached.

    - REFRESH: every save replaces the cached value (default)
    - FIRST_WRITE_WINS: only the first save of a key is cached; later
      saves update durable storage but not the cache
    """
    REFRESH = "refresh"
    FIRST_WRITE_WINS = "first_write_wins"
