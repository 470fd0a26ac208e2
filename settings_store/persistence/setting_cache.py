import threading
from typing import Any, Hashable


class SettingCache:
    """
    In-memory cache of decoded setting values, keyed by the setting
    key exactly as the caller passed it (prefix included).

    - Owned by one SettingManager; never shared between instances.
    - Thread-safe via a Lock held only while the dict is touched.
    - Eviction policy: none. Entries live as long as the cache does
      (no TTL, no size bound).
    """

    def __init__(self):
        self._entries: dict[Hashable, Any] = {}
        self._lock = threading.Lock()

    def lookup(self, key: Hashable) -> tuple[bool, Any]:
        """Return (found, value); value is None when not found."""
        with self._lock:
            if key in self._entries:
                return True, self._entries[key]
            return False, None

    def put(self, key: Hashable, value: Any) -> None:
        with self._lock:
            self._entries[key] = value

    def put_if_absent(self, key: Hashable, value: Any) -> bool:
        # True when the value was stored
        with self._lock:
            if key in self._entries:
                return False
            self._entries[key] = value
            return True

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
