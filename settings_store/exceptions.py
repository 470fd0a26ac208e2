# ==============================================
# Exceptions
# ==============================================
#
# PURPOSE:
#   Error hierarchy for the settings store. Everything raised on
#   purpose by this package derives from SettingsError, so callers
#   can catch the whole family in one place.
#
# HIERARCHY:
# ----------
#   SettingsError
#   ├── InvalidConfiguration   → bad constructor inputs / config values
#   ├── InvalidKey             → empty or malformed setting key
#   ├── StoreMissing           → engine: backing store absent or empty
#   ├── CreateFailed           → provisioning a store failed
#   ├── PersistFailed          → a save could not be completed
#   ├── NotFound               → no row (only in THROW_ERROR mode)
#   └── DecodeFailed           → codec could not rebuild the value
#
# The underlying low-level error is always chained as __cause__.
# ==============================================

from pathlib import Path
from typing import Any, Optional


class SettingsError(Exception):
    """Base exception for all settings store errors."""


class InvalidConfiguration(SettingsError):
    """Raised when the manager or its configuration is given unusable values."""


class InvalidKey(SettingsError, ValueError):
    """
    Raised when a setting key cannot be routed.

    Attributes:
        key: The offending key, as passed by the caller
    """

    def __init__(self, key: Any, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Invalid setting key {key!r}: {reason}")


class StoreMissing(SettingsError):
    """
    Raised by the storage engine when the backing store at an address
    does not exist yet: the file is absent, empty, or has no Setting table.

    This is the only condition the manager recovers from on its own.
    """

    def __init__(self, address):
        self.address = address
        super().__init__(f"No settings store at \"{address.path}\"")


class CreateFailed(SettingsError):
    """
    Raised when a backing store could not be provisioned.

    Attributes:
        path: Full path of the database file that was being created
    """

    def __init__(self, path: Path, cause: Optional[BaseException] = None):
        self.path = path
        message = f"Unable to create new database file: \"{path}\""
        if cause is not None:
            message = f"{message} ({cause})"
        super().__init__(message)


class PersistFailed(SettingsError):
    """
    Raised when a save could not reach durable storage, even after the
    single provisioning retry.

    Attributes:
        key: Full (unstripped) setting key
        address: StoreAddress the write was aimed at
    """

    def __init__(self, key: str, address, cause: Optional[BaseException] = None):
        self.key = key
        self.address = address
        message = f"Unable to save setting \"{key}\" to \"{address.path}\""
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class NotFound(SettingsError, LookupError):
    """
    Raised by get() when no value is stored for a key and the manager
    is configured with NotFoundBehavior.THROW_ERROR.
    """

    def __init__(self, key: str, address):
        self.key = key
        self.address = address
        super().__init__(f"Key \"{key}\" not found in database \"{address.path}\".")


class DecodeFailed(SettingsError):
    """
    Raised when a stored value cannot be decoded into the requested type.

    Attributes:
        key: Full (unstripped) setting key
    """

    def __init__(self, key: str, cause: Optional[BaseException] = None):
        self.key = key
        message = f"Unable to decode stored value for \"{key}\""
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
