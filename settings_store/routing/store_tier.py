# ==============================================
# Store Tiers and Addresses (Data Classes)
# ==============================================
#
# PURPOSE:
#   Data classes that describe WHERE a setting lives. These are the
#   output of routing and the input of the storage engine and the
#   provisioner.
#
# ENUMS:
# ------
# - StoreTier(Enum): ROAMING_USER, LOCAL_USER, APPLICATION
#     Logical store identifier. The enum value is the 3-character key
#     prefix that selects the tier.
#
# CLASSES:
# --------
# - StoreAddress (frozen dataclass)
#     Concrete location of one tier's backing store.
#
#     Attributes:
#     -----------
#     - tier: StoreTier          → Which tier this address belongs to
#     - directory: Path          → <root>/<domain>/<application>/
#     - file_name: str           → Database file name, e.g. "Settings.db"
#     - connection: str          → SQLite URI used to open the store
#
#     Properties:
#     -----------
#     - path -> Path             → directory / file_name
#
# ==============================================

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

PREFIX_LENGTH = 3
PREFIX_MARKER = "@"


class StoreTier(Enum):
    """
    Enumeration of storage tiers a key can be routed to.

    - ROAMING_USER: per-user data that follows the user between machines (default)
    - LOCAL_USER: per-user data that stays on this machine
    - APPLICATION: machine-wide data shared by every user
    """
    ROAMING_USER = "@ru"
    LOCAL_USER = "@lu"
    APPLICATION = "@ap"

    @classmethod
    def default(cls) -> "StoreTier":
        return cls.ROAMING_USER

    @classmethod
    def from_prefix(cls, prefix: str) -> "StoreTier":
        """
        Map a 3-character prefix to its tier.

        Unrecognized prefixes fall back to the default tier.
        """
        try:
            return cls(prefix)
        except ValueError:
            return cls.default()


@dataclass(frozen=True)
class StoreAddress:
    """Resolved location of one tier's backing store."""

    tier: StoreTier
    directory: Path
    file_name: str
    connection: str

    @property
    def path(self) -> Path:
        return self.directory / self.file_name

    def __str__(self) -> str:
        return f"{self.tier.name}:{self.path}"
