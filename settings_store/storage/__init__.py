# ==============================================
# STORAGE (SQLite backing stores)
# ==============================================
#
# This package handles all database operations:
# opening per-call connections, creating stores on demand,
# and reading / upserting setting rows.
#
# Modules:
# --------
# - sqlite_client.py  → SQLite statements against one StoreAddress
# - provisioner.py    → Creates directories + Setting table on demand
#
# ==============================================

from .sqlite_client import SQLiteClient
from .provisioner import StoreProvisioner

__all__ = [
    "SQLiteClient",
    "StoreProvisioner",
]
