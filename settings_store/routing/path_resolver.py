# ==============================================
# Path Resolver
# ==============================================
#
# PURPOSE:
#   Decide where the three storage roots live on this machine.
#   The router appends <domain>/<application>/ to each root.
#
#   Tier         Windows          macOS                           Other
#   -----------  ---------------  ------------------------------  --------------------------
#   roaming      %APPDATA%        ~/Library/Application Support   $XDG_CONFIG_HOME | ~/.config
#   local        %LOCALAPPDATA%   ~/Library/Application Support   $XDG_DATA_HOME | ~/.local/share
#   application  %PROGRAMDATA%    /Library/Application Support    /var/lib
#
# ==============================================

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class StorageRoots:
    """The three root directories, one per store tier."""
    roaming: Path
    local: Path
    application: Path


def _env_path(name: str, fallback: Path) -> Path:
    value = os.environ.get(name)
    return Path(value) if value else fallback


def default_storage_roots(platform: Optional[str] = None) -> StorageRoots:
    """
    Return the OS-provided storage roots for the current user.

    Args:
        platform: Override for sys.platform (used by tests)

    Returns:
        StorageRoots for the roaming, local and application tiers
    """
    platform = platform or sys.platform
    home = Path.home()

    if platform.startswith("win"):
        roaming = _env_path("APPDATA", home / "AppData" / "Roaming")
        return StorageRoots(
            roaming=roaming,
            local=_env_path("LOCALAPPDATA", home / "AppData" / "Local"),
            application=_env_path("PROGRAMDATA", Path("C:/ProgramData")),
        )

    if platform == "darwin":
        support = home / "Library" / "Application Support"
        return StorageRoots(
            roaming=support,
            local=support,
            application=Path("/Library/Application Support"),
        )

    return StorageRoots(
        roaming=_env_path("XDG_CONFIG_HOME", home / ".config"),
        local=_env_path("XDG_DATA_HOME", home / ".local" / "share"),
        application=Path("/var/lib"),
    )
