# ==============================================
# Configuration Management
# ==============================================
#
# PURPOSE:
#   Load and validate all configuration from environment
#   variables / .env file. Provides typed config objects
#   to the manager and the storage engine.
#
# CLASSES:
# --------
# - StorageRoots (dataclass, from routing.path_resolver)
#     roaming: Path      (env SETTINGS_ROAMING_ROOT, default per OS)
#     local: Path        (env SETTINGS_LOCAL_ROOT, default per OS)
#     application: Path  (env SETTINGS_APPLICATION_ROOT, default per OS)
#
# - ManagerConfig (dataclass)
#     not_found_behavior: NotFoundBehavior  (default RETURN_DEFAULT)
#     cache_write_policy: CacheWritePolicy  (default REFRESH)
#
# - EngineConfig (dataclass)
#     busy_timeout_seconds: float  (default 5.0)
#
# - AppConfig (dataclass)
#     roots: StorageRoots
#     manager: ManagerConfig
#     engine: EngineConfig
#
# FUNCTIONS:
# ----------
# - get_config() -> AppConfig
#     Load .env using python-dotenv, construct AppConfig.
#     Returns the same singleton on repeated calls.
#
# - reset_config() -> None
#     Forget the singleton so the next get_config() reloads.
#
# USAGE:
# ------
#   from settings_store.config import get_config
#   config = get_config()
#   print(config.roots.roaming)
#   print(config.manager.not_found_behavior)
#
# ==============================================

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Type, TypeVar

from dotenv import find_dotenv, load_dotenv

from settings_store.exceptions import InvalidConfiguration
from settings_store.policies import CacheWritePolicy, NotFoundBehavior
from settings_store.routing.path_resolver import StorageRoots, default_storage_roots

E = TypeVar("E", bound=Enum)


@dataclass
class ManagerConfig:
    """SettingManager behavior."""
    not_found_behavior: NotFoundBehavior = NotFoundBehavior.RETURN_DEFAULT
    cache_write_policy: CacheWritePolicy = CacheWritePolicy.REFRESH


@dataclass
class EngineConfig:
    """SQLite engine configuration."""
    busy_timeout_seconds: float = 5.0


@dataclass
class AppConfig:
    """Main configuration."""
    roots: StorageRoots = field(default_factory=default_storage_roots)
    manager: ManagerConfig = field(default_factory=ManagerConfig)
    engine: EngineConfig = field(default_factory=EngineConfig)


# Singleton instance
_config_instance: Optional[AppConfig] = None


def _env_enum(name: str, enum_type: Type[E], default: E) -> E:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return enum_type(raw.strip().lower())
    except ValueError:
        choices = ", ".join(member.value for member in enum_type)
        raise InvalidConfiguration(f"{name}={raw!r} is not one of: {choices}") from None


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise InvalidConfiguration(f"{name}={raw!r} is not a number") from None
    if value < 0:
        raise InvalidConfiguration(f"{name} must not be negative")
    return value


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    return Path(raw).expanduser() if raw else default


def get_config() -> AppConfig:
    """
    Load configuration from environment variables / .env file.
    Returns the same singleton instance on repeated calls.

    Returns:
        AppConfig: Settings store configuration

    Raises:
        InvalidConfiguration: if a variable holds an unusable value
    """
    global _config_instance

    if _config_instance is not None:
        return _config_instance

    # Load .env from the working directory (or a parent), without
    # overriding variables already set in the process
    load_dotenv(dotenv_path=find_dotenv(usecwd=True))

    defaults = default_storage_roots()
    roots = StorageRoots(
        roaming=_env_path("SETTINGS_ROAMING_ROOT", defaults.roaming),
        local=_env_path("SETTINGS_LOCAL_ROOT", defaults.local),
        application=_env_path("SETTINGS_APPLICATION_ROOT", defaults.application),
    )

    manager_config = ManagerConfig(
        not_found_behavior=_env_enum(
            "SETTINGS_NOT_FOUND_BEHAVIOR", NotFoundBehavior, NotFoundBehavior.RETURN_DEFAULT
        ),
        cache_write_policy=_env_enum(
            "SETTINGS_CACHE_WRITE_POLICY", CacheWritePolicy, CacheWritePolicy.REFRESH
        ),
    )

    engine_config = EngineConfig(
        busy_timeout_seconds=_env_float("SETTINGS_BUSY_TIMEOUT_SECONDS", 5.0)
    )

    _config_instance = AppConfig(
        roots=roots,
        manager=manager_config,
        engine=engine_config,
    )

    return _config_instance


def reset_config() -> None:
    global _config_instance
    _config_instance = None
