"""
Configuration Module
====================

Provides immutable, environment-aware configuration.

Features:
- Immutable configuration after initialization
- Environment variable override support (PWSTORE_ prefix)
- Sensitive keys are never read from the environment
- OS-aware path handling
"""

from __future__ import annotations

import hashlib
import os
import platform
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final, Optional


_SENSITIVE_KEYS: Final[frozenset[str]] = frozenset({
    "password", "secret", "key", "token", "credential",
})

DEFAULT_STORE_FILENAME: Final[str] = "secrets.pws"


def _is_sensitive_key(key: str) -> bool:
    """Check if a configuration key might contain sensitive data."""
    key_lower = key.lower()
    return any(sensitive in key_lower for sensitive in _SENSITIVE_KEYS)


def _get_default_data_dir() -> Path:
    """Get OS-appropriate default data directory."""
    system = platform.system().lower()

    if system == "windows":
        base = Path(os.environ.get("LOCALAPPDATA", Path.home() / "AppData" / "Local"))
    elif system == "darwin":
        base = Path.home() / "Library" / "Application Support"
    else:  # Linux and others
        base = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share"))

    return base / "pwstore"


def _get_default_log_dir() -> Path:
    """Get OS-appropriate default log directory."""
    system = platform.system().lower()

    if system == "windows":
        base = Path(os.environ.get("LOCALAPPDATA", Path.home() / "AppData" / "Local"))
        return base / "pwstore" / "Logs"
    elif system == "darwin":
        return Path.home() / "Library" / "Logs" / "pwstore"
    else:
        return Path(os.environ.get("XDG_STATE_HOME", Path.home() / ".local" / "state")) / "pwstore" / "logs"


@dataclass(frozen=True, slots=True)
class PathConfig:
    """Immutable path configuration with OS-aware defaults."""

    data_dir: Path = field(default_factory=_get_default_data_dir)
    log_dir: Path = field(default_factory=_get_default_log_dir)
    store_file: Optional[Path] = None

    def __post_init__(self) -> None:
        for field_name in ("data_dir", "log_dir"):
            path = getattr(self, field_name)
            if not path.is_absolute():
                raise ValueError(f"{field_name} must be an absolute path: {path}")

    @property
    def default_store_path(self) -> Path:
        """File used by save/load when the shell is given no path."""
        if self.store_file is not None:
            return self.store_file
        return self.data_dir / DEFAULT_STORE_FILENAME


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Immutable logging configuration."""

    level: str = "WARNING"
    max_file_size_bytes: int = 1024 * 1024
    backup_count: int = 3
    enable_console: bool = True
    enable_file: bool = False

    def __post_init__(self) -> None:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if self.level.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {self.level}")


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Immutable application configuration."""

    app_name: str = "pwstore"
    version: str = "0.1.0"
    prompt: str = "> "


class PwstoreConfig:
    """
    Centralized, immutable configuration loader with environment overrides.

    Usage:
        config = PwstoreConfig.load()
        path = config.paths.default_store_path
        level = config.logging.level
    """

    __slots__ = ("_paths", "_logging", "_app", "_frozen", "_config_hash")

    _instance: Optional[PwstoreConfig] = None

    def __init__(
        self,
        paths: Optional[PathConfig] = None,
        logging: Optional[LoggingConfig] = None,
        app: Optional[AppConfig] = None,
    ) -> None:
        """Initialize configuration. Use PwstoreConfig.load() for standard initialization."""
        object.__setattr__(self, "_frozen", False)
        object.__setattr__(self, "_paths", paths or PathConfig())
        object.__setattr__(self, "_logging", logging or LoggingConfig())
        object.__setattr__(self, "_app", app or AppConfig())
        object.__setattr__(self, "_config_hash", self._compute_hash())
        object.__setattr__(self, "_frozen", True)

    def _compute_hash(self) -> str:
        config_str = f"{self._paths}|{self._logging}|{self._app}"
        return hashlib.sha256(config_str.encode()).hexdigest()[:16]

    @property
    def paths(self) -> PathConfig:
        return self._paths

    @property
    def logging(self) -> LoggingConfig:
        return self._logging

    @property
    def app(self) -> AppConfig:
        return self._app

    @property
    def config_hash(self) -> str:
        return self._config_hash

    @classmethod
    def load(cls, env_prefix: str = "PWSTORE") -> PwstoreConfig:
        """
        Load configuration with environment variable overrides.

        Environment variables use the prefix and double underscores for
        nested values.

        Examples:
            PWSTORE_LOGGING__LEVEL=DEBUG
            PWSTORE_PATHS__DATA_DIR=/custom/path
            PWSTORE_PATHS__STORE_FILE=/custom/path/work.pws

        Args:
            env_prefix: Prefix for environment variables (default: PWSTORE)

        Returns:
            Configured PwstoreConfig instance
        """
        env_overrides = cls._parse_env_overrides(env_prefix)

        paths_kwargs: dict[str, Any] = {}
        if "paths.data_dir" in env_overrides:
            paths_kwargs["data_dir"] = Path(env_overrides["paths.data_dir"])
        if "paths.log_dir" in env_overrides:
            paths_kwargs["log_dir"] = Path(env_overrides["paths.log_dir"])
        if "paths.store_file" in env_overrides:
            paths_kwargs["store_file"] = Path(env_overrides["paths.store_file"])

        logging_kwargs: dict[str, Any] = {}
        if "logging.level" in env_overrides:
            logging_kwargs["level"] = env_overrides["logging.level"].upper()
        if "logging.enable_console" in env_overrides:
            logging_kwargs["enable_console"] = env_overrides["logging.enable_console"].lower() == "true"
        if "logging.enable_file" in env_overrides:
            logging_kwargs["enable_file"] = env_overrides["logging.enable_file"].lower() == "true"
        if "logging.max_file_size_bytes" in env_overrides:
            logging_kwargs["max_file_size_bytes"] = int(env_overrides["logging.max_file_size_bytes"])
        if "logging.backup_count" in env_overrides:
            logging_kwargs["backup_count"] = int(env_overrides["logging.backup_count"])

        return cls(
            paths=PathConfig(**paths_kwargs) if paths_kwargs else None,
            logging=LoggingConfig(**logging_kwargs) if logging_kwargs else None,
        )

    @staticmethod
    def _parse_env_overrides(prefix: str) -> dict[str, str]:
        """Parse environment variables with the given prefix."""
        overrides: dict[str, str] = {}
        prefix_upper = f"{prefix.upper()}_"

        for key, value in os.environ.items():
            if key.startswith(prefix_upper):
                # PWSTORE_SECTION__KEY -> section.key
                config_key = key[len(prefix_upper):].lower().replace("__", ".")

                if _is_sensitive_key(config_key):
                    continue

                overrides[config_key] = value

        return overrides

    @classmethod
    def get_instance(cls) -> PwstoreConfig:
        """Get or create the singleton configuration instance."""
        if cls._instance is None:
            cls._instance = cls.load()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset the singleton instance. Use only for testing."""
        cls._instance = None

    def ensure_directories(self) -> None:
        """Create the data and log directories, owner-only on POSIX."""
        import stat

        for directory in (self._paths.data_dir, self._paths.log_dir):
            directory.mkdir(parents=True, exist_ok=True)

            if platform.system().lower() != "windows":
                directory.chmod(stat.S_IRWXU)

    def __repr__(self) -> str:
        return f"PwstoreConfig(hash={self._config_hash}, app={self._app.app_name})"

    def __setattr__(self, name: str, value: Any) -> None:
        if hasattr(self, "_frozen") and self._frozen:
            raise AttributeError("PwstoreConfig is immutable after initialization")
        super().__setattr__(name, value)
