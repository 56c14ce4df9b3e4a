"""
DDD Catalog - Configuration

Centralized configuration for the catalog builder and its CLI.
Uses environment variables with sensible defaults.
"""
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from ddd_catalog.core.errors import CatalogConfigError

# Load environment variables from .env file
load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class LogLevel(Enum):
    """Logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class LoggingSettings:
    """Logging configuration."""
    level: str = field(default_factory=lambda: os.getenv("DDD_CATALOG_LOG_LEVEL", "WARNING").upper())
    json_format: bool = field(default_factory=lambda: os.getenv("DDD_CATALOG_LOG_FORMAT", "console").lower() == "json")
    service_name: str = field(default_factory=lambda: os.getenv("DDD_CATALOG_SERVICE_NAME", "ddd-catalog"))


@dataclass
class BuildSettings:
    """Catalog build behaviour."""
    # Treat warnings as failures in the CLI exit code
    strict: bool = field(default_factory=lambda: _env_flag("DDD_CATALOG_STRICT", "false"))
    # Aggregate membership consistency check between roots and entities
    check_membership: bool = field(default_factory=lambda: _env_flag("DDD_CATALOG_CHECK_MEMBERSHIP", "true"))


@dataclass
class Config:
    """Main configuration container."""
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    build: BuildSettings = field(default_factory=BuildSettings)

    def validate(self) -> List[str]:
        """Validate configuration and return list of problems."""
        problems = []
        valid_levels = {level.value for level in LogLevel}
        if self.logging.level not in valid_levels:
            problems.append(
                f"Invalid log level {self.logging.level!r}; expected one of {sorted(valid_levels)}"
            )
        if not self.logging.service_name:
            problems.append("Service name must not be empty")
        return problems

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "logging": {
                "level": self.logging.level,
                "json_format": self.logging.json_format,
                "service_name": self.logging.service_name,
            },
            "build": {
                "strict": self.build.strict,
                "check_membership": self.build.check_membership,
            },
        }


# Global configuration instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        config = Config()
        problems = config.validate()
        if problems:
            raise CatalogConfigError("; ".join(problems), problems=problems)
        _config = config
    return _config


def reset_config() -> None:
    """Drop the cached configuration so the environment is read again."""
    global _config
    _config = None
