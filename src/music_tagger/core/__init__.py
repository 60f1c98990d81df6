"""Core infrastructure layer - no business logic dependencies.

This module provides foundation-level services:
- Configuration management (TOML + environment)
- Logging (Loguru)
- Error taxonomy and path containment checks

Clean architecture principle: The core layer has no dependencies on
domain or client layers.
"""

from .config import (
    TaggerConfig,
    LoggingConfig,
    load_config,
    validate_config,
    get_config_path,
)
from .errors import (
    TaggerError,
    ValidationError,
    ForbiddenPathError,
    NotFoundError,
    MetadataParseError,
    MetadataWriteError,
    FileOperationError,
    ConfigError,
)
from .path_security import resolve_within_root, is_path_within_root

__all__ = [
    "TaggerConfig",
    "LoggingConfig",
    "load_config",
    "validate_config",
    "get_config_path",
    "TaggerError",
    "ValidationError",
    "ForbiddenPathError",
    "NotFoundError",
    "MetadataParseError",
    "MetadataWriteError",
    "FileOperationError",
    "ConfigError",
    "resolve_within_root",
    "is_path_within_root",
]
