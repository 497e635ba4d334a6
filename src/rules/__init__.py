"""Rule definitions for publicapi-core."""

from rules.config import (
    ConfigError,
    PublicApiConfig,
    load_config,
    resolve_within_root,
)
from rules.visibility import is_public_api

__all__ = [
    "ConfigError",
    "PublicApiConfig",
    "is_public_api",
    "load_config",
    "resolve_within_root",
]
