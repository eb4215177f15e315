"""Shared configuration helpers and dataclasses."""

from .errors import ConfigurationError
from .runtime import env_float, env_seconds, env_str
from .settings import (
    VALID_PERMISSIONS,
    FlickrSettings,
    get_flickr_settings,
    load_flickr_settings,
    validate_permission,
)

__all__ = [
    "ConfigurationError",
    "FlickrSettings",
    "VALID_PERMISSIONS",
    "env_float",
    "env_seconds",
    "env_str",
    "get_flickr_settings",
    "load_flickr_settings",
    "validate_permission",
]
