from __future__ import annotations

"""Flickr application settings loaded from the environment."""


from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from .errors import ConfigurationError
from .runtime import env_seconds, env_str

VALID_PERMISSIONS = ("read", "write", "delete")
DEFAULT_PERMISSION = "read"
DEFAULT_REQUEST_TIMEOUT_SECONDS = 30.0
DEFAULT_CONNECT_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class FlickrSettings:
    api_key: str
    api_secret: str
    callback_url: Optional[str]
    permission: str
    proxy_url: Optional[str]
    request_timeout_seconds: float
    connect_timeout_seconds: float
    credentials_path: Optional[str]

    def __repr__(self) -> str:
        return (
            f"FlickrSettings(api_key={self.api_key[:4]}..., api_secret=***, "
            f"callback_url={self.callback_url!r}, permission={self.permission!r}, "
            f"proxy_url={self.proxy_url!r})"
        )


def validate_permission(permission: str) -> str:
    normalized = permission.strip().lower()
    if normalized not in VALID_PERMISSIONS:
        raise ConfigurationError.invalid_value(
            "FLICKR_PERMISSION", permission, f"Expected one of {', '.join(VALID_PERMISSIONS)}"
        )
    return normalized


def load_flickr_settings() -> FlickrSettings:
    """Read settings from the environment (and .env defaults) without caching."""
    api_key = env_str("FLICKR_API_KEY", required=True)
    api_secret = env_str("FLICKR_API_SECRET", required=True)
    permission = validate_permission(env_str("FLICKR_PERMISSION", or_value=DEFAULT_PERMISSION))

    return FlickrSettings(
        api_key=api_key,
        api_secret=api_secret,
        callback_url=env_str("FLICKR_CALLBACK_URL"),
        permission=permission,
        proxy_url=env_str("FLICKR_PROXY_URL"),
        request_timeout_seconds=float(
            env_seconds("FLICKR_REQUEST_TIMEOUT_SECONDS", or_value=DEFAULT_REQUEST_TIMEOUT_SECONDS)
        ),
        connect_timeout_seconds=float(
            env_seconds("FLICKR_CONNECT_TIMEOUT_SECONDS", or_value=DEFAULT_CONNECT_TIMEOUT_SECONDS)
        ),
        credentials_path=env_str("FLICKR_CREDENTIALS_PATH"),
    )


@lru_cache(maxsize=1)
def get_flickr_settings() -> FlickrSettings:
    return load_flickr_settings()


__all__ = [
    "DEFAULT_CONNECT_TIMEOUT_SECONDS",
    "DEFAULT_PERMISSION",
    "DEFAULT_REQUEST_TIMEOUT_SECONDS",
    "FlickrSettings",
    "VALID_PERMISSIONS",
    "get_flickr_settings",
    "load_flickr_settings",
    "validate_permission",
]
