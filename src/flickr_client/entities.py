"""Minimal entity models used by the bundled service wrappers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional


def content(value: Any) -> Any:
    """Unwrap Flickr's ``{"_content": ...}`` text nodes."""
    if isinstance(value, Mapping):
        return value.get("_content")
    return value


@dataclass(frozen=True)
class User:
    id: str
    username: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "User":
        user_id = payload.get("nsid") or payload["id"]
        return cls(id=str(user_id), username=str(content(payload["username"])))


@dataclass(frozen=True)
class UserInfo:
    id: str
    username: str
    real_name: Optional[str]
    location: Optional[str]
    photos_count: int
    profile_url: Optional[str]

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "UserInfo":
        photos = payload.get("photos") or {}
        count = content(photos.get("count")) if isinstance(photos, Mapping) else None
        return cls(
            id=str(payload.get("nsid") or payload["id"]),
            username=str(content(payload["username"])),
            real_name=content(payload.get("realname")),
            location=content(payload.get("location")),
            photos_count=int(count or 0),
            profile_url=content(payload.get("profileurl")),
        )


@dataclass(frozen=True)
class Photo:
    id: str
    owner: Optional[str]
    secret: str
    server: str
    title: str
    is_public: bool

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Photo":
        return cls(
            id=str(payload["id"]),
            owner=payload.get("owner"),
            secret=str(payload.get("secret", "")),
            server=str(payload.get("server", "")),
            title=str(content(payload.get("title")) or ""),
            is_public=bool(int(payload.get("ispublic", 0))),
        )

    @property
    def url(self) -> str:
        return f"https://live.staticflickr.com/{self.server}/{self.id}_{self.secret}.jpg"


@dataclass(frozen=True)
class Group:
    id: str
    name: str
    is_admin: bool

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Group":
        return cls(
            id=str(payload["nsid"]),
            name=str(payload["name"]),
            is_admin=bool(int(payload.get("admin", 0))),
        )


@dataclass(frozen=True)
class AuthenticatedIdentity:
    """The user an access credential was confirmed against."""

    user_id: str
    username: str


__all__ = ["AuthenticatedIdentity", "Group", "Photo", "User", "UserInfo", "content"]
