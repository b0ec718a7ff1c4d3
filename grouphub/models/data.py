# models/data.py

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Dict, Any
from urllib.parse import urlparse


class MediaKind(str, Enum):
    IMAGE = "IMAGE"
    EMBED = "EMBED"


@dataclass(frozen=True)
class MediaEntry:
    """A gallery item, tagged with its kind when it is written."""
    kind: MediaKind
    ref: str

    @classmethod
    def image(cls, uuid: str) -> "MediaEntry":
        return cls(MediaKind.IMAGE, uuid)

    @classmethod
    def embed(cls, url: str) -> "MediaEntry":
        return cls(MediaKind.EMBED, url)

    @classmethod
    def from_payload(cls, raw: Any) -> "MediaEntry":
        """
        Build an entry from a server payload.

        Tagged payloads ({"kind": ..., "ref": ...}) are taken as-is. Older
        groups store bare strings: upload ids for images and full URLs for
        embedded videos, so a string with an http(s) scheme is an embed.
        """
        if isinstance(raw, dict):
            return cls(MediaKind(raw["kind"]), raw["ref"])
        if urlparse(raw).scheme in ("http", "https"):
            return cls.embed(raw)
        return cls.image(raw)

    def to_payload(self) -> Dict[str, str]:
        return {"kind": self.kind.value, "ref": self.ref}

    def url(self, cdn_url: str) -> str:
        if self.kind is MediaKind.IMAGE:
            return f"{cdn_url}/{self.ref}/"
        return self.ref


@dataclass
class Member:
    id: str
    name: Optional[str] = None
    image: Optional[str] = None

    @classmethod
    def from_payload(cls, raw: Dict[str, Any]) -> "Member":
        user = raw.get("User") or raw.get("user") or {}
        return cls(
            id=raw.get("userId") or raw.get("id") or user.get("id"),
            name=raw.get("name") or " ".join(
                part for part in (user.get("firstname"), user.get("lastname")) if part
            ) or None,
            image=raw.get("image") or user.get("image"),
        )


@dataclass
class Group:
    id: str
    name: str
    user_id: str
    description: Optional[str] = None
    json_description: Optional[str] = None
    html_description: Optional[str] = None
    icon: Optional[str] = None
    thumbnail: Optional[str] = None
    category: Optional[str] = None
    privacy: Optional[str] = None
    gallery: List[MediaEntry] = field(default_factory=list)

    @classmethod
    def from_payload(cls, raw: Dict[str, Any]) -> "Group":
        return cls(
            id=raw["id"],
            name=raw.get("name", ""),
            user_id=raw.get("userId") or raw.get("user_id", ""),
            description=raw.get("description"),
            json_description=raw.get("jsonDescription"),
            html_description=raw.get("htmlDescription"),
            icon=raw.get("icon"),
            thumbnail=raw.get("thumbnail"),
            category=raw.get("category"),
            privacy=raw.get("privacy"),
            gallery=[MediaEntry.from_payload(item) for item in raw.get("gallery") or []],
        )


@dataclass
class Message:
    id: str
    message: str
    sender_id: Optional[str] = None
    receiver_id: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_payload(cls, raw: Dict[str, Any]) -> "Message":
        created_at = raw.get("createdAt")
        return cls(
            id=raw["id"],
            message=raw.get("message", ""),
            sender_id=raw.get("senderid"),
            receiver_id=raw.get("recieverId"),
            created_at=str(created_at) if created_at is not None else None,
        )

    def between(self, user_a: str, user_b: str) -> bool:
        return {self.sender_id, self.receiver_id} == {user_a, user_b}


@dataclass
class DomainConfig:
    domain: Optional[str] = None
    status: Optional[Any] = None
    config: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, raw: Dict[str, Any]) -> "DomainConfig":
        return cls(domain=raw.get("domain"), status=raw.get("status"), config=raw)


@dataclass
class SearchState:
    query: str = ""
    debounce: str = ""
    is_searching: bool = False
    status: Optional[int] = None
    data: List[Group] = field(default_factory=list)


@dataclass
class ActionResult:
    """Envelope every server action answers with."""
    status: int
    message: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, raw: Optional[Dict[str, Any]]) -> "ActionResult":
        raw = dict(raw or {})
        status = int(raw.pop("status", 500))
        message = raw.pop("message", None)
        return cls(status=status, message=message, data=raw)

    @property
    def ok(self) -> bool:
        return self.status == 200

    @property
    def group(self) -> Optional[Group]:
        raw = self.data.get("group")
        return Group.from_payload(raw) if raw else None

    @property
    def groups(self) -> List[Group]:
        return [Group.from_payload(raw) for raw in self.data.get("groups") or []]

    @property
    def messages(self) -> List[Message]:
        return [Message.from_payload(raw) for raw in self.data.get("messages") or []]

    @property
    def members(self) -> List[Member]:
        return [Member.from_payload(raw) for raw in self.data.get("members") or []]

    @property
    def domain(self) -> Optional[DomainConfig]:
        raw = self.data.get("domain")
        if isinstance(raw, dict):
            return DomainConfig.from_payload(raw)
        if raw:
            return DomainConfig(domain=raw, status=self.data.get("config"))
        return None


@dataclass
class UploadFile:
    name: str
    content: bytes
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass
class Toast:
    title: str
    description: str

    @property
    def is_error(self) -> bool:
        return self.title == "Error"
