from grouphub.models.data import (
    ActionResult,
    DomainConfig,
    Group,
    MediaEntry,
    MediaKind,
    Member,
    Message,
    SearchState,
    Toast,
    UploadFile,
)

__all__ = [
    "ActionResult",
    "DomainConfig",
    "Group",
    "MediaEntry",
    "MediaKind",
    "Member",
    "Message",
    "SearchState",
    "Toast",
    "UploadFile",
]
