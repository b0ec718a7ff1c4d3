from grouphub.hooks.base_hook import Hook
from grouphub.hooks.chat import ChatWindow, GroupMembers, MessageComposer
from grouphub.hooks.domain import CustomDomain
from grouphub.hooks.gallery import MediaGallery
from grouphub.hooks.presence import PresenceTracker
from grouphub.hooks.search import ExploreFeed, Search
from grouphub.hooks.settings import GroupAbout, GroupInfo, GroupSettings

__all__ = [
    "ChatWindow",
    "CustomDomain",
    "ExploreFeed",
    "GroupAbout",
    "GroupInfo",
    "GroupMembers",
    "GroupSettings",
    "Hook",
    "MediaGallery",
    "MessageComposer",
    "PresenceTracker",
    "Search",
]
