import logging
from typing import Any, Callable

import aiohttp

from grouphub import env
from grouphub.models.data import ActionResult, MediaEntry
from grouphub.utils import post_json

logger = logging.getLogger(__name__)


class GroupActions:
    """
    Client for the backend's server actions.

    Every action is a POST to ``<base_url>/api/actions/<name>`` carrying the
    positional arguments as a JSON object. The backend answers with a
    ``{"status": ..., ...}`` envelope which is returned as an ActionResult;
    a non-200 status is data, not an exception. Transport failures raise
    aiohttp errors.
    """

    def __init__(
        self,
        base_url: str = env.GROUPHUB_URL,
        token: str = env.TOKEN,
        timeout: float = env.HTTP_TIMEOUT_SECONDS,
        session_factory: Callable[..., aiohttp.ClientSession] = aiohttp.ClientSession,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.session_factory = session_factory

    async def call(self, action: str, **arguments: Any) -> ActionResult:
        url = f"{self.base_url}/api/actions/{action}"
        logger.debug(f"Calling {action} with {sorted(arguments)}")
        body = await post_json(
            url,
            arguments,
            token=self.token,
            timeout=self.timeout,
            session_factory=self.session_factory,
        )
        result = ActionResult.from_payload(body)
        if not result.ok:
            logger.info(f"{action} answered with status {result.status}: {result.message}")
        return result

    async def get_group_info(self, group_id: str) -> ActionResult:
        return await self.call("onGetGroupInfo", groupid=group_id)

    async def update_group_settings(self, group_id: str, tag: str, content: str, path: str) -> ActionResult:
        return await self.call("onUpDateGroupSettings", groupid=group_id, type=tag, content=content, path=path)

    async def update_group_gallery(self, group_id: str, entry: MediaEntry) -> ActionResult:
        return await self.call("onUpdateGroupGallery", groupid=group_id, media=entry.to_payload())

    async def remove_group_gallery(self, group_id: str, media_id: str) -> ActionResult:
        return await self.call("onRemoveGroupGallery", groupid=group_id, mediaId=media_id)

    async def search_groups(self, kind: str, term: str) -> ActionResult:
        return await self.call("onSearchGroups", mode=kind, query=term)

    async def get_explore_group(self, category: str, page: int) -> ActionResult:
        return await self.call("onGetExploreGroup", category=category, paginate=page)

    async def get_all_group_members(self, group_id: str) -> ActionResult:
        return await self.call("onGetAllGroupMembers", groupid=group_id)

    async def get_all_user_messages(self, receiver_id: str) -> ActionResult:
        return await self.call("onGetAllUserMessages", recieverId=receiver_id)

    async def send_message(self, receiver_id: str, message_id: str, body: str) -> ActionResult:
        return await self.call("onSendMessage", recieverId=receiver_id, messageid=message_id, message=body)

    async def get_domain_config(self, group_id: str) -> ActionResult:
        return await self.call("onGetDomainConfig", groupId=group_id)

    async def add_custom_domain(self, group_id: str, domain: str) -> ActionResult:
        return await self.call("onAddCustomDomain", groupid=group_id, domain=domain)

