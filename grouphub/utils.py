import inspect
import logging
from typing import Any, Callable, Dict, Optional

import aiohttp

logger = logging.getLogger(__name__)


async def raise_for_status(response: aiohttp.ClientResponse):
    if response.status >= 300:
        # Keep the body in the error so callers can log what the server said
        raise aiohttp.ClientResponseError(
            request_info=response.request_info,
            history=response.history,
            status=response.status,
            message=await response.text(),
            headers=response.headers,
        )


async def post_json(
    url: str,
    payload: Dict[str, Any],
    token: Optional[str] = None,
    timeout: float = 30,
    session_factory: Callable[..., aiohttp.ClientSession] = aiohttp.ClientSession,
) -> Any:
    """
    POST a JSON body and return the decoded JSON response.

    Args:
        url (str): Absolute endpoint URL
        payload (dict): JSON-serialisable request body
        token (str, optional): Bearer token for the Authorization header
        timeout (float): Total request timeout in seconds
        session_factory: Callable returning an aiohttp session, swapped out in tests

    Returns:
        The decoded JSON body.

    Raises:
        aiohttp.ClientResponseError: If the server answers with a non-2xx status
    """
    headers = {"Authorization": f"Bearer {token}"} if token else {}

    async with session_factory(timeout=aiohttp.ClientTimeout(total=timeout)) as session:
        async with session.post(url, headers=headers, json=payload) as response:
            await raise_for_status(response)
            return await response.json()


async def maybe_await(value):
    if inspect.isawaitable(value):
        return await value
    return value


def truncate(text: str, limit: int = 60) -> str:
    text = " ".join((text or "").split())
    return text if len(text) <= limit else text[: limit - 1] + "…"
