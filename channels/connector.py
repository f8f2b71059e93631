"""
ConnectorClient — posts bot replies back to a channel's service URL.

Replies go to:
    POST {service_url}/v3/conversations/{conversation_id}/activities/{reply_to_id}

Transport errors, 429 and 5xx responses are retried with exponential backoff
for up to `max_retries` attempts; anything still failing surfaces as
ChannelError.
"""
from __future__ import annotations

from typing import Any, Optional
from urllib.parse import quote

import httpx
import structlog
from tenacity import retry, retry_if_exception, wait_exponential

from channels.base import ChannelError
from config.settings import ChannelConfig
from models.schemas import Activity

logger = structlog.get_logger()


def _is_retryable(exc: BaseException) -> bool:
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code >= 500 or exc.response.status_code == 429
    return False


def _out_of_attempts(retry_state) -> bool:
    client = retry_state.args[0]
    return retry_state.attempt_number >= max(1, client.config.max_retries)


class ConnectorClient:

    def __init__(self, config: ChannelConfig = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config or ChannelConfig()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            headers = {"Content-Type": "application/json"}
            if self.config.app_password:
                headers["Authorization"] = f"Bearer {self.config.app_password}"
            self._client = httpx.AsyncClient(
                headers=headers,
                timeout=httpx.Timeout(self.config.timeout_seconds, connect=5.0),
                transport=self._transport,
            )
        return self._client

    @staticmethod
    def reply_url(activity: Activity) -> str:
        if not activity.service_url:
            raise ChannelError("Activity has no service_url to reply to", channel=activity.channel_id)
        if not activity.conversation:
            raise ChannelError("Activity has no conversation to reply to", channel=activity.channel_id)
        base = activity.service_url.rstrip("/")
        url = f"{base}/v3/conversations/{quote(activity.conversation.id, safe='')}/activities"
        if activity.reply_to_id:
            url += f"/{quote(activity.reply_to_id, safe='')}"
        return url

    @retry(
        retry=retry_if_exception(_is_retryable),
        stop=_out_of_attempts,
        wait=wait_exponential(multiplier=0.5, max=5),
        reraise=True,
    )
    async def _post(self, url: str, payload: dict[str, Any]) -> dict[str, Any]:
        client = await self._get_client()
        response = await client.post(url, json=payload)
        response.raise_for_status()
        if not response.content:
            return {}
        return response.json()

    async def send_activity(self, activity: Activity) -> dict[str, Any]:
        url = self.reply_url(activity)
        try:
            result = await self._post(url, activity.to_wire())
        except httpx.HTTPStatusError as e:
            logger.error("connector_send_failed",
                         url=url, status=e.response.status_code)
            raise ChannelError(
                f"Connector rejected activity: HTTP {e.response.status_code}",
                channel=activity.channel_id,
                retryable=_is_retryable(e),
            ) from e
        except httpx.HTTPError as e:
            logger.error("connector_send_failed", url=url, error=str(e))
            raise ChannelError(
                f"Connector unreachable: {e}", channel=activity.channel_id, retryable=True,
            ) from e
        logger.debug("connector_activity_sent", url=url, activity_id=activity.id)
        return result or {"id": activity.id}

    async def close(self):
        if self._client:
            await self._client.aclose()
            self._client = None
