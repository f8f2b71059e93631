"""
Chat Channel Adapter — HTTP chat clients speaking the activity schema.

Two reply modes:
  inline     replies are collected during the turn and returned to the
             HTTP host, which puts them in the response body
  connector  each reply is POSTed to the inbound activity's service URL
             as soon as the bot sends it
"""
from __future__ import annotations

from typing import Any, Optional

import structlog

from channels.base import BotAdapter, ChannelError
from channels.connector import ConnectorClient
from config.settings import ChannelConfig
from models.schemas import Activity

logger = structlog.get_logger()

REPLY_MODES = ("inline", "connector")


class ChatAdapter(BotAdapter):

    channel = "chat"

    def __init__(self, config: ChannelConfig = None, connector: Optional[ConnectorClient] = None):
        super().__init__()
        self.config = config or ChannelConfig()
        if self.config.reply_mode not in REPLY_MODES:
            raise ChannelError(
                f"Unknown reply_mode '{self.config.reply_mode}' (expected one of {REPLY_MODES})",
                channel=self.channel,
            )
        self.connector = connector
        if self.reply_mode == "connector" and self.connector is None:
            self.connector = ConnectorClient(self.config)
        logger.info("chat_adapter_initialized", reply_mode=self.reply_mode)

    @property
    def reply_mode(self) -> str:
        return self.config.reply_mode

    async def send_activities(self, activities: list[Activity]) -> list[dict[str, Any]]:
        if self.reply_mode == "inline":
            return [{"id": a.id} for a in activities]

        responses = []
        for activity in activities:
            responses.append(await self.connector.send_activity(activity))
        return responses

    async def close(self) -> None:
        if self.connector is not None:
            await self.connector.close()
