"""
BotRuntime — everything the HTTP host needs to run turns.

Wires the store, conversation state middleware, chat adapter and hotel
bot together, and serializes turns per conversation: two requests for
the same conversation never run their turn logic at the same time, while
different conversations proceed in parallel.
"""
from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, Callable, Optional

import structlog

from bot.hotel_bot import HotelBot
from channels.base import BotLogic
from channels.chat_adapter import ChatAdapter
from channels.connector import ConnectorClient
from config.settings import Settings
from context.conversation_state import ConversationState
from database.store_base import BaseStateStore
from models.schemas import Activity

logger = structlog.get_logger()


class ConversationLocks:
    """One asyncio.Lock per conversation key, dropped once nobody holds or awaits it."""

    def __init__(self):
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)


class BotRuntime:

    def __init__(
        self,
        settings: Settings,
        store: BaseStateStore,
        connector: Optional[ConnectorClient] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.settings = settings
        self.store = store
        self.conversation_state = ConversationState(store)
        self.adapter = ChatAdapter(settings.channel, connector=connector)
        self.adapter.use(self.conversation_state)
        self.bot = HotelBot(
            self.conversation_state,
            default_locale=settings.dialogs.default_locale,
            clock=clock,
        )
        self.locks = ConversationLocks()

    @staticmethod
    def lock_key(activity: Activity) -> str:
        conversation_id = activity.conversation.id if activity.conversation else ""
        return ConversationState.storage_key_for(activity.channel_id, conversation_id)

    async def process(self, activity: Activity, logic: Optional[BotLogic] = None) -> list[Activity]:
        """Run one turn for `activity` while holding its conversation's lock."""
        async with self.locks.hold(self.lock_key(activity)):
            return await self.adapter.process_activity(activity, logic or self.bot.on_turn)

    async def reset(self, channel_id: str, conversation_id: str) -> bool:
        key = ConversationState.storage_key_for(channel_id, conversation_id)
        async with self.locks.hold(key):
            return await self.conversation_state.delete(channel_id, conversation_id)

    async def close(self) -> None:
        await self.adapter.close()
        await self.store.close()
