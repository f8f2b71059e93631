"""
ConversationState — loads and saves one conversation's state dict.

The dict is the only per-conversation memory the bot has: the dialog
stack lives under "dialog_stack", and the application keeps its own keys
(topic, guest info, ...) beside it.

Storage key:
    "{channel_id}/conversations/{conversation_id}"

Used as adapter middleware it loads before the bot's turn logic runs
and writes back afterwards:

    adapter.use(ConversationState(store))

Two turns for the same conversation that overlap will each load the
same snapshot and the later save wins. This class does not serialize
them; the HTTP host holds a per-conversation lock for that.
"""
from __future__ import annotations

from typing import Any, Awaitable, Callable

import structlog

from database.store_base import BaseStateStore
from dialogs.turn import TurnContext

logger = structlog.get_logger()


class ConversationState:

    def __init__(self, store: BaseStateStore, namespace: str = "conversation"):
        self.store = store
        self.namespace = namespace
        self._cache_key = f"{namespace}_state"

    # ── Keys ──────────────────────────────────────────────

    @staticmethod
    def storage_key_for(channel_id: str, conversation_id: str) -> str:
        return f"{channel_id}/conversations/{conversation_id}"

    def storage_key(self, turn: TurnContext) -> str:
        activity = turn.activity
        if not activity.conversation or not activity.conversation.id:
            raise ValueError("ConversationState: activity is missing conversation.id")
        return self.storage_key_for(activity.channel_id, activity.conversation.id)

    # ── Lifecycle ─────────────────────────────────────────

    async def load(self, turn: TurnContext, force: bool = False) -> dict[str, Any]:
        """Read state into the turn (once per turn unless `force`)."""
        if not force and self._cache_key in turn.turn_state:
            return turn.turn_state[self._cache_key]
        key = self.storage_key(turn)
        state = await self.store.read(key) or {}
        turn.turn_state[self._cache_key] = state
        logger.debug("conversation_state_loaded", key=key, keys=sorted(state))
        return state

    def get(self, turn: TurnContext) -> dict[str, Any]:
        """The state dict loaded for this turn."""
        try:
            return turn.turn_state[self._cache_key]
        except KeyError:
            raise RuntimeError(
                "ConversationState.get(): state not loaded for this turn; "
                "call load() or register the middleware first"
            ) from None

    async def save_changes(self, turn: TurnContext) -> None:
        state = turn.turn_state.get(self._cache_key)
        if state is None:
            return
        key = self.storage_key(turn)
        await self.store.write(key, state)
        logger.debug("conversation_state_saved", key=key)

    async def clear(self, turn: TurnContext) -> None:
        """Forget everything about this conversation, in memory and in the store."""
        state = turn.turn_state.get(self._cache_key)
        if state is not None:
            state.clear()
        await self.store.delete(self.storage_key(turn))
        logger.info("conversation_state_cleared", key=self.storage_key(turn))

    async def delete(self, channel_id: str, conversation_id: str) -> bool:
        """Drop persisted state for a conversation outside of any turn."""
        key = self.storage_key_for(channel_id, conversation_id)
        removed = await self.store.delete(key)
        logger.info("conversation_state_deleted", key=key, existed=removed)
        return removed

    # ── Middleware ────────────────────────────────────────

    async def on_turn(self, turn: TurnContext, next_handler: Callable[[], Awaitable[Any]]) -> None:
        await self.load(turn)
        await next_handler()
        await self.save_changes(turn)
