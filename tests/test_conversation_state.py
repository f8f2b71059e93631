"""
Tests for ConversationState middleware and per-conversation serialization.
"""
import asyncio

import pytest

from api.runtime import BotRuntime, ConversationLocks
from channels.chat_adapter import ChatAdapter
from config.settings import Settings
from context.conversation_state import ConversationState
from database.store_memory import InMemoryStateStore
from tests.conftest import make_activity


@pytest.fixture
def store():
    return InMemoryStateStore()


@pytest.fixture
def conversation_state(store):
    return ConversationState(store)


class TestConversationState:

    def test_storage_key(self, conversation_state, make_turn):
        turn = make_turn("hi", channel_id="webchat", conversation_id="abc")
        assert conversation_state.storage_key(turn) == "webchat/conversations/abc"

    def test_missing_conversation_is_rejected(self, conversation_state, outbox):
        from dialogs.turn import TurnContext
        activity = make_activity("hi")
        activity.conversation = None
        with pytest.raises(ValueError):
            conversation_state.storage_key(TurnContext(activity, outbox.send))

    def test_get_before_load_fails(self, conversation_state, make_turn):
        with pytest.raises(RuntimeError):
            conversation_state.get(make_turn("hi"))

    @pytest.mark.asyncio
    async def test_load_save_roundtrip(self, conversation_state, store, make_turn):
        turn = make_turn("hi")
        state = await conversation_state.load(turn)
        assert state == {}
        assert conversation_state.get(turn) is state

        state["topic"] = True
        await conversation_state.save_changes(turn)
        assert await store.read("chat/conversations/conv-1") == {"topic": True}

    @pytest.mark.asyncio
    async def test_load_is_cached_per_turn(self, conversation_state, store, make_turn):
        turn = make_turn("hi")
        first = await conversation_state.load(turn)
        await store.write("chat/conversations/conv-1", {"changed": True})
        assert await conversation_state.load(turn) is first
        assert await conversation_state.load(turn, force=True) == {"changed": True}

    @pytest.mark.asyncio
    async def test_clear(self, conversation_state, store, make_turn):
        await store.write("chat/conversations/conv-1", {"topic": True})
        turn = make_turn("hi")
        state = await conversation_state.load(turn)
        await conversation_state.clear(turn)
        assert state == {}
        assert await store.read("chat/conversations/conv-1") is None

    @pytest.mark.asyncio
    async def test_middleware_loads_and_saves_around_turn(self, conversation_state, store):
        adapter = ChatAdapter().use(conversation_state)

        async def logic(turn):
            state = conversation_state.get(turn)
            state["turns"] = state.get("turns", 0) + 1
            await turn.send_activity(f"turn {state['turns']}")

        await adapter.process_activity(make_activity("a"), logic)
        sent = await adapter.process_activity(make_activity("b"), logic)

        assert [a.text for a in sent] == ["turn 2"]
        assert await store.read("chat/conversations/conv-1") == {"turns": 2}


# ──────────────────────────────────────────────────────────────
#  Concurrent turns on one conversation
# ──────────────────────────────────────────────────────────────

class TestConcurrentTurns:

    @staticmethod
    def slow_counter(conversation_state):
        async def logic(turn):
            state = conversation_state.get(turn)
            seen = state.get("count", 0)
            await asyncio.sleep(0.01)
            state["count"] = seen + 1
        return logic

    @pytest.mark.asyncio
    async def test_unserialized_turns_lose_an_update(self, conversation_state, store):
        adapter = ChatAdapter().use(conversation_state)
        logic = self.slow_counter(conversation_state)

        await asyncio.gather(
            adapter.process_activity(make_activity("one"), logic),
            adapter.process_activity(make_activity("two"), logic),
        )

        # both turns read count=0; the later save wins
        assert (await store.read("chat/conversations/conv-1"))["count"] == 1

    @pytest.mark.asyncio
    async def test_runtime_lock_serializes_turns(self, store):
        runtime = BotRuntime(Settings(), store)
        logic = self.slow_counter(runtime.conversation_state)

        await asyncio.gather(
            runtime.process(make_activity("one"), logic),
            runtime.process(make_activity("two"), logic),
            runtime.process(make_activity("three"), logic),
        )

        assert (await store.read("chat/conversations/conv-1"))["count"] == 3
        assert len(runtime.locks) == 0

    @pytest.mark.asyncio
    async def test_different_conversations_run_in_parallel(self):
        locks = ConversationLocks()
        order = []

        async def hold(key, label):
            async with locks.hold(key):
                order.append(f"{label}-in")
                await asyncio.sleep(0.01)
                order.append(f"{label}-out")

        await asyncio.gather(hold("a", "a"), hold("b", "b"))
        assert order[:2] == ["a-in", "b-in"]
