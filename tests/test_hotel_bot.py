"""
End-to-end conversations with the hotel concierge bot.

Drives BotRuntime with a memory store, so every turn goes through the
adapter, state middleware and persistence exactly as in production.
"""
import pytest

from api.runtime import BotRuntime
from bot.menu import MENUS, MenuControl
from config.settings import Settings
from database.store_memory import InMemoryStateStore
from models.messages import ADAPTIVE_CARD, HERO_CARD
from models.schemas import ActivityType
from tests.conftest import make_activity

GREETING = 'Hi Ann. How may we serve you today? Request a "wake up" call or "reserve table"?'


@pytest.fixture
def store():
    return InMemoryStateStore()


@pytest.fixture
def runtime(store, fixed_clock):
    return BotRuntime(Settings(), store, clock=fixed_clock)


@pytest.fixture
def say(runtime):
    async def _say(text, conversation_id="conv-1", **kwargs):
        sent = await runtime.process(make_activity(text, conversation_id=conversation_id, **kwargs))
        return [a.text for a in sent]
    return _say


async def saved_state(store, conversation_id="conv-1"):
    return await store.read(f"chat/conversations/{conversation_id}")


async def check_in(say, name="Ann", room="412", conversation_id="conv-1"):
    await say("hi", conversation_id)
    await say(name, conversation_id)
    return await say(room, conversation_id)


class TestCheckIn:

    @pytest.mark.asyncio
    async def test_first_message_starts_check_in(self, say, store):
        assert await say("hello there") == ["What is your name?"]
        state = await saved_state(store)
        assert state["topic"] is True
        assert [d["id"] for d in state["dialog_stack"]] == ["checkInPrompt"]

    @pytest.mark.asyncio
    async def test_full_check_in(self, say, store):
        await say("hi")
        assert await say("Ann") == ["Hi Ann. What room will you be staying in?"]
        assert await say("room 412") == ["Great! Enjoy your stay!"]

        state = await saved_state(store)
        assert state["guest_info"] == {"user_name": "Ann", "room": 412}
        assert state["topic"] is False
        assert state["dialog_stack"] == []

    @pytest.mark.asyncio
    async def test_room_prompt_retries_until_number(self, say):
        await say("hi")
        await say("Ann")
        assert await say("the corner suite") == ["Hi Ann. What room will you be staying in?"]
        assert await say("12") == ["Great! Enjoy your stay!"]

    @pytest.mark.asyncio
    async def test_greeting_after_check_in(self, say):
        await check_in(say)
        assert await say("what can you do?") == [GREETING]


class TestTopics:

    @pytest.mark.asyncio
    async def test_reserve_table(self, say, store):
        await check_in(say)
        [prompt] = await say("I want to reserve table")
        assert prompt.startswith("Welcome Ann, which table would you like to reserve?")
        assert "(6) 6" in prompt

        assert await say("3") == ["Sounds great, we will reserve table number 3 for you."]
        state = await saved_state(store)
        assert state["guest_info"]["table_number"] == "3"
        assert state["guest_info"]["room"] == 412
        assert state["topic"] is False

    @pytest.mark.asyncio
    async def test_reserve_table_rejects_unknown_table(self, say):
        await check_in(say)
        await say("reserve table")
        [retry] = await say("table nine")
        assert retry.startswith("Welcome Ann, which table")

    @pytest.mark.asyncio
    async def test_wake_up_call(self, say, store):
        await check_in(say)
        assert await say("Wake up call please") == [
            "Hello, Ann. What time would you like your alarm to be set?"
        ]
        assert await say("6:45am") == ["Your alarm is set to 06:45:00 for room 412"]
        assert (await saved_state(store))["guest_info"]["alarm_time"] == "06:45:00"

    @pytest.mark.asyncio
    async def test_wake_up_ambiguous_hour_takes_first_reading(self, say):
        await check_in(say)
        await say("wake up")
        assert await say("at 7") == ["Your alarm is set to 07:00:00 for room 412"]

    @pytest.mark.asyncio
    async def test_topic_with_nothing_to_continue_falls_back(self, say, store):
        await store.write("chat/conversations/conv-1", {"topic": True, "dialog_stack": []})
        assert await say("anything") == ["Sorry I don't understand"]
        assert (await saved_state(store))["topic"] is False


class TestMenus:

    @pytest.mark.asyncio
    async def test_menu_request_shows_default_menu(self, runtime, say, store):
        await check_in(say)
        [activity] = await runtime.process(make_activity("show me the menu"))
        fact_card, buttons = activity.attachments
        assert fact_card.content_type == ADAPTIVE_CARD
        assert fact_card.content["body"][0]["items"][0]["text"] == "burgerMenu"
        assert buttons.content_type == HERO_CARD
        assert [b["value"] for b in buttons.content["buttons"]] == list(MENUS)
        assert (await saved_state(store))["dialog_stack"] == []

    @pytest.mark.asyncio
    async def test_menu_button_selects_menu(self, runtime, say):
        await check_in(say)
        [activity] = await runtime.process(make_activity("dessertMenu"))
        facts = activity.attachments[0].content["body"][0]["items"][1]["facts"]
        assert {"title": "Item:", "value": "Apple Pie"} in facts
        assert {"title": "Price", "value": "3.99"} in facts

    def test_unknown_default_menu(self):
        with pytest.raises(ValueError):
            MenuControl("brunchMenu")


class TestIsolationAndReset:

    @pytest.mark.asyncio
    async def test_interleaved_guests_keep_their_own_data(self, say, store):
        await say("hi", "a")
        await say("hi", "b")
        assert await say("Ann", "a") == ["Hi Ann. What room will you be staying in?"]
        assert await say("Bob", "b") == ["Hi Bob. What room will you be staying in?"]
        await say("101", "a")
        await say("202", "b")

        assert (await saved_state(store, "a"))["guest_info"] == {"user_name": "Ann", "room": 101}
        assert (await saved_state(store, "b"))["guest_info"] == {"user_name": "Bob", "room": 202}

    @pytest.mark.asyncio
    async def test_non_message_activity_is_ignored(self, say, store):
        await say("hi")
        assert await say("", type=ActivityType.CONVERSATION_UPDATE.value) == []
        assert await say("", type=ActivityType.TYPING.value) == []
        assert await say("Ann") == ["Hi Ann. What room will you be staying in?"]

    @pytest.mark.asyncio
    async def test_reset_restarts_check_in(self, runtime, say):
        await check_in(say)
        assert await runtime.reset("chat", "conv-1") is True
        assert await say("hello") == ["What is your name?"]

    @pytest.mark.asyncio
    async def test_reset_conversation_from_a_turn(self, runtime, say, store):
        await say("hi")

        async def logic(turn):
            await runtime.bot.reset_conversation(turn)

        await runtime.process(make_activity("reset"), logic)
        # the middleware saves the now-empty state after the turn
        assert await saved_state(store) == {}
