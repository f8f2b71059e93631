"""Tests for Waterfall step sequencing."""
import pytest

from dialogs import Dialog, DialogSet, StepExecutionFailure
from dialogs.waterfall import STEP_KEY
from database.store_memory import InMemoryStateStore
from models.schemas import ActivityType


class Parent(Dialog):
    """Begins the child waterfall and remembers what it got back."""

    def __init__(self, child_id: str, child_args=None):
        self.child_id = child_id
        self.child_args = child_args
        self.resumed_with: list = []

    async def dialog_begin(self, dc, options=None):
        await dc.begin_dialog(self.child_id, self.child_args)

    async def dialog_resume(self, dc, result=None):
        self.resumed_with.append(result)
        await dc.end_dialog(result)


@pytest.fixture
def visits():
    return []


@pytest.fixture
def three_steps(visits):
    async def s0(dc, value, skip):
        visits.append(("s0", value))
        await dc.context.send_activity("zero")

    async def s1(dc, value, skip):
        visits.append(("s1", value))
        await dc.context.send_activity("one")

    async def s2(dc, value, skip):
        visits.append(("s2", value))
        await dc.end_dialog(f"done:{value}")

    return [s0, s1, s2]


class TestWaterfallSequencing:

    @pytest.mark.asyncio
    async def test_visits_steps_in_order(self, three_steps, visits, make_turn):
        dialogs = DialogSet()
        dialogs.add("flow", three_steps)
        state = {}

        await dialogs.create_context(make_turn("start"), state).begin_dialog("flow", "args")
        await dialogs.create_context(make_turn("a"), state).continue_dialog()
        result = await dialogs.create_context(make_turn("b"), state).continue_dialog()

        assert visits == [("s0", "args"), ("s1", "a"), ("s2", "b")]
        assert result.active is False
        assert result.result == "done:b"

    @pytest.mark.asyncio
    async def test_skip_advances_within_same_turn(self, make_turn, outbox):
        visits = []

        async def s0(dc, value, skip):
            visits.append(("s0", value))
            await skip("skipped")

        async def s1(dc, value, skip):
            visits.append(("s1", value))
            await dc.context.send_activity("waiting in s1")

        async def s2(dc, value, skip):
            visits.append(("s2", value))

        dialogs = DialogSet()
        dialogs.add("flow", [s0, s1, s2])
        state = {}
        dc = dialogs.create_context(make_turn("start"), state)
        await dc.begin_dialog("flow")

        assert visits == [("s0", None), ("s1", "skipped")]
        assert dc.active_dialog.state[STEP_KEY] == 1
        assert outbox.texts == ["waiting in s1"]

        await dialogs.create_context(make_turn("next"), state).continue_dialog()
        assert visits[-1] == ("s2", "next")

    @pytest.mark.asyncio
    async def test_result_reaches_parent_resume(self, make_turn, outbox):
        async def greet(dc, args, skip):
            dc.active_dialog.state["name"] = args["name"]
            await dc.context.send_activity(f"Hi {args['name']}! How old are you?")

        async def store_age(dc, age, skip):
            dc.active_dialog.state["age"] = age
            await dc.end_dialog(int(age))

        parent = Parent("child", {"name": "Lee"})
        dialogs = DialogSet()
        dialogs.add("parent", parent)
        dialogs.add("child", [greet, store_age])
        state = {}

        dc = dialogs.create_context(make_turn(""), state)
        await dc.begin_dialog("parent")
        assert [i.id for i in dc.stack] == ["parent", "child"]
        assert outbox.texts == ["Hi Lee! How old are you?"]

        dc = dialogs.create_context(make_turn("42"), state)
        result = await dc.continue_dialog()
        assert parent.resumed_with == [42]
        assert result.active is False
        assert result.result == 42

    @pytest.mark.asyncio
    async def test_running_past_last_step_ends_with_value(self, make_turn):
        async def only(dc, value, skip):
            await dc.context.send_activity("say anything")

        dialogs = DialogSet()
        dialogs.add("flow", [only])
        state = {}
        await dialogs.create_context(make_turn(""), state).begin_dialog("flow")
        result = await dialogs.create_context(make_turn("anything"), state).continue_dialog()
        assert result.active is False
        assert result.result == "anything"

    @pytest.mark.asyncio
    async def test_cursor_survives_persistence(self, three_steps, visits, make_turn):
        store = InMemoryStateStore()
        dialogs = DialogSet()
        dialogs.add("flow", three_steps)

        state = {}
        await dialogs.create_context(make_turn(""), state).begin_dialog("flow", 1)
        await store.write("k", state)

        for text in ("a", "b"):
            state = await store.read("k")
            await dialogs.create_context(make_turn(text), state).continue_dialog()
            await store.write("k", state)

        assert [name for name, _ in visits] == ["s0", "s1", "s2"]
        assert (await store.read("k"))["dialog_stack"] == []


class TestWaterfallInputFiltering:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("activity_type", [
        ActivityType.TYPING.value,
        ActivityType.CONVERSATION_UPDATE.value,
        ActivityType.EVENT.value,
        "somethingElse",
    ])
    async def test_non_message_turns_do_not_advance(self, three_steps, visits, make_turn, activity_type):
        dialogs = DialogSet()
        dialogs.add("flow", three_steps)
        state = {}
        await dialogs.create_context(make_turn(""), state).begin_dialog("flow")

        dc = dialogs.create_context(make_turn("", type=activity_type), state)
        result = await dc.continue_dialog()

        assert result.active is True
        assert dc.active_dialog.state[STEP_KEY] == 0
        assert visits == [("s0", None)]


class TestWaterfallErrors:

    @pytest.mark.asyncio
    async def test_step_exception_is_wrapped_with_index(self, make_turn):
        async def fine(dc, value, skip):
            await dc.context.send_activity("ok")

        async def broken(dc, value, skip):
            raise KeyError("guest")

        dialogs = DialogSet()
        dialogs.add("flow", [fine, broken])
        state = {}
        await dialogs.create_context(make_turn(""), state).begin_dialog("flow")

        with pytest.raises(StepExecutionFailure) as exc:
            await dialogs.create_context(make_turn("x"), state).continue_dialog()
        assert exc.value.dialog_id == "flow"
        assert exc.value.step == 1
        assert isinstance(exc.value.__cause__, KeyError)

    @pytest.mark.asyncio
    async def test_sync_steps_are_supported(self, make_turn):
        seen = []

        def sync_step(dc, value, skip):
            seen.append(value)

        dialogs = DialogSet()
        dialogs.add("flow", [sync_step])
        dc = dialogs.create_context(make_turn(""), {})
        await dc.begin_dialog("flow", "v")
        assert seen == ["v"]
        assert dc.dialog_result.active is True
