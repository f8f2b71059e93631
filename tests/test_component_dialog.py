"""Tests for ComponentDialog sub-stack delegation."""
import pytest

from dialogs import ComponentDialog, DialogSet
from dialogs.dialog_set import STACK_KEY
from dialogs.prompts import NumberPrompt


def build_component() -> ComponentDialog:
    async def ask(dc, args, skip):
        dc.active_dialog.state["who"] = args["who"]
        await dc.prompt("number", f"{args['who']}, pick a number")

    async def finish(dc, number, skip):
        await dc.end_dialog({"who": dc.active_dialog.state["who"], "number": number})

    inner = DialogSet()
    inner.add("main", [ask, finish])
    inner.add("number", NumberPrompt())
    return ComponentDialog(inner, "main")


class TestComponentDialog:

    @pytest.mark.asyncio
    async def test_inner_stack_lives_in_component_state(self, make_turn):
        outer = DialogSet()
        outer.add("picker", build_component())
        state = {}

        dc = outer.create_context(make_turn(""), state)
        await dc.begin_dialog("picker", {"who": "Ann"})

        assert [i.id for i in state[STACK_KEY]] == ["picker"]
        inner_stack = dc.active_dialog.state[STACK_KEY]
        assert [i.id for i in inner_stack] == ["main", "number"]

    @pytest.mark.asyncio
    async def test_completion_returns_inner_result(self, make_turn, outbox):
        outer = DialogSet()
        outer.add("picker", build_component())
        state = {}
        await outer.create_context(make_turn(""), state).begin_dialog("picker", {"who": "Ann"})

        result = await outer.create_context(make_turn("eight"), state).continue_dialog()

        assert result.active is False
        assert result.result == {"who": "Ann", "number": 8}
        assert outbox.texts == ["Ann, pick a number"]

    @pytest.mark.asyncio
    async def test_component_result_resumes_outer_waterfall(self, make_turn):
        seen = []

        async def begin_picker(dc, value, skip):
            await dc.begin_dialog("picker", {"who": "Bo"})

        async def after(dc, picked, skip):
            seen.append(picked)
            await dc.end_dialog()

        outer = DialogSet()
        outer.add("picker", build_component())
        outer.add("flow", [begin_picker, after])
        state = {}
        await outer.create_context(make_turn(""), state).begin_dialog("flow")
        await outer.create_context(make_turn("3"), state).continue_dialog()

        assert seen == [{"who": "Bo", "number": 3}]
        assert state[STACK_KEY] == []

    @pytest.mark.asyncio
    async def test_two_conversations_do_not_share_data(self, make_turn, outbox):
        component = build_component()
        outer = DialogSet()
        outer.add("picker", component)
        state_a, state_b = {}, {}

        await outer.create_context(make_turn("", conversation_id="a"), state_a).begin_dialog("picker", {"who": "Ann"})
        await outer.create_context(make_turn("", conversation_id="b"), state_b).begin_dialog("picker", {"who": "Bob"})

        result_a = await outer.create_context(make_turn("1", conversation_id="a"), state_a).continue_dialog()
        result_b = await outer.create_context(make_turn("2", conversation_id="b"), state_b).continue_dialog()

        assert result_a.result == {"who": "Ann", "number": 1}
        assert result_b.result == {"who": "Bob", "number": 2}
