"""
Dialog base class and the activation records kept on a conversation's stack.

A Dialog is a reusable unit of conversation with three hooks:

  dialog_begin(dc, options)   required — the instance was just pushed
  dialog_continue(dc)         the user replied while this instance is current
  dialog_resume(dc, result)   a dialog this instance began has ended

The two optional hooks have concrete defaults here instead of being
probed for at runtime: continuing ends the dialog with no result, and
resuming ends it with the child's result.
"""
from __future__ import annotations

import abc
import inspect
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

if TYPE_CHECKING:
    from dialogs.dialog_context import DialogContext
    from dialogs.turn import TurnContext


class DialogInstance(BaseModel):
    """One activation record on the dialog stack."""
    id: str
    state: dict[str, Any] = {}


class DialogResult(BaseModel):
    """Outcome of a stack operation. `active` is False once the stack is empty."""
    active: bool = False
    result: Any = None


async def maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class Dialog(abc.ABC):

    @abc.abstractmethod
    async def dialog_begin(self, dc: "DialogContext", options: Any = None) -> Any:
        ...

    async def dialog_continue(self, dc: "DialogContext") -> Any:
        return await dc.end_dialog()

    async def dialog_resume(self, dc: "DialogContext", result: Any = None) -> Any:
        return await dc.end_dialog(result)

    # ── Standalone use ────────────────────────────────────────

    async def begin(self, turn: "TurnContext", state: dict[str, Any], options: Any = None) -> DialogResult:
        """
        Start this dialog without a host DialogSet.

        `state` should be an empty dict the caller persists for as long as
        the returned result is still active.
        """
        dc = self._standalone_context(turn, state)
        await dc.begin_dialog("dialog", options)
        return dc.dialog_result

    async def continue_turn(self, turn: "TurnContext", state: dict[str, Any]) -> DialogResult:
        """Feed the user's reply to a dialog started with `begin()`."""
        dc = self._standalone_context(turn, state)
        await dc.continue_dialog()
        return dc.dialog_result

    def _standalone_context(self, turn: "TurnContext", state: dict[str, Any]) -> "DialogContext":
        from dialogs.dialog_set import DialogSet

        dialogs = DialogSet()
        dialogs.add("dialog", self)
        return dialogs.create_context(turn, state)
