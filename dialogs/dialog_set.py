"""
DialogSet — registry of dialogs that can all call each other.

Resolution is by exact id. A DialogSet is built once at startup and
shared by every conversation; it holds no per-conversation state. Each
turn gets its own DialogContext bound to the stack found in that
conversation's persisted state.
"""
from __future__ import annotations

from typing import Any, Callable, Optional, Sequence, Union

import structlog

from dialogs.dialog import Dialog, DialogInstance
from dialogs.dialog_context import DialogContext
from dialogs.errors import DuplicateDialogId
from dialogs.turn import TurnContext
from dialogs.waterfall import Waterfall

logger = structlog.get_logger()

STACK_KEY = "dialog_stack"


class DialogSet:

    def __init__(self):
        self._dialogs: dict[str, Dialog] = {}

    # ── Registration ──────────────────────────────────

    def add(self, dialog_id: str, dialog_or_steps: Union[Dialog, Sequence[Callable]]) -> Dialog:
        """
        Register a dialog under `dialog_id`.

        A list of step functions is wrapped in a Waterfall. Registering the
        same id twice raises DuplicateDialogId and leaves the first
        registration in place.
        """
        if dialog_id in self._dialogs:
            logger.error("duplicate_dialog_id", dialog_id=dialog_id)
            raise DuplicateDialogId(dialog_id)

        if isinstance(dialog_or_steps, Dialog):
            dialog = dialog_or_steps
        elif isinstance(dialog_or_steps, (list, tuple)) and all(callable(s) for s in dialog_or_steps):
            dialog = Waterfall(list(dialog_or_steps))
        else:
            raise TypeError(
                f"DialogSet.add(): '{dialog_id}' must be a Dialog or a list of step functions"
            )

        self._dialogs[dialog_id] = dialog
        logger.debug("dialog_registered",
                     dialog_id=dialog_id,
                     kind=type(dialog).__name__)
        return dialog

    # ── Resolution ────────────────────────────────────

    def find(self, dialog_id: str) -> Optional[Dialog]:
        return self._dialogs.get(dialog_id)

    def ids(self) -> list[str]:
        return list(self._dialogs)

    def __contains__(self, dialog_id: str) -> bool:
        return dialog_id in self._dialogs

    # ── Per-turn context ──────────────────────────────

    def create_context(self, turn: TurnContext, state: dict[str, Any]) -> DialogContext:
        """
        Bind a DialogContext to `state["dialog_stack"]` for this turn.

        The stack is created empty when missing. Entries that came back
        from storage as plain dicts are rehydrated in place so the list
        object the caller persists stays the same.
        """
        stack = state.get(STACK_KEY)
        if not isinstance(stack, list):
            stack = []
            state[STACK_KEY] = stack
        for i, entry in enumerate(stack):
            if not isinstance(entry, DialogInstance):
                stack[i] = DialogInstance.model_validate(entry)
        return DialogContext(self, turn, stack)
