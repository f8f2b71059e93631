"""
Waterfall — a dialog that runs a fixed, ordered list of steps.

Each step receives the dialog context, the value that led to it, and a
`skip` callable:

  step 0         ← the options passed to begin_dialog()
  step n (n > 0) ← the user's reply text, or the result of a dialog that
                   step n-1 began, or the value handed to skip()

Example:
    dialogs.add("name", [
        ask_first_name,          # await dc.context.send_activity("First name?")
        ask_last_name,           # dc.active_dialog.state["first"] = value ...
        finish,                  # await dc.end_dialog(full_name)
    ])

Running past the last step ends the waterfall and hands the last value
to the parent.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional

import structlog

from dialogs.dialog import Dialog, maybe_await
from dialogs.errors import DialogError, StepExecutionFailure

if TYPE_CHECKING:
    from dialogs.dialog_context import DialogContext

logger = structlog.get_logger()

SkipStep = Callable[..., Awaitable[Any]]
WaterfallStep = Callable[["DialogContext", Any, SkipStep], Any]

STEP_KEY = "step"


class Waterfall(Dialog):
    """
    The step cursor is kept in the instance state under "step"; steps keep
    their own values in the same dict under other keys.
    """

    def __init__(self, steps: list[WaterfallStep]):
        self.steps = list(steps)

    async def dialog_begin(self, dc: "DialogContext", options: Any = None) -> Any:
        dc.active_dialog.state[STEP_KEY] = 0
        return await self.run_step(dc, options)

    async def dialog_continue(self, dc: "DialogContext") -> Any:
        # Typing indicators, conversation updates and events don't count as answers
        if not dc.context.is_message:
            logger.debug("waterfall_ignored_input",
                         dialog_id=dc.active_dialog.id,
                         input_kind=dc.context.input_kind.value)
            return None
        dc.active_dialog.state[STEP_KEY] += 1
        return await self.run_step(dc, dc.context.activity.text)

    async def dialog_resume(self, dc: "DialogContext", result: Any = None) -> Any:
        dc.active_dialog.state[STEP_KEY] += 1
        return await self.run_step(dc, result)

    async def run_step(self, dc: "DialogContext", value: Any = None) -> Any:
        instance = dc.active_dialog
        index = instance.state.get(STEP_KEY, 0)

        if not 0 <= index < len(self.steps):
            logger.debug("waterfall_completed", dialog_id=instance.id, steps=len(self.steps))
            return await dc.end_dialog(value)

        async def skip(extra: Optional[Any] = None) -> Any:
            instance.state[STEP_KEY] = index + 1
            return await self.run_step(dc, extra)

        logger.debug("waterfall_step", dialog_id=instance.id, step=index)
        try:
            return await maybe_await(self.steps[index](dc, value, skip))
        except DialogError:
            raise
        except Exception as e:
            logger.error("waterfall_step_failed",
                         dialog_id=instance.id, step=index, error=str(e))
            raise StepExecutionFailure(instance.id, index, e) from e
