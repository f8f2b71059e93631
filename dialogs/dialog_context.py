"""
DialogContext — the per-turn facade over one conversation's dialog stack.

begin_dialog / end_dialog / replace_dialog are the only operations that
mutate the stack. Nesting depth of dialogs equals stack depth: a dialog
that begins another one is suspended until the child ends, at which
point the child's result is handed to the parent's resume hook.

Usage:
    dc = dialogs.create_context(turn, state)
    result = await dc.continue_dialog()
    if not turn.responded:
        result = await dc.begin_dialog("greeting")
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Optional

import structlog

from dialogs.dialog import Dialog, DialogInstance, DialogResult, maybe_await
from dialogs.errors import DialogError, DialogNotFound, StepExecutionFailure
from dialogs.turn import TurnContext

if TYPE_CHECKING:
    from dialogs.dialog_set import DialogSet

logger = structlog.get_logger()


class DialogContext:

    def __init__(self, dialogs: "DialogSet", context: TurnContext, stack: list[DialogInstance]):
        self.dialogs = dialogs
        self.context = context
        self._stack = stack
        self._final_result: Any = None

    # ── Introspection ─────────────────────────────────

    @property
    def stack(self) -> list[DialogInstance]:
        return self._stack

    @property
    def active_dialog(self) -> Optional[DialogInstance]:
        return self._stack[-1] if self._stack else None

    @property
    def dialog_result(self) -> DialogResult:
        return DialogResult(active=len(self._stack) > 0, result=self._final_result)

    # ── Stack operations ──────────────────────────────

    async def begin_dialog(self, dialog_id: str, options: Any = None) -> DialogResult:
        """Push a new instance of `dialog_id` and run its begin hook."""
        dialog = self._resolve(dialog_id)
        self._stack.append(DialogInstance(id=dialog_id, state={}))
        logger.debug("dialog_begin", dialog_id=dialog_id, depth=len(self._stack))
        await self._run_hook(dialog_id, "begin", dialog.dialog_begin, self, options)
        return self.dialog_result

    async def prompt(
        self,
        dialog_id: str,
        prompt: Any = None,
        choices: Optional[list[str]] = None,
        **options: Any,
    ) -> DialogResult:
        """Begin a prompt dialog. `options` map onto PromptOptions fields."""
        from dialogs.prompts.prompt import PromptOptions

        prompt_options = PromptOptions(prompt=prompt, **options)
        if choices is not None:
            prompt_options.choices = list(choices)
        return await self.begin_dialog(dialog_id, prompt_options)

    async def continue_dialog(self) -> DialogResult:
        """
        Resume whatever is on top of the stack with the current turn.

        An empty stack is a no-op. A dialog with no continue behaviour of its
        own is ended with no result by the base class default.
        """
        instance = self.active_dialog
        if instance is None:
            return self.dialog_result
        dialog = self._resolve(instance.id)
        await self._run_hook(instance.id, "continue", dialog.dialog_continue, self)
        return self.dialog_result

    async def end_dialog(self, result: Any = None) -> DialogResult:
        """
        Pop the current instance.

        The new top (if any) receives `result` through its resume hook;
        otherwise `result` becomes the final result of the stack.
        """
        if self._stack:
            ended = self._stack.pop()
            logger.debug("dialog_end", dialog_id=ended.id, depth=len(self._stack))

        parent = self.active_dialog
        if parent is not None:
            dialog = self._resolve(parent.id)
            await self._run_hook(parent.id, "resume", dialog.dialog_resume, self, result)
        else:
            self._final_result = result
        return self.dialog_result

    async def replace_dialog(self, dialog_id: str, options: Any = None) -> DialogResult:
        """Swap the current instance for a new one without growing the stack."""
        if self._stack:
            replaced = self._stack.pop()
            logger.debug("dialog_replaced", dialog_id=replaced.id, replacement=dialog_id)
        return await self.begin_dialog(dialog_id, options)

    # ── Helpers ───────────────────────────────────────

    def _resolve(self, dialog_id: str) -> Dialog:
        dialog = self.dialogs.find(dialog_id)
        if dialog is None:
            logger.error("dialog_not_found", dialog_id=dialog_id)
            raise DialogNotFound(dialog_id)
        return dialog

    @staticmethod
    async def _run_hook(dialog_id: str, hook: str, fn: Callable[..., Any], *args: Any) -> Any:
        try:
            return await maybe_await(fn(*args))
        except DialogError:
            raise
        except Exception as e:
            logger.error("dialog_hook_failed", dialog_id=dialog_id, hook=hook, error=str(e))
            raise StepExecutionFailure(dialog_id, hook, e) from e
