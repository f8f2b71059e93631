"""
Prompt — base class for single-question / single-answer dialogs.

Every turn a prompt is current, it recognizes a candidate value from the
user's reply and hands it to the validator. The validator decides:

  returns a value                  → the prompt ends with that value
  returns None, sent a message     → wait for the next reply, no re-prompt
  returns None, sent nothing       → re-prompt with the retry text

There is no retry limit; the prompt keeps asking until it gets an
acceptable answer or the host throws the conversation state away.

Subclasses implement `on_recognize` and may override `on_prompt`.
"""
from __future__ import annotations

import abc
from enum import Enum
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional, Union

import structlog
from pydantic import BaseModel

from dialogs.dialog import Dialog, maybe_await
from dialogs.errors import DialogError, StepExecutionFailure
from dialogs.turn import TurnContext
from models.schemas import Activity, InputHint

if TYPE_CHECKING:
    from dialogs.dialog_context import DialogContext

logger = structlog.get_logger()

PromptValidator = Callable[[TurnContext, Any], Union[Any, Awaitable[Any]]]

OPTIONS_KEY = "options"
DEFAULT_LOCALE = "en-US"


class ListStyle(str, Enum):
    NONE = "none"
    INLINE = "inline"                  # "(1) a, (2) b, or (3) c"
    LIST = "list"                      # one numbered choice per line


class PromptOptions(BaseModel):
    """What to say when prompting; stored in the prompt's instance state."""
    prompt: Optional[Union[str, Activity]] = None
    retry_prompt: Optional[Union[str, Activity]] = None
    speak: str = ""
    retry_speak: str = ""
    choices: list[str] = []
    style: ListStyle = ListStyle.INLINE

    @classmethod
    def coerce(cls, options: Any) -> "PromptOptions":
        if options is None:
            return cls()
        if isinstance(options, PromptOptions):
            return options
        if isinstance(options, (str, Activity)):
            return cls(prompt=options)
        return cls.model_validate(options)


class Prompt(Dialog):

    def __init__(self, validator: Optional[PromptValidator] = None, default_locale: Optional[str] = None):
        self.validator = validator
        self.default_locale = default_locale

    # ── Dialog hooks ──────────────────────────────────

    async def dialog_begin(self, dc: "DialogContext", options: Any = None) -> Any:
        prompt_options = PromptOptions.coerce(options)
        dc.active_dialog.state[OPTIONS_KEY] = prompt_options.model_dump(mode="json")
        await self.on_prompt(dc, prompt_options, is_retry=False)

    async def dialog_continue(self, dc: "DialogContext") -> Any:
        if not dc.context.is_message:
            return None

        instance = dc.active_dialog
        options = PromptOptions.coerce(instance.state.get(OPTIONS_KEY))
        recognized = await self.on_recognize(dc, options)

        sent_before = len(dc.context.sent_activities)
        value = await self._validate(dc, instance.id, recognized)

        if value is not None:
            logger.debug("prompt_accepted", dialog_id=instance.id)
            return await dc.end_dialog(value)

        if len(dc.context.sent_activities) > sent_before:
            # the validator already told the user what was wrong
            logger.debug("prompt_rejected_with_reply", dialog_id=instance.id)
            return None

        logger.debug("prompt_retry", dialog_id=instance.id)
        await self.on_prompt(dc, options, is_retry=True)
        return None

    # ── Extension points ──────────────────────────────

    async def on_prompt(self, dc: "DialogContext", options: PromptOptions, is_retry: bool) -> None:
        text, speak = self.select_prompt(options, is_retry)
        if text is None:
            return
        await dc.context.send_activity(text, speak=speak, input_hint=InputHint.EXPECTING)

    @abc.abstractmethod
    async def on_recognize(self, dc: "DialogContext", options: PromptOptions) -> Any:
        ...

    # ── Helpers ───────────────────────────────────────

    @staticmethod
    def select_prompt(options: PromptOptions, is_retry: bool) -> tuple[Optional[Union[str, Activity]], str]:
        if is_retry and options.retry_prompt is not None:
            return options.retry_prompt, options.retry_speak or options.speak
        return options.prompt, options.speak

    def resolve_locale(self, dc: "DialogContext") -> str:
        return dc.context.locale or self.default_locale or DEFAULT_LOCALE

    async def _validate(self, dc: "DialogContext", dialog_id: str, recognized: Any) -> Any:
        if self.validator is None:
            return recognized
        try:
            return await maybe_await(self.validator(dc.context, recognized))
        except DialogError:
            raise
        except Exception as e:
            logger.error("prompt_validator_failed", dialog_id=dialog_id, error=str(e))
            raise StepExecutionFailure(dialog_id, "validator", e) from e
