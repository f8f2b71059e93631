"""
Turn context — one request/response cycle between a user and the bot.

The adapter builds a TurnContext for every inbound activity. Input
classification happens exactly once, here, so that the engine's
"only user messages advance a dialog" policy is a visible decision
rather than a check buried in the step executor.
"""
from __future__ import annotations

import inspect
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Union

import structlog

from models.schemas import Activity, ActivityType, Attachment, InputHint

logger = structlog.get_logger()

SendHandler = Callable[[list[Activity]], Union[Awaitable[list[dict[str, Any]]], list[dict[str, Any]]]]


class InputKind(str, Enum):
    """How the engine treats an inbound activity."""
    MESSAGE = "message"                    # user input: advances waterfalls, feeds prompts
    CONVERSATION_UPDATE = "conversation_update"
    TYPING = "typing"
    EVENT = "event"
    OTHER = "other"


_KIND_BY_TYPE = {
    ActivityType.MESSAGE.value: InputKind.MESSAGE,
    ActivityType.CONVERSATION_UPDATE.value: InputKind.CONVERSATION_UPDATE,
    ActivityType.TYPING.value: InputKind.TYPING,
    ActivityType.EVENT.value: InputKind.EVENT,
}


def classify_activity(activity: Activity) -> InputKind:
    """Map an inbound activity onto the engine's input classes."""
    return _KIND_BY_TYPE.get(activity.type, InputKind.OTHER)


class TurnContext:
    """
    Per-turn facade over the inbound activity and the host's outbound send.

    `responded` and `sent_activities` are tracked here (not by dialogs) so
    callers can implement "say something if nobody did" fallbacks.
    """

    def __init__(self, activity: Activity, send_handler: SendHandler):
        self.activity = activity
        self.input_kind = classify_activity(activity)
        self.turn_state: dict[str, Any] = {}
        self._send_handler = send_handler
        self._sent: list[Activity] = []

    # ── Inbound ───────────────────────────────────────────────

    @property
    def is_message(self) -> bool:
        return self.input_kind == InputKind.MESSAGE

    @property
    def text(self) -> str:
        return self.activity.text or ""

    @property
    def attachments(self) -> list[Attachment]:
        return list(self.activity.attachments or [])

    @property
    def locale(self) -> str:
        return self.activity.locale or ""

    # ── Outbound ──────────────────────────────────────────────

    @property
    def responded(self) -> bool:
        return bool(self._sent)

    @property
    def sent_activities(self) -> list[Activity]:
        return list(self._sent)

    async def send_activity(
        self,
        activity_or_text: Union[Activity, str],
        speak: str = "",
        input_hint: Optional[InputHint] = None,
    ) -> Optional[dict[str, Any]]:
        if isinstance(activity_or_text, str):
            activity = Activity(
                type=ActivityType.MESSAGE.value,
                text=activity_or_text,
                speak=speak,
                input_hint=input_hint or InputHint.ACCEPTING,
            )
        else:
            overrides: dict[str, Any] = {}
            if speak:
                overrides["speak"] = speak
            if input_hint:
                overrides["input_hint"] = InputHint(input_hint).value
            activity = activity_or_text.model_copy(update=overrides)
        responses = await self.send_activities([activity])
        return responses[0] if responses else None

    async def send_activities(self, activities: list[Activity]) -> list[dict[str, Any]]:
        """Address copies of `activities` to the sender and hand them to the channel."""
        outbound = [a.model_copy(deep=True).reply_from(self.activity) for a in activities]
        responses = self._send_handler(outbound)
        if inspect.isawaitable(responses):
            responses = await responses
        self._sent.extend(outbound)
        logger.debug("turn_activities_sent",
                     conversation=self.conversation_id,
                     count=len(outbound))
        return list(responses or [])

    @property
    def conversation_id(self) -> str:
        return self.activity.conversation.id if self.activity.conversation else ""
