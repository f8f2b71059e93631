"""
Channel adapter base — turns inbound activities into bot turns.

Provides:
- ChannelError: delivery failures, flagged retryable or not
- Middleware: protocol for objects that wrap every turn
- BotAdapter: builds a TurnContext per inbound activity, runs the
  middleware chain and then the bot logic, and hands outbound
  activities to the concrete adapter's send_activities()
"""
from __future__ import annotations

import abc
import inspect
from typing import Any, Awaitable, Callable, Protocol, Union

import structlog

from dialogs.turn import TurnContext
from models.schemas import Activity

logger = structlog.get_logger()

BotLogic = Callable[[TurnContext], Awaitable[Any]]
NextHandler = Callable[[], Awaitable[Any]]


# ══════════════════════════════════════════════════════════════
#  ERRORS
# ══════════════════════════════════════════════════════════════

class ChannelError(Exception):
    """Base exception for all channel operations."""

    def __init__(self, message: str, channel: str = "", retryable: bool = False):
        self.channel = channel
        self.retryable = retryable
        super().__init__(message)


# ══════════════════════════════════════════════════════════════
#  MIDDLEWARE
# ══════════════════════════════════════════════════════════════

class Middleware(Protocol):
    async def on_turn(self, turn: TurnContext, next_handler: NextHandler) -> Any:
        ...


MiddlewareLike = Union[Middleware, Callable[[TurnContext, NextHandler], Awaitable[Any]]]


# ══════════════════════════════════════════════════════════════
#  ADAPTER
# ══════════════════════════════════════════════════════════════

class BotAdapter(abc.ABC):
    """
    Base class for all channel adapters.

    Subclasses implement send_activities(); everything about running a
    turn lives here.
    """

    channel: str = ""

    def __init__(self):
        self._middleware: list[MiddlewareLike] = []

    def use(self, middleware: MiddlewareLike) -> "BotAdapter":
        """Append middleware; it runs around every turn in registration order."""
        self._middleware.append(middleware)
        return self

    @abc.abstractmethod
    async def send_activities(self, activities: list[Activity]) -> list[dict[str, Any]]:
        ...

    async def process_activity(self, activity: Activity, logic: BotLogic) -> list[Activity]:
        """Run one turn and return every activity the bot sent during it."""
        turn = TurnContext(activity, self.send_activities)
        logger.debug("turn_started",
                     channel=activity.channel_id,
                     conversation=turn.conversation_id,
                     activity_type=activity.type)
        await self._run_pipeline(turn, logic, 0)
        logger.debug("turn_completed",
                     conversation=turn.conversation_id,
                     sent=len(turn.sent_activities))
        return turn.sent_activities

    async def _run_pipeline(self, turn: TurnContext, logic: BotLogic, index: int) -> None:
        if index >= len(self._middleware):
            result = logic(turn)
            if inspect.isawaitable(result):
                await result
            return

        middleware = self._middleware[index]

        async def next_handler() -> None:
            await self._run_pipeline(turn, logic, index + 1)

        handler = getattr(middleware, "on_turn", middleware)
        await handler(turn, next_handler)
