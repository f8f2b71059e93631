"""
HotelBot — routes each message turn of the hotel concierge.

  topic in progress        → continue the active dialog
  guest not checked in     → check-in dialog
  "reserve table"          → table reservation
  "wake up"                → wake-up call
  anything with "menu"     → menu card
  otherwise                → greeting with hints

When a topic dialog finishes, its result replaces the stored guest info.
"""
from __future__ import annotations

import re
from datetime import datetime
from typing import Callable

import structlog

from bot.check_in import CheckIn
from bot.menu import MenuControl
from bot.reserve_table import ReserveTable
from bot.wake_up import WakeUp
from context.conversation_state import ConversationState
from dialogs import DialogSet, TurnContext

logger = structlog.get_logger()

TOPIC_KEY = "topic"
GUEST_INFO_KEY = "guest_info"

FALLBACK_REPLY = "Sorry I don't understand"

_MENU_RE = re.compile(r"menu", re.IGNORECASE)


class HotelBot:

    def __init__(
        self,
        conversation_state: ConversationState,
        default_locale: str = "en-US",
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.conversation_state = conversation_state
        self.dialogs = DialogSet()
        self.dialogs.add("checkInPrompt", CheckIn(default_locale))
        self.dialogs.add("reservePrompt", ReserveTable(default_locale))
        self.dialogs.add("wakeUpPrompt", WakeUp(default_locale, clock=clock))
        self.dialogs.add("showMenu", MenuControl("burgerMenu"))

    async def on_turn(self, turn: TurnContext) -> None:
        if not turn.is_message:
            return

        state = self.conversation_state.get(turn)
        dc = self.dialogs.create_context(turn, state)

        if state.get(TOPIC_KEY):
            result = await dc.continue_dialog()
            if not result.active:
                state[GUEST_INFO_KEY] = result.result
                state[TOPIC_KEY] = False
                logger.info("topic_completed", conversation=turn.conversation_id)
            if not turn.responded:
                await turn.send_activity(FALLBACK_REPLY)
            return

        guest = state.get(GUEST_INFO_KEY)
        if not guest:
            state[TOPIC_KEY] = True
            await dc.begin_dialog("checkInPrompt", {})
            return

        utterance = turn.text.strip().lower()
        if "reserve table" in utterance:
            state[TOPIC_KEY] = True
            await dc.begin_dialog("reservePrompt", guest)
        elif "wake up" in utterance:
            state[TOPIC_KEY] = True
            await dc.begin_dialog("wakeUpPrompt", guest)
        elif _MENU_RE.search(utterance):
            await dc.begin_dialog("showMenu")
        else:
            await turn.send_activity(
                f"Hi {guest.get('user_name', '')}. How may we serve you today? "
                f'Request a "wake up" call or "reserve table"?'
            )

    async def reset_conversation(self, turn: TurnContext) -> None:
        """Abandon whatever the conversation was doing, including check-in."""
        await self.conversation_state.clear(turn)
