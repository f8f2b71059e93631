from __future__ import annotations

from datetime import datetime
from typing import Any, Callable

from bot.check_in import GUEST_KEY
from dialogs import ComponentDialog, DialogContext, DialogSet
from dialogs.prompts import DateTimePrompt, DateTimeResolution


async def ask_time(dc: DialogContext, args: Any, skip) -> None:
    guest = dict(args or {})
    dc.active_dialog.state[GUEST_KEY] = guest
    await dc.prompt(
        "datePrompt",
        f"Hello, {guest.get('user_name', '')}. What time would you like your alarm to be set?",
    )


async def set_alarm(dc: DialogContext, resolutions: list[DateTimeResolution], skip) -> None:
    guest = dc.active_dialog.state[GUEST_KEY]
    # first reading wins when the reply was ambiguous
    guest["alarm_time"] = resolutions[0].value
    await dc.context.send_activity(
        f"Your alarm is set to {guest['alarm_time']} for room {guest.get('room', '')}"
    )
    await dc.end_dialog(guest)


class WakeUp(ComponentDialog):
    """Books a wake-up call for the guest's room."""

    def __init__(self, default_locale: str = None, clock: Callable[[], datetime] = datetime.now):
        dialogs = DialogSet()
        dialogs.add("wakeUp", [ask_time, set_alarm])
        dialogs.add("datePrompt", DateTimePrompt(default_locale=default_locale, clock=clock))
        super().__init__(dialogs, "wakeUp")
