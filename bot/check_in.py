"""
CheckIn — asks for the guest's name and room, returns the guest info.

The guest info being built lives in the waterfall's own instance state,
so two guests checking in at the same time never see each other's data.
"""
from __future__ import annotations

from typing import Any

from dialogs import ComponentDialog, DialogContext, DialogSet
from dialogs.prompts import NumberPrompt, TextPrompt

GUEST_KEY = "guest"


async def ask_name(dc: DialogContext, args: Any, skip) -> None:
    dc.active_dialog.state[GUEST_KEY] = dict(args or {})
    await dc.context.send_activity("What is your name?")


async def ask_room(dc: DialogContext, name: Any, skip) -> None:
    guest = dc.active_dialog.state[GUEST_KEY]
    guest["user_name"] = (name or "").strip()
    await dc.prompt("numberPrompt", f"Hi {guest['user_name']}. What room will you be staying in?")


async def welcome(dc: DialogContext, room: Any, skip) -> None:
    guest = dc.active_dialog.state[GUEST_KEY]
    guest["room"] = room
    await dc.context.send_activity("Great! Enjoy your stay!")
    await dc.end_dialog(guest)


class CheckIn(ComponentDialog):

    def __init__(self, default_locale: str = None):
        dialogs = DialogSet()
        dialogs.add("checkIn", [ask_name, ask_room, welcome])
        dialogs.add("textPrompt", TextPrompt(default_locale=default_locale))
        dialogs.add("numberPrompt", NumberPrompt(default_locale=default_locale))
        super().__init__(dialogs, "checkIn")
