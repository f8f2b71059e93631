from __future__ import annotations

from typing import Any

from bot.check_in import GUEST_KEY
from dialogs import ComponentDialog, DialogContext, DialogSet
from dialogs.prompts import ChoicePrompt, FoundChoice

TABLES = ["1", "2", "3", "4", "5", "6"]


async def ask_table(dc: DialogContext, args: Any, skip) -> None:
    guest = dict(args or {})
    dc.active_dialog.state[GUEST_KEY] = guest
    await dc.prompt(
        "choicePrompt",
        f"Welcome {guest.get('user_name', '')}, which table would you like to reserve?",
        choices=TABLES,
    )


async def confirm_table(dc: DialogContext, choice: FoundChoice, skip) -> None:
    guest = dc.active_dialog.state[GUEST_KEY]
    guest["table_number"] = choice.value
    await dc.context.send_activity(
        f"Sounds great, we will reserve table number {choice.value} for you."
    )
    await dc.end_dialog(guest)


class ReserveTable(ComponentDialog):
    """Lets a checked-in guest pick one of six tables."""

    def __init__(self, default_locale: str = None):
        dialogs = DialogSet()
        dialogs.add("reserveTable", [ask_table, confirm_table])
        dialogs.add("choicePrompt", ChoicePrompt(default_locale=default_locale))
        super().__init__(dialogs, "reserveTable")
