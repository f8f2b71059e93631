from __future__ import annotations

from typing import TYPE_CHECKING, Any

from dialogs.prompts.prompt import Prompt, PromptOptions
from dialogs.prompts.recognizers import recognize_number

if TYPE_CHECKING:
    from dialogs.dialog_context import DialogContext


class NumberPrompt(Prompt):
    """
    Asks for a number. The first numeric token of the reply wins, so
    "room 412 please" yields 412. Decimal separators follow the turn's
    locale ("3,5" is 3.5 for de-DE).
    """

    async def on_recognize(self, dc: "DialogContext", options: PromptOptions) -> Any:
        return recognize_number(dc.context.text, self.resolve_locale(dc))
