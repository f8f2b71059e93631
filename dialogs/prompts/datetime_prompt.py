from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Callable, Optional

from dialogs.prompts.prompt import Prompt, PromptOptions, PromptValidator
from dialogs.prompts.recognizers import recognize_datetime

if TYPE_CHECKING:
    from dialogs.dialog_context import DialogContext


class DateTimePrompt(Prompt):
    """
    Asks for a date and/or time.

    The candidate is a list of DateTimeResolution; ambiguous replies such
    as "at 7" produce more than one entry. `clock` supplies the reference
    point for relative expressions ("tomorrow", "next friday").
    """

    def __init__(
        self,
        validator: Optional[PromptValidator] = None,
        default_locale: Optional[str] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        super().__init__(validator, default_locale)
        self.clock = clock

    async def on_recognize(self, dc: "DialogContext", options: PromptOptions) -> Any:
        return recognize_datetime(dc.context.text, reference=self.clock())
