from __future__ import annotations

from typing import TYPE_CHECKING, Any

from dialogs.prompts.prompt import Prompt, PromptOptions
from dialogs.prompts.recognizers import recognize_text

if TYPE_CHECKING:
    from dialogs.dialog_context import DialogContext


class TextPrompt(Prompt):
    """Asks for free text. Blank replies count as unrecognized."""

    async def on_recognize(self, dc: "DialogContext", options: PromptOptions) -> Any:
        return recognize_text(dc.context.text)
