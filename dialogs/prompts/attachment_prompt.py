from __future__ import annotations

from typing import TYPE_CHECKING, Any

from dialogs.prompts.prompt import Prompt, PromptOptions
from dialogs.prompts.recognizers import recognize_attachments

if TYPE_CHECKING:
    from dialogs.dialog_context import DialogContext


class AttachmentPrompt(Prompt):
    """
    Asks the user to upload files. The candidate is always a list, empty
    when the reply carried no attachments; use a validator to insist on
    at least one.
    """

    async def on_recognize(self, dc: "DialogContext", options: PromptOptions) -> Any:
        return recognize_attachments(dc.context.attachments)
