from dialogs.prompts.attachment_prompt import AttachmentPrompt
from dialogs.prompts.choice_prompt import ChoicePrompt, render_choices
from dialogs.prompts.datetime_prompt import DateTimePrompt
from dialogs.prompts.number_prompt import NumberPrompt
from dialogs.prompts.prompt import ListStyle, Prompt, PromptOptions, PromptValidator
from dialogs.prompts.recognizers import (
    DateTimeResolution,
    FoundChoice,
    recognize_attachments,
    recognize_choice,
    recognize_datetime,
    recognize_number,
    recognize_text,
)
from dialogs.prompts.text_prompt import TextPrompt

__all__ = [
    "AttachmentPrompt",
    "ChoicePrompt",
    "DateTimePrompt",
    "DateTimeResolution",
    "FoundChoice",
    "ListStyle",
    "NumberPrompt",
    "Prompt",
    "PromptOptions",
    "PromptValidator",
    "TextPrompt",
    "recognize_attachments",
    "recognize_choice",
    "recognize_datetime",
    "recognize_number",
    "recognize_text",
    "render_choices",
]
