"""
ChoicePrompt — asks the user to pick one of a fixed list of choices.

The choices travel in PromptOptions so the same registered prompt can be
reused with different lists. Rendering appends the choices to the prompt
text according to `style` and always attaches them as suggested actions
so channels with buttons can show them.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from dialogs.prompts.prompt import ListStyle, Prompt, PromptOptions
from dialogs.prompts.recognizers import recognize_choice
from models.messages import CardFactory
from models.schemas import Activity, InputHint, SuggestedActions

if TYPE_CHECKING:
    from dialogs.dialog_context import DialogContext


def render_choices(text: str, choices: list[str], style: ListStyle) -> str:
    if not choices or style == ListStyle.NONE:
        return text

    if style == ListStyle.LIST:
        lines = [f"{i}. {choice}" for i, choice in enumerate(choices, start=1)]
        return "\n".join([text, *lines]) if text else "\n".join(lines)

    numbered = [f"({i}) {choice}" for i, choice in enumerate(choices, start=1)]
    if len(numbered) == 1:
        inline = numbered[0]
    elif len(numbered) == 2:
        inline = f"{numbered[0]} or {numbered[1]}"
    else:
        inline = ", ".join(numbered[:-1]) + f", or {numbered[-1]}"
    return f"{text} {inline}" if text else inline


class ChoicePrompt(Prompt):

    async def on_prompt(self, dc: "DialogContext", options: PromptOptions, is_retry: bool) -> None:
        prompt, speak = self.select_prompt(options, is_retry)
        activity = self._build_activity(prompt, options)
        if activity is None:
            return
        await dc.context.send_activity(activity, speak=speak, input_hint=InputHint.EXPECTING)

    async def on_recognize(self, dc: "DialogContext", options: PromptOptions) -> Any:
        return recognize_choice(dc.context.text, options.choices)

    @staticmethod
    def _build_activity(prompt: Any, options: PromptOptions) -> Optional[Activity]:
        if prompt is None and not options.choices:
            return None

        if isinstance(prompt, Activity):
            activity = prompt.model_copy(deep=True)
        else:
            activity = Activity(text=prompt or "")
        activity.text = render_choices(activity.text, options.choices, ListStyle(options.style))

        if options.choices and activity.suggested_actions is None:
            activity.suggested_actions = SuggestedActions(
                actions=[CardFactory.to_action(c) for c in options.choices],
            )
        return activity
