"""
Message and card builders.

Dialogs never hand-assemble activity dicts; they go through these factories
so the outbound shape stays consistent across channels.
"""
from __future__ import annotations

from typing import Any, Optional, Union

from models.schemas import (
    Activity, ActivityType, Attachment, AttachmentLayout, CardAction, InputHint,
)

ADAPTIVE_CARD = "application/vnd.microsoft.card.adaptive"
HERO_CARD = "application/vnd.microsoft.card.hero"


class CardFactory:

    @staticmethod
    def adaptive_card(card: dict[str, Any]) -> Attachment:
        return Attachment(content_type=ADAPTIVE_CARD, content=card)

    @staticmethod
    def actions(actions: list[Union[str, CardAction]], title: str = "") -> Attachment:
        """Hero card holding only buttons. Plain strings become imBack actions."""
        buttons = [CardFactory.to_action(a).model_dump(mode="json") for a in actions]
        content: dict[str, Any] = {"buttons": buttons}
        if title:
            content["title"] = title
        return Attachment(content_type=HERO_CARD, content=content)

    @staticmethod
    def fact_set_card(title: str, facts: list[dict[str, str]]) -> Attachment:
        return CardFactory.adaptive_card({
            "type": "AdaptiveCard",
            "version": "1.0",
            "body": [{
                "type": "Container",
                "items": [
                    {"type": "TextBlock", "text": title, "weight": "bolder", "size": "large"},
                    {"type": "FactSet", "facts": facts},
                ],
            }],
        })

    @staticmethod
    def to_action(action: Union[str, CardAction]) -> CardAction:
        if isinstance(action, CardAction):
            return action
        return CardAction(type="imBack", title=action, value=action)


class MessageFactory:

    @staticmethod
    def text(
        text: str,
        speak: str = "",
        input_hint: Optional[InputHint] = None,
    ) -> Activity:
        return Activity(
            type=ActivityType.MESSAGE.value, text=text, speak=speak,
            input_hint=input_hint,
        )

    @staticmethod
    def attachment(attachment: Attachment, text: str = "", speak: str = "") -> Activity:
        return MessageFactory.list([attachment], text, speak)

    @staticmethod
    def list(attachments: list[Attachment], text: str = "", speak: str = "") -> Activity:
        activity = MessageFactory.text(text, speak)
        activity.attachments = list(attachments)
        activity.attachment_layout = AttachmentLayout.LIST
        return activity
