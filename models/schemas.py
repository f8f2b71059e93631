"""
Core wire models for the concierge bot.
These are the activity shapes exchanged with channels and shared across modules.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# ──────────────────────────────────────────────────────────────
#  Enums
# ──────────────────────────────────────────────────────────────

class ActivityType(str, Enum):
    MESSAGE = "message"
    CONVERSATION_UPDATE = "conversationUpdate"
    TYPING = "typing"
    EVENT = "event"
    END_OF_CONVERSATION = "endOfConversation"


class InputHint(str, Enum):
    ACCEPTING = "acceptingInput"
    EXPECTING = "expectingInput"
    IGNORING = "ignoringInput"


class AttachmentLayout(str, Enum):
    LIST = "list"
    CAROUSEL = "carousel"


# ──────────────────────────────────────────────────────────────
#  Accounts: who is talking, and in which conversation
# ──────────────────────────────────────────────────────────────

class ChannelAccount(BaseModel):
    id: str
    name: str = ""


class ConversationAccount(BaseModel):
    id: str
    name: str = ""
    is_group: bool = False


# ──────────────────────────────────────────────────────────────
#  Attachments & cards
# ──────────────────────────────────────────────────────────────

class Attachment(BaseModel):
    content_type: str
    content_url: str = ""
    content: Any = None
    name: str = ""
    thumbnail_url: str = ""


class CardAction(BaseModel):
    type: str = "imBack"                       # imBack | postBack | openUrl
    title: str
    value: Any = None


class SuggestedActions(BaseModel):
    actions: list[CardAction] = []
    to: list[str] = []


# ──────────────────────────────────────────────────────────────
#  Activity: one inbound or outbound unit of a turn
# ──────────────────────────────────────────────────────────────

class Activity(BaseModel):
    """
    A message or event exchanged with a channel.

    Inbound activities arrive from the HTTP host; outbound activities are
    built by dialogs and addressed back to the sender via `reply_from()`.
    """
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    type: str = ActivityType.MESSAGE.value
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    channel_id: str = "chat"
    service_url: str = ""
    from_: Optional[ChannelAccount] = Field(default=None, alias="from")
    recipient: Optional[ChannelAccount] = None
    conversation: Optional[ConversationAccount] = None
    reply_to_id: str = ""
    text: str = ""
    speak: str = ""
    input_hint: Optional[InputHint] = None
    locale: str = ""
    attachments: list[Attachment] = []
    attachment_layout: Optional[AttachmentLayout] = None
    suggested_actions: Optional[SuggestedActions] = None
    name: str = ""                             # event name
    value: Any = None                          # event payload
    channel_data: dict[str, Any] = {}

    def reply_from(self, inbound: "Activity") -> "Activity":
        """Address this (outbound) activity as a reply to `inbound`."""
        self.channel_id = inbound.channel_id
        self.service_url = inbound.service_url
        self.conversation = inbound.conversation.model_copy() if inbound.conversation else None
        self.from_ = inbound.recipient.model_copy() if inbound.recipient else None
        self.recipient = inbound.from_.model_copy() if inbound.from_ else None
        self.reply_to_id = inbound.id
        if not self.locale:
            self.locale = inbound.locale
        return self

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
