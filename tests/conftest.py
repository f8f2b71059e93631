"""Shared test fixtures for the concierge bot and dialog runtime."""
from datetime import datetime
from typing import Any, Optional

import pytest

from models.schemas import (
    Activity, ActivityType, Attachment, ChannelAccount, ConversationAccount,
)
from dialogs.turn import TurnContext


FIXED_NOW = datetime(2026, 10, 19, 9, 30)          # a Monday


def make_activity(
    text: str = "",
    type: str = ActivityType.MESSAGE.value,
    conversation_id: str = "conv-1",
    channel_id: str = "chat",
    locale: str = "",
    attachments: Optional[list[Attachment]] = None,
    user_id: str = "guest-1",
) -> Activity:
    return Activity(
        type=type,
        text=text,
        channel_id=channel_id,
        service_url="https://chat.example.test",
        conversation=ConversationAccount(id=conversation_id),
        from_=ChannelAccount(id=user_id, name="Guest"),
        recipient=ChannelAccount(id="concierge", name="Concierge"),
        locale=locale,
        attachments=attachments or [],
    )


class Outbox:
    """Collects everything the bot sends, across turns."""

    def __init__(self):
        self.activities: list[Activity] = []

    async def send(self, activities: list[Activity]) -> list[dict[str, Any]]:
        self.activities.extend(activities)
        return [{"id": a.id} for a in activities]

    @property
    def texts(self) -> list[str]:
        return [a.text for a in self.activities]

    def clear(self) -> None:
        self.activities.clear()


@pytest.fixture
def outbox() -> Outbox:
    return Outbox()


@pytest.fixture
def make_turn(outbox):
    """Build a TurnContext whose replies land in `outbox`."""
    def _make(text: str = "", **kwargs) -> TurnContext:
        return TurnContext(make_activity(text, **kwargs), outbox.send)
    return _make


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture(autouse=True)
def _reset_singletons():
    from config.settings import reset_settings
    from database.store_factory import reset_store
    reset_store()
    yield
    reset_store()
    reset_settings()
