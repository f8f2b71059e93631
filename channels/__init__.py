"""Channel adapters: inbound activities in, bot replies out."""
from channels.base import BotAdapter, ChannelError, Middleware
from channels.chat_adapter import ChatAdapter
from channels.connector import ConnectorClient

__all__ = [
    "BotAdapter", "ChannelError", "Middleware",
    "ChatAdapter", "ConnectorClient",
]
