"""Event types passed between the channel layer and the pipeline."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class InboundMessage:
    """Text message received from a chat channel."""

    channel: str  # line, …
    sender_id: str  # Platform-level user identifier
    chat_id: str  # Chat/group identifier
    content: str  # Message text
    reply_token: str = ""
    timestamp: datetime = field(default_factory=datetime.now)
    metadata: dict[str, Any] = field(default_factory=dict)  # Channel-specific data


@dataclass
class OutboundMessage:
    """Reply to send back over a chat channel."""

    channel: str
    chat_id: str
    content: str
    reply_to: str | None = None  # LINE reply token
    metadata: dict[str, Any] = field(default_factory=dict)
