"""LINE Messaging API channel.

Self-contained signature check and reply call (plain httpx, no SDK).
"""

from __future__ import annotations

import base64
import hashlib
import hmac
from datetime import datetime
from typing import Any

import httpx
from loguru import logger

from kitt.bus.events import InboundMessage, OutboundMessage
from kitt.settings import KittSettings, get_settings

CHANNEL = "line"
MAX_TEXT_LENGTH = 5000  # LINE rejects longer text messages


class LineApiError(RuntimeError):
    """Non-success response from the LINE Messaging API."""


def verify_signature(body: bytes, signature: str, channel_secret: str) -> bool:
    """Check ``X-Line-Signature`` (base64 HMAC-SHA256 of the raw body)."""
    if not signature or not channel_secret:
        return False
    digest = hmac.new(channel_secret.encode("utf-8"), body, hashlib.sha256).digest()
    expected = base64.b64encode(digest).decode("utf-8")
    return hmac.compare_digest(expected, signature)


def parse_events(payload: dict[str, Any]) -> list[InboundMessage]:
    """Extract text messages from a webhook payload; other events are skipped."""
    messages: list[InboundMessage] = []
    for event in payload.get("events") or []:
        message = event.get("message") or {}
        if event.get("type") != "message" or message.get("type") != "text":
            logger.info(f"[SKIP] Event type: {event.get('type')}, message type: {message.get('type')}")
            continue

        source = event.get("source") or {}
        user_id = source.get("userId", "")
        chat_id = source.get("groupId") or source.get("roomId") or user_id
        ts = event.get("timestamp")
        messages.append(InboundMessage(
            channel=CHANNEL,
            sender_id=user_id,
            chat_id=chat_id,
            content=message.get("text", ""),
            reply_token=event.get("replyToken", ""),
            timestamp=datetime.fromtimestamp(ts / 1000) if ts else datetime.now(),
            metadata={"message_id": message.get("id", ""), "source_type": source.get("type", "")},
        ))
    return messages


class LineClient:
    """Minimal async client for the reply endpoint."""

    def __init__(
        self,
        access_token: str | None = None,
        api_base: str | None = None,
        http: httpx.AsyncClient | None = None,
        settings: KittSettings | None = None,
    ) -> None:
        s = settings or get_settings()
        self._token = access_token if access_token is not None else s.line_channel_access_token
        self._http = http or httpx.AsyncClient(base_url=(api_base or s.line_api_base).rstrip("/"), timeout=15.0)

    async def reply(self, msg: OutboundMessage) -> None:
        if not msg.reply_to:
            raise LineApiError("reply token missing")
        body = {
            "replyToken": msg.reply_to,
            "messages": [{"type": "text", "text": msg.content[:MAX_TEXT_LENGTH]}],
        }
        resp = await self._http.post(
            "/v2/bot/message/reply",
            json=body,
            headers={"Authorization": f"Bearer {self._token}"},
        )
        if resp.status_code >= 400:
            raise LineApiError(f"HTTP {resp.status_code}: {resp.text[:500]}")
        logger.info(f"[LINE] Response sent ({len(msg.content)} chars)")

    async def aclose(self) -> None:
        await self._http.aclose()
