import asyncio
import base64
import hashlib
import hmac
import json

import httpx
import pytest

from kitt.bus.events import OutboundMessage
from kitt.channels.line import LineApiError, LineClient, parse_events, verify_signature
from kitt.settings import KittSettings

SECRET = "channel-secret"


def _sign(body: bytes, secret: str = SECRET) -> str:
    return base64.b64encode(hmac.new(secret.encode(), body, hashlib.sha256).digest()).decode()


def test_verify_signature_accepts_valid_and_rejects_tampered_body() -> None:
    body = b'{"events": []}'
    signature = _sign(body)

    assert verify_signature(body, signature, SECRET)
    assert not verify_signature(b'{"events": [1]}', signature, SECRET)
    assert not verify_signature(body, signature, "other-secret")
    assert not verify_signature(body, "", SECRET)


def test_parse_events_keeps_only_text_messages() -> None:
    payload = {
        "events": [
            {
                "type": "message",
                "replyToken": "r1",
                "timestamp": 1700000000000,
                "source": {"type": "user", "userId": "U1"},
                "message": {"id": "m1", "type": "text", "text": "hello"},
            },
            {
                "type": "message",
                "replyToken": "r2",
                "source": {"type": "group", "userId": "U2", "groupId": "G1"},
                "message": {"id": "m2", "type": "sticker"},
            },
            {"type": "follow", "replyToken": "r3", "source": {"type": "user", "userId": "U3"}},
        ]
    }

    messages = parse_events(payload)

    assert len(messages) == 1
    msg = messages[0]
    assert (msg.channel, msg.sender_id, msg.chat_id, msg.content, msg.reply_token) == (
        "line", "U1", "U1", "hello", "r1",
    )
    assert msg.metadata["message_id"] == "m1"


def test_parse_events_uses_group_id_as_chat_id() -> None:
    payload = {"events": [{
        "type": "message",
        "replyToken": "r",
        "source": {"type": "group", "userId": "U1", "groupId": "G9"},
        "message": {"type": "text", "text": "hi"},
    }]}

    assert parse_events(payload)[0].chat_id == "G9"


def _client(handler) -> LineClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="https://api.line.test")
    return LineClient(access_token="token-123", http=http, settings=KittSettings())


def test_reply_posts_text_message_with_bearer_token() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={})

    asyncio.run(_client(handler).reply(OutboundMessage(channel="line", chat_id="U1", content="hi", reply_to="r1")))

    request = seen[0]
    assert request.url.path == "/v2/bot/message/reply"
    assert request.headers["Authorization"] == "Bearer token-123"
    assert json.loads(request.content) == {"replyToken": "r1", "messages": [{"type": "text", "text": "hi"}]}


def test_reply_error_status_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"message": "Invalid reply token"})

    with pytest.raises(LineApiError):
        asyncio.run(_client(handler).reply(OutboundMessage(channel="line", chat_id="U1", content="hi", reply_to="bad")))


def test_reply_without_token_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    with pytest.raises(LineApiError):
        asyncio.run(_client(handler).reply(OutboundMessage(channel="line", chat_id="U1", content="hi")))
