"""LINE webhook endpoint.

Validates ``X-Line-Signature``, then runs every text event of the batch
through the message pipeline concurrently and replies to each.
"""

from __future__ import annotations

import asyncio
import json

import httpx
from fastapi import APIRouter, Header, Request
from fastapi.responses import PlainTextResponse
from loguru import logger

from kitt.api.services import Services
from kitt.bus.events import InboundMessage, OutboundMessage
from kitt.channels.line import LineApiError, parse_events, verify_signature

router = APIRouter()

ERROR_REPLY = "抱歉，處理訊息時發生錯誤，請稍後再試。"


@router.post("/webhook")
async def line_webhook(
    request: Request,
    x_line_signature: str = Header(default=""),
) -> PlainTextResponse:
    services: Services = request.app.state.services
    body = await request.body()

    if not verify_signature(body, x_line_signature, services.settings.line_channel_secret):
        logger.warning("Rejected LINE webhook: invalid signature")
        return PlainTextResponse("Invalid signature", status_code=400)

    try:
        messages = parse_events(json.loads(body))
        await asyncio.gather(*(handle_event(services, msg) for msg in messages))
    except Exception as exc:
        logger.exception(f"Webhook error: {exc}")
        return PlainTextResponse("Error", status_code=500)

    return PlainTextResponse("OK")


async def handle_event(services: Services, msg: InboundMessage) -> None:
    logger.info(f"[LINE] User: {msg.sender_id}")
    logger.info(f"[LINE] Message: {msg.content}")

    try:
        reply = await asyncio.wait_for(
            services.pipeline.handle_message(msg.content, msg.sender_id),
            timeout=services.settings.reply_timeout_seconds,
        )
    except Exception as exc:
        logger.error(f"[LINE] Error handling message: {exc!r}")
        reply = ERROR_REPLY

    try:
        await services.line.reply(OutboundMessage(
            channel=msg.channel,
            chat_id=msg.chat_id,
            content=reply,
            reply_to=msg.reply_token,
        ))
    except (LineApiError, httpx.HTTPError) as exc:
        logger.error(f"[LINE] Reply failed: {exc}")
