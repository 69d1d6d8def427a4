"""Per-message pipeline: detect language, classify intent, answer or acknowledge."""

from __future__ import annotations

from loguru import logger

from kitt.agent.responder import ResponseGenerator
from kitt.nl.intent_engine import IntentEngine
from kitt.nl.language import LanguageDetector, LanguageTag

ACK_ZH_CN = "✅ 已收到更新请求，我会帮你记录：\n\n\"{message}\"\n\n(功能开发中，目前仅记录到日志)"
ACK_ZH_TW = "✅ 已收到更新請求，我會幫你記錄：\n\n「{message}」\n\n（功能開發中，目前僅記錄到日誌）"


def acknowledgment(message: str, lang: LanguageTag) -> str:
    template = ACK_ZH_CN if lang == LanguageTag.ZH_CN else ACK_ZH_TW
    return template.format(message=message)


class MessagePipeline:
    """Turns one inbound text message into one reply string."""

    def __init__(
        self,
        detector: LanguageDetector,
        intents: IntentEngine,
        responder: ResponseGenerator,
    ) -> None:
        self._detector = detector
        self._intents = intents
        self._responder = responder

    async def handle_message(self, text: str, source_id: str) -> str:
        log = logger.bind(source_id=source_id)

        lang = await self._detector.detect(text)
        log.info(f"Detected language: {lang}")

        is_update = await self._intents.is_knowledge_update(text)
        log.info(f"Is knowledge update: {is_update}")

        if is_update:
            # No write path yet: the request is only logged.
            log.info(f"Knowledge update logged from {source_id}: {text}")
            return acknowledgment(text, lang)

        return await self._responder.respond(text, lang)
