"""Knowledge-grounded reply generation."""

from __future__ import annotations

from loguru import logger

from kitt.agent.prompt import PromptParts, build_prompt
from kitt.knowledge.store import KnowledgeStore
from kitt.providers.ollama import InferenceError, TextGenerator

RESPONSE_MAX_TOKENS = 500

APOLOGY_ZH = "抱歉，我暫時無法回應，請稍後再試。"
APOLOGY_EN = "Sorry, I cannot respond at the moment. Please try again later."


def apology_for(lang: str) -> str:
    return APOLOGY_ZH if str(lang).startswith("zh") else APOLOGY_EN


class ResponseGenerator:
    def __init__(self, store: KnowledgeStore, llm: TextGenerator) -> None:
        self._store = store
        self._llm = llm

    async def respond(self, text: str, lang: str = "zh-TW") -> str:
        """Answer *text* in *lang* from the current knowledge snapshot.

        Inference failures are absorbed into a localized apology.
        """
        parts = PromptParts.from_snapshot(self._store.snapshot(), text, lang)
        try:
            return await self._llm.generate(build_prompt(parts), RESPONSE_MAX_TOKENS)
        except InferenceError as exc:
            logger.error(f"AI response error: {exc}")
            return apology_for(lang)
