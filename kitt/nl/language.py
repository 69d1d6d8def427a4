"""Language detection: ask the model, fall back to a script heuristic.

The model separates real languages well but is unreliable at telling
Simplified from Traditional Chinese, which the character-set check handles.
"""

from __future__ import annotations

import re
from enum import Enum

from loguru import logger

from kitt.providers.ollama import InferenceError, TextGenerator


class LanguageTag(str, Enum):
    ZH_TW = "zh-TW"
    ZH_CN = "zh-CN"
    EN = "en"
    JA = "ja"
    KO = "ko"
    ES = "es"
    FR = "fr"
    DE = "de"

    def __str__(self) -> str:
        return self.value

    @property
    def is_chinese(self) -> bool:
        return self.value.startswith("zh")


# Scan order matters: the first code found in the reply wins.
_CODE_ORDER: tuple[LanguageTag, ...] = (
    LanguageTag.ZH_TW,
    LanguageTag.ZH_CN,
    LanguageTag.EN,
    LanguageTag.JA,
    LanguageTag.KO,
    LanguageTag.ES,
    LanguageTag.FR,
    LanguageTag.DE,
)

_HAN = re.compile(r"[\u4e00-\u9fff]")
_SIMPLIFIED_ONLY = frozenset("这个们会说对没关机开时为么让给从远进还边")
_TRADITIONAL_ONLY = frozenset("這個們會說對沒關機開時為麼讓給從遠進還邊")

DETECT_MAX_TOKENS = 20

_DETECT_PROMPT = """What language is this text? Reply with ONLY ONE of these codes: zh-TW, zh-CN, en, ja, ko, es, fr, de

Text: "{text}"

ONE CODE ONLY:"""


def extract_language_code(reply: str) -> LanguageTag | None:
    """Return the first known code contained in a model *reply*, if any."""
    cleaned = reply.strip().lower()
    for tag in _CODE_ORDER:
        if tag.value.lower() in cleaned:
            return tag
    return None


def guess_script_language(text: str) -> LanguageTag:
    """Deterministic fallback based on the Han characters in *text*.

    Simplified wins only when Simplified-only characters appear and no
    Traditional-only ones do; other Chinese text defaults to Traditional.
    Text without Han characters is treated as English.
    """
    if not _HAN.search(text):
        return LanguageTag.EN
    chars = set(text)
    if chars & _SIMPLIFIED_ONLY and not chars & _TRADITIONAL_ONLY:
        return LanguageTag.ZH_CN
    return LanguageTag.ZH_TW


class LanguageDetector:
    def __init__(self, llm: TextGenerator) -> None:
        self._llm = llm

    async def detect(self, text: str) -> LanguageTag:
        try:
            reply = await self._llm.generate(_DETECT_PROMPT.format(text=text), DETECT_MAX_TOKENS)
        except InferenceError as exc:
            logger.error(f"Language detection error: {exc}")
        else:
            tag = extract_language_code(reply)
            if tag is not None:
                return tag
            logger.debug(f"No language code in model reply {reply!r}, using script heuristic")
        return guess_script_language(text)
