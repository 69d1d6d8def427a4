"""Knowledge-update intent detection: keyword rules first, then the model.

The rule stage is a cheap, recall-oriented prefilter; only messages it flags
are sent to the model, which rejects rule hits that are really questions
("what's the progress?"). When the model call fails the rule hit stands.
"""

from __future__ import annotations

import re

from loguru import logger

from kitt.providers.ollama import InferenceError, TextGenerator

UPDATE_RULES: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("remember", re.compile(r"記得|記住|記錄|记得|记住|记录")),
    ("update", re.compile(r"更新|update", re.I)),
    ("add", re.compile(r"新增|加入|添加|add", re.I)),
    ("contacted", re.compile(r"邀請了|邀请了|contacted|聯繫了|联系了", re.I)),
    ("completed", re.compile(r"已經.*完成|已完成|已经.*完成")),
    ("status_changed", re.compile(r"狀態.*變成|改為|changed|状态.*变成|改为", re.I)),
    ("progress", re.compile(r"進度|进度|progress", re.I)),
    ("notify", re.compile(r"幫我.*通知|帮我.*通知")),
    ("todo", re.compile(r"待[辦办]|todo", re.I)),
)

CONFIRM_MAX_TOKENS = 10

_CONFIRM_PROMPT = """Classify this message. Is it a request to UPDATE, RECORD, or REMEMBER information (like contacts, status, progress, tasks)?

Message: "{text}"

Reply with ONLY one word:
- YES (if it's asking to record/update/remember something)
- NO (if it's just a question or general chat)

Answer:"""


def match_rule(text: str) -> str | None:
    """Name of the first update rule matching *text*, or ``None``."""
    for name, pattern in UPDATE_RULES:
        if pattern.search(text):
            return name
    return None


class IntentEngine:
    """Decides whether a message asks to update/record knowledge."""

    def __init__(self, llm: TextGenerator) -> None:
        self._llm = llm

    async def is_knowledge_update(self, text: str) -> bool:
        rule = match_rule(text)
        if rule is None:
            logger.debug("Rule-based: NOT a knowledge update")
            return False

        logger.debug(f"Rule-based: POSSIBLE knowledge update ({rule}), confirming with LLM...")
        return await self._confirm(text)

    async def _confirm(self, text: str) -> bool:
        try:
            reply = await self._llm.generate(_CONFIRM_PROMPT.format(text=text), CONFIRM_MAX_TOKENS)
        except InferenceError as exc:
            # fail open: the rule stage already flagged it
            logger.error(f"LLM intent detection failed: {exc}")
            return True
        answer = reply.strip().upper()
        logger.debug(f"LLM intent detection result: {answer!r}")
        return "YES" in answer
