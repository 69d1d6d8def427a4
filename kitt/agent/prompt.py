"""Grounded prompt assembly.

``build_prompt`` is a pure function of :class:`PromptParts`; nothing here
touches the knowledge store or the network.
"""

from __future__ import annotations

from dataclasses import dataclass

from kitt.knowledge.store import KnowledgeSnapshot

PERSONA = "You are KITT, an AI assistant for IrisGo team."

LANGUAGE_DIRECTIVES: dict[str, str] = {
    "zh-TW": "請用繁體中文回答",
    "zh-CN": "请用简体中文回答",
    "en": "Please respond in English",
    "ja": "日本語で回答してください",
    "ko": "한국어로 응답해 주세요",
}
DEFAULT_LANGUAGE = "zh-TW"

# (section, heading, max chars)
EXCERPTS: tuple[tuple[str, str, int], ...] = (
    ("product", "Product Overview", 2000),
    ("priorities", "Current Priorities", 1500),
    ("customers", "Customer Status", 1500),
    ("pmMemory", "PM Memory", 1500),
)

CLOSING_INSTRUCTION = (
    "Provide a helpful, concise response based on the knowledge base. "
    "If the information is not in the knowledge base, say so honestly."
)


def language_directive(lang: str) -> str:
    """Reply-language instruction for *lang*; unknown tags get Traditional Chinese."""
    return LANGUAGE_DIRECTIVES.get(str(lang), LANGUAGE_DIRECTIVES[DEFAULT_LANGUAGE])


@dataclass(frozen=True, slots=True)
class PromptParts:
    persona: str
    directive: str
    excerpts: tuple[tuple[str, str], ...]  # (heading, text)
    message: str

    @classmethod
    def from_snapshot(cls, snapshot: KnowledgeSnapshot, message: str, lang: str) -> PromptParts:
        return cls(
            persona=PERSONA,
            directive=language_directive(lang),
            excerpts=tuple(
                (heading, snapshot.get(section)[:limit]) for section, heading, limit in EXCERPTS
            ),
            message=message,
        )


def build_prompt(parts: PromptParts) -> str:
    lines = [f"{parts.persona} {parts.directive}.", "", "## Knowledge Base Context:", ""]
    for heading, text in parts.excerpts:
        lines += [f"### {heading}:", text, ""]
    lines += ["---", "", f"User message: {parts.message}", "", CLOSING_INSTRUCTION]
    return "\n".join(lines)
