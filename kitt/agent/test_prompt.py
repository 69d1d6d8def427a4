from types import MappingProxyType

import pytest

from kitt.agent.prompt import CLOSING_INSTRUCTION, LANGUAGE_DIRECTIVES, PromptParts, build_prompt, language_directive
from kitt.knowledge.store import KnowledgeSnapshot


def _snapshot(**sections: str) -> KnowledgeSnapshot:
    base = {name: "" for name in ("product", "customers", "roadmap", "priorities", "resources", "pmMemory")}
    base.update(sections)
    return KnowledgeSnapshot(sections=MappingProxyType(base))


@pytest.mark.parametrize("lang", sorted(LANGUAGE_DIRECTIVES))
def test_supported_languages_get_their_directive(lang: str) -> None:
    prompt = build_prompt(PromptParts.from_snapshot(_snapshot(), "hi", lang))

    assert f"{LANGUAGE_DIRECTIVES[lang]}." in prompt


@pytest.mark.parametrize("lang", ["fr", "de", "es", "xx", ""])
def test_unlisted_languages_default_to_traditional_chinese(lang: str) -> None:
    assert language_directive(lang) == "請用繁體中文回答"


def test_product_excerpt_is_truncated_to_2000_chars() -> None:
    product = "甲" * 2000 + "乙" * 1000

    parts = PromptParts.from_snapshot(_snapshot(product=product), "hi", "en")
    prompt = build_prompt(parts)

    assert parts.excerpts[0] == ("Product Overview", "甲" * 2000)
    assert "甲" * 2000 in prompt
    assert "乙" not in prompt


def test_other_excerpts_are_truncated_to_1500_chars() -> None:
    long_text = "x" * 1600
    parts = PromptParts.from_snapshot(
        _snapshot(priorities=long_text, customers=long_text, pmMemory=long_text, roadmap=long_text),
        "hi",
        "en",
    )

    assert [heading for heading, _ in parts.excerpts] == [
        "Product Overview", "Current Priorities", "Customer Status", "PM Memory",
    ]
    assert [len(text) for _, text in parts.excerpts[1:]] == [1500, 1500, 1500]


def test_build_prompt_layout() -> None:
    parts = PromptParts(
        persona="You are KITT.",
        directive="Please respond in English",
        excerpts=(("Product Overview", "P"), ("PM Memory", "M")),
        message="hi",
    )

    assert build_prompt(parts) == "\n".join([
        "You are KITT. Please respond in English.",
        "",
        "## Knowledge Base Context:",
        "",
        "### Product Overview:",
        "P",
        "",
        "### PM Memory:",
        "M",
        "",
        "---",
        "",
        "User message: hi",
        "",
        CLOSING_INSTRUCTION,
    ])
