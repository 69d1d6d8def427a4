import asyncio

import pytest

from kitt.nl.language import LanguageDetector, LanguageTag, extract_language_code, guess_script_language
from kitt.providers.ollama import InferenceError


class _StubLLM:
    def __init__(self, reply: str | Exception) -> None:
        self.reply = reply
        self.calls: list[tuple[str, int]] = []

    async def generate(self, prompt: str, max_tokens: int = 300) -> str:
        self.calls.append((prompt, max_tokens))
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply


def _detect(reply: str | Exception, text: str) -> LanguageTag:
    return asyncio.run(LanguageDetector(_StubLLM(reply)).detect(text))


def test_code_is_extracted_from_chatty_reply() -> None:
    llm = _StubLLM("the language is ZH-CN probably")

    tag = asyncio.run(LanguageDetector(llm).detect("这个怎么用"))

    assert tag is LanguageTag.ZH_CN
    assert str(tag) == "zh-CN"
    assert llm.calls[0][1] == 20
    assert "这个怎么用" in llm.calls[0][0]


@pytest.mark.parametrize(
    ("reply", "expected"),
    [
        ("zh-TW", LanguageTag.ZH_TW),
        ("  JA\n", LanguageTag.JA),
        ("ko", LanguageTag.KO),
        ("Code: de", LanguageTag.DE),
    ],
)
def test_extract_language_code(reply: str, expected: LanguageTag) -> None:
    assert extract_language_code(reply) is expected


def test_unrecognised_reply_returns_none() -> None:
    assert extract_language_code("???") is None


def test_model_failure_with_simplified_only_text_is_zh_cn() -> None:
    assert _detect(InferenceError("down", status=500), "这个会议时间") is LanguageTag.ZH_CN


def test_model_failure_with_traditional_only_text_is_zh_tw() -> None:
    assert _detect(InferenceError("down"), "這個會議時間") is LanguageTag.ZH_TW


def test_model_failure_with_no_variant_markers_defaults_to_zh_tw() -> None:
    assert _detect(InferenceError("down"), "明天下午三點") is LanguageTag.ZH_TW


def test_mixed_variant_markers_default_to_zh_tw() -> None:
    assert guess_script_language("这個") is LanguageTag.ZH_TW


def test_malformed_reply_without_han_defaults_to_english() -> None:
    assert _detect("???", "Bonjour tout le monde") is LanguageTag.EN


def test_language_tag_chinese_flag() -> None:
    assert LanguageTag.ZH_CN.is_chinese
    assert LanguageTag.ZH_TW.is_chinese
    assert not LanguageTag.JA.is_chinese
