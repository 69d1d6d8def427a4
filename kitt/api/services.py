"""Wiring of the long-lived collaborators shared by all requests."""

from __future__ import annotations

from dataclasses import dataclass

from kitt.agent.pipeline import MessagePipeline
from kitt.agent.responder import ResponseGenerator
from kitt.channels.line import LineClient
from kitt.knowledge.store import KnowledgeStore
from kitt.nl.intent_engine import IntentEngine
from kitt.nl.language import LanguageDetector
from kitt.providers.ollama import OllamaClient, TextGenerator
from kitt.settings import KittSettings


@dataclass
class Services:
    settings: KittSettings
    store: KnowledgeStore
    llm: OllamaClient
    pipeline: MessagePipeline
    line: LineClient

    async def aclose(self) -> None:
        await self.llm.aclose()
        await self.line.aclose()


def build_pipeline(store: KnowledgeStore, llm: TextGenerator) -> MessagePipeline:
    return MessagePipeline(
        detector=LanguageDetector(llm),
        intents=IntentEngine(llm),
        responder=ResponseGenerator(store, llm),
    )


def build_services(settings: KittSettings) -> Services:
    store = KnowledgeStore(settings.kb_path, suffix=settings.kb_suffix)
    llm = OllamaClient(settings=settings)
    return Services(
        settings=settings,
        store=store,
        llm=llm,
        pipeline=build_pipeline(store, llm),
        line=LineClient(settings=settings),
    )
