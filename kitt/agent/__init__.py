"""Agent core: prompt assembly, grounded response generation, message pipeline."""

from kitt.agent.pipeline import MessagePipeline
from kitt.agent.prompt import PromptParts, build_prompt, language_directive
from kitt.agent.responder import ResponseGenerator

__all__ = ["MessagePipeline", "PromptParts", "ResponseGenerator", "build_prompt", "language_directive"]
