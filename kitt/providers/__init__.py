"""Inference provider module."""

from kitt.providers.ollama import InferenceError, OllamaClient, TextGenerator

__all__ = ["InferenceError", "OllamaClient", "TextGenerator"]
