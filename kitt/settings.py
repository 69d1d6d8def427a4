"""Centralised settings for KITT, loaded from env / .env."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class KittSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="KITT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- general ---
    app_name: str = "KITT"
    debug: bool = False

    # --- HTTP ---
    host: str = "0.0.0.0"
    port: int = 3001

    # --- inference (Ollama) ---
    ollama_api: str = "http://localhost:11434/api/generate"
    ollama_model: str = "qwen3-vl:4b"
    inference_timeout: float | None = None  # no client-side timeout unless set

    # --- knowledge base ---
    kb_path: Path = Field(
        default_factory=lambda: Path.home() / "Dropbox" / "PKM-Vault" / "1-Projects" / "IrisGo" / "Product"
    )
    kb_suffix: str = ".md"

    # --- LINE Messaging API ---
    line_channel_access_token: str = ""
    line_channel_secret: str = ""
    line_api_base: str = "https://api.line.me"

    # --- request handling ---
    reply_timeout_seconds: float = 120.0


@lru_cache
def get_settings() -> KittSettings:
    return KittSettings()
