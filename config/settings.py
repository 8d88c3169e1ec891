"""Application settings and configuration management."""
from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or defaults."""

    GEMINI_API_KEY: str = ""
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_MODEL: str = "gemini-2.5-flash"
    GEMINI_TEMPERATURE: float = Field(default=0.7, ge=0.0, le=2.0)
    GEMINI_MAX_RETRIES: int = Field(default=3, ge=1)
    GEMINI_MAX_OUTPUT_TOKENS: int = Field(default=1024, ge=1)
    GEMINI_TIMEOUT_S: float = Field(default=30.0, ge=0.1)

    ELEVENLABS_API_KEY: str = ""
    ELEVENLABS_BASE_URL: str = "https://api.elevenlabs.io/v1"
    ELEVENLABS_VOICE_ID: str = ""
    ELEVENLABS_MODEL_ID: str = "eleven_multilingual_v2"
    ELEVENLABS_STABILITY: float = Field(default=0.5, ge=0.0, le=1.0)
    ELEVENLABS_SIMILARITY_BOOST: float = Field(default=0.75, ge=0.0, le=1.0)
    ELEVENLABS_MAX_RETRIES: int = Field(default=3, ge=1)
    ELEVENLABS_TIMEOUT_S: float = Field(default=30.0, ge=0.1)

    # Exponential backoff shared by both backends (seconds)
    RETRY_BASE_DELAY: float = Field(default=1.0, ge=0.0)
    RETRY_MAX_DELAY: float = Field(default=10.0, ge=0.0)

    SESSION_STORE: Literal["memory", "kv"] = "memory"
    KV_REST_API_URL: str = ""
    KV_REST_API_TOKEN: str = ""
    KV_TIMEOUT_S: float = Field(default=10.0, ge=0.1)
    SESSION_TTL_SECONDS: int = Field(default=86400, ge=60)

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", validate_assignment=True)


settings = Settings()
