from __future__ import annotations  # Backend route models derived from settings

from pydantic import BaseModel, Field

from config.settings import Settings
from services.errors import ConfigurationError


class RetryPolicy(BaseModel):  # Attempt count and capped exponential backoff
    max_attempts: int = Field(default=3, ge=1)
    base_delay_s: float = Field(default=1.0, ge=0.0)
    max_delay_s: float = Field(default=10.0, ge=0.0)


class GenerationRoute(BaseModel):  # Text-generation endpoint configuration
    name: str = "gemini"
    base_url: str
    model: str
    api_key: str = ""
    temperature: float = 0.7
    max_output_tokens: int = Field(default=1024, ge=1)
    timeout_s: float = Field(default=30.0, ge=0.1)
    retry: RetryPolicy = Field(default_factory=RetryPolicy)


class SpeechRoute(BaseModel):  # Speech-synthesis endpoint configuration
    name: str = "elevenlabs"
    base_url: str
    voice_id: str = ""
    model_id: str = "eleven_multilingual_v2"
    api_key: str = ""
    stability: float = 0.5
    similarity_boost: float = 0.75
    timeout_s: float = Field(default=30.0, ge=0.1)
    retry: RetryPolicy = Field(default_factory=RetryPolicy)


def generation_route(cfg: Settings) -> GenerationRoute:  # Build the Gemini route, requiring an API key
    if not cfg.GEMINI_API_KEY:
        raise ConfigurationError("GEMINI_API_KEY is required")
    return GenerationRoute(
        base_url=cfg.GEMINI_BASE_URL.rstrip("/"),
        model=cfg.GEMINI_MODEL,
        api_key=cfg.GEMINI_API_KEY,
        temperature=cfg.GEMINI_TEMPERATURE,
        max_output_tokens=cfg.GEMINI_MAX_OUTPUT_TOKENS,
        timeout_s=cfg.GEMINI_TIMEOUT_S,
        retry=RetryPolicy(
            max_attempts=cfg.GEMINI_MAX_RETRIES,
            base_delay_s=cfg.RETRY_BASE_DELAY,
            max_delay_s=cfg.RETRY_MAX_DELAY,
        ),
    )


def speech_route(cfg: Settings) -> SpeechRoute:  # Build the ElevenLabs route; missing keys only disable audio
    return SpeechRoute(
        base_url=cfg.ELEVENLABS_BASE_URL.rstrip("/"),
        voice_id=cfg.ELEVENLABS_VOICE_ID,
        model_id=cfg.ELEVENLABS_MODEL_ID,
        api_key=cfg.ELEVENLABS_API_KEY,
        stability=cfg.ELEVENLABS_STABILITY,
        similarity_boost=cfg.ELEVENLABS_SIMILARITY_BOOST,
        timeout_s=cfg.ELEVENLABS_TIMEOUT_S,
        retry=RetryPolicy(
            max_attempts=cfg.ELEVENLABS_MAX_RETRIES,
            base_delay_s=cfg.RETRY_BASE_DELAY,
            max_delay_s=cfg.RETRY_MAX_DELAY,
        ),
    )


__all__ = ["RetryPolicy", "GenerationRoute", "SpeechRoute", "generation_route", "speech_route"]
