"""Configuration package for the interview service."""
from .routes import GenerationRoute, RetryPolicy, SpeechRoute, generation_route, speech_route
from .settings import Settings, settings

__all__ = [
    "GenerationRoute",
    "RetryPolicy",
    "SpeechRoute",
    "generation_route",
    "speech_route",
    "Settings",
    "settings",
]
