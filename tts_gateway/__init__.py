from __future__ import annotations  # Re-export tts_gateway public API

from .tts_gateway import SpeechClient, SpeechSynthesizer, TtsGatewayError

__all__ = ["SpeechClient", "SpeechSynthesizer", "TtsGatewayError"]
