from __future__ import annotations  # Speech-synthesis gateway module

import base64
import logging
from typing import Any, Callable, Dict, Optional, Protocol

from config.routes import SpeechRoute
from llm_gateway.llm_gateway import HttpClient, _close_safely, _post, _preview
from services.errors import UpstreamTransportError
from services.retry import call_with_retries


logger = logging.getLogger(__name__)


class TtsGatewayError(UpstreamTransportError):  # Speech backend failure
    pass


class SpeechSynthesizer(Protocol):  # Anything that turns text into base64 audio
    def synthesize(self, text: str, voice_id: Optional[str] = None) -> str: ...


class SpeechClient:  # Turns interviewer text into base64-encoded audio
    def __init__(
        self,
        route: SpeechRoute,
        *,
        client: Optional[HttpClient] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        self._route = route
        self._client = client
        self._sleep = sleep

    def synthesize(self, text: str, voice_id: Optional[str] = None) -> str:  # Return base64 audio or raise TtsGatewayError
        voice = voice_id or self._route.voice_id
        if not self._route.api_key or not voice:
            raise TtsGatewayError("Speech synthesis is not configured", {"route": self._route.name})
        if not text.strip():
            raise TtsGatewayError("Nothing to synthesize")
        audio = call_with_retries(
            lambda: self._attempt(text, voice),
            attempts=self._route.retry.max_attempts,
            base_delay=self._route.retry.base_delay_s,
            max_delay=self._route.retry.max_delay_s,
            retry_on=(TtsGatewayError,),
            label=f"TTS route={self._route.name}",
            sleep=self._sleep,
        )
        logger.info("TTS done route=%s voice=%s bytes=%d", self._route.name, voice, len(audio))
        return base64.b64encode(audio).decode("ascii")

    def _attempt(self, text: str, voice: str) -> bytes:
        cfg = self._route
        url = f"{cfg.base_url}/text-to-speech/{voice}"
        payload: Dict[str, Any] = {
            "text": text,
            "model_id": cfg.model_id,
            "voice_settings": {
                "stability": cfg.stability,
                "similarity_boost": cfg.similarity_boost,
                "style": 0.0,
                "use_speaker_boost": True,
                "speed": 1.0,
            },
        }
        headers = {"Content-Type": "application/json", "xi-api-key": cfg.api_key}
        try:
            response, close_cb = _post(url, payload, headers, cfg.timeout_s, self._client)
        except Exception as exc:  # noqa: BLE001
            logger.error("TTS transport failure: %s", exc)
            raise TtsGatewayError("TTS transport failed", {"error": str(exc)}) from exc
        try:
            if response.status_code >= 400:
                logger.error("TTS error status: %s", response.status_code)
                raise TtsGatewayError(
                    f"TTS returned status {response.status_code}",
                    {"status": response.status_code, "body": _preview(response.text)},
                )
            audio = response.content
        finally:
            _close_safely(close_cb)
        if not audio:
            raise TtsGatewayError("TTS returned empty audio")
        return audio


__all__ = ["SpeechClient", "SpeechSynthesizer", "TtsGatewayError"]
