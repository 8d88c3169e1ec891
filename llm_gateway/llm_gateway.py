from __future__ import annotations  # Text-generation gateway module

import json
import logging
import re
from typing import Any, Callable, Dict, Optional, Protocol, Tuple

import httpx

from config.routes import GenerationRoute
from services.errors import UpstreamTransportError
from services.retry import call_with_retries


logger = logging.getLogger(__name__)  # Module logger setup

JSON_INSTRUCTION = (
    "IMPORTANT: Respond with valid JSON only. Do not include any markdown formatting, "
    "code blocks, or additional text outside the JSON."
)

_DECODER = json.JSONDecoder()
_FENCE_OPEN = re.compile(r"```json\n?")
_FENCE_ANY = re.compile(r"```\n?")


class HttpResponse(Protocol):  # Minimal HTTP response protocol
    @property
    def status_code(self) -> int: ...

    def json(self) -> Any: ...

    @property
    def text(self) -> str: ...

    @property
    def content(self) -> bytes: ...


class HttpClient(Protocol):  # Minimal HTTP client protocol
    def post(self, url: str, *, json: Any, headers: Dict[str, str], timeout: float) -> HttpResponse: ...


class LlmGatewayError(UpstreamTransportError):  # Generation backend failure after retries
    pass


class TextGenerator(Protocol):  # Anything that turns a prompt into text
    def generate(self, prompt: str, require_json: bool = False) -> str: ...


class GenerationClient:  # Calls the configured generation backend with retries
    def __init__(
        self,
        route: GenerationRoute,
        *,
        client: Optional[HttpClient] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        self._route = route
        self._client = client
        self._sleep = sleep

    @property
    def route(self) -> GenerationRoute:
        return self._route

    def generate(self, prompt: str, require_json: bool = False) -> str:  # Generate text, optionally extracting JSON
        if require_json:
            prompt = f"{prompt}\n\n{JSON_INSTRUCTION}"
        logger.info(
            "LLM request start route=%s model=%s mode=%s chars=%d preview=%s",
            self._route.name,
            self._route.model,
            "json" if require_json else "text",
            len(prompt),
            _preview(prompt),
        )
        text = call_with_retries(
            lambda: self._attempt(prompt),
            attempts=self._route.retry.max_attempts,
            base_delay=self._route.retry.base_delay_s,
            max_delay=self._route.retry.max_delay_s,
            retry_on=(LlmGatewayError,),
            label=f"LLM route={self._route.name}",
            sleep=self._sleep,
        )
        if require_json:
            text = extract_json(text)
        logger.info("LLM request done route=%s chars=%d", self._route.name, len(text))
        return text

    def _attempt(self, prompt: str) -> str:  # Single HTTP round-trip
        cfg = self._route
        url = f"{cfg.base_url}/models/{cfg.model}:generateContent"
        payload: Dict[str, Any] = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": cfg.temperature,
                "maxOutputTokens": cfg.max_output_tokens,
            },
        }
        headers = {"Content-Type": "application/json", "x-goog-api-key": cfg.api_key}
        try:
            response, close_cb = _post(url, payload, headers, cfg.timeout_s, self._client)
        except Exception as exc:  # noqa: BLE001
            logger.error("LLM transport failure: %s", exc)
            raise LlmGatewayError("LLM transport failed", {"error": str(exc)}) from exc
        try:
            if response.status_code >= 400:
                logger.error("LLM error status: %s", response.status_code)
                raise LlmGatewayError(
                    f"LLM returned status {response.status_code}",
                    {"status": response.status_code, "body": _preview(response.text)},
                )
            try:
                data = response.json()
            except ValueError as exc:
                logger.error("Invalid JSON payload from LLM: %s", exc)
                raise LlmGatewayError("LLM payload was not JSON") from exc
        finally:
            _close_safely(close_cb)
        text, finish_reason = _extract_content(data)
        if finish_reason and finish_reason != "STOP":
            logger.warning("LLM response finished with reason=%s route=%s", finish_reason, cfg.name)
            if finish_reason == "MAX_TOKENS":
                logger.warning(
                    "LLM response was truncated; consider raising max_output_tokens (current=%d)",
                    cfg.max_output_tokens,
                )
        return text


def extract_json(text: str) -> str:  # Pull a single JSON object out of free-form model output
    start = text.find("{")
    while start != -1:
        try:
            _, end = _DECODER.raw_decode(text, start)
        except json.JSONDecodeError:
            start = text.find("{", start + 1)
            continue
        return text[start:end]
    stripped = _strip_code_fences(text)
    try:
        json.loads(stripped)
        return stripped
    except json.JSONDecodeError:
        pass
    return text


def _strip_code_fences(content: str) -> str:  # Remove common markdown fences from LLM output
    return _FENCE_ANY.sub("", _FENCE_OPEN.sub("", content)).strip()


def _post(
    url: str,
    payload: Any,
    headers: Dict[str, str],
    timeout: float,
    client: Optional[HttpClient],
) -> Tuple[HttpResponse, Optional[Callable[[], None]]]:  # Dispatch HTTP request
    if client is not None:
        return client.post(url, json=payload, headers=headers, timeout=timeout), None
    http_client = httpx.Client(timeout=timeout)
    try:
        response = http_client.post(url, json=payload, headers=headers)
    except Exception:
        http_client.close()
        raise
    return response, http_client.close


def _close_safely(close_cb: Optional[Callable[[], None]]) -> None:  # Close HTTP client callback when provided
    if close_cb is not None:
        close_cb()


def _preview(text: str, limit: int = 120) -> str:  # Build preview string for logging
    first = text.strip().splitlines()[0] if text.strip() else ""
    if len(first) > limit:
        return first[: limit - 3] + "..."
    return first


def _extract_content(data: Any) -> Tuple[str, Optional[str]]:  # Extract generated text and finish reason
    if isinstance(data, dict):
        candidates = data.get("candidates")
        if isinstance(candidates, list) and candidates and isinstance(candidates[0], dict):
            first = candidates[0]
            content = first.get("content") if isinstance(first.get("content"), dict) else {}
            parts = content.get("parts") if isinstance(content.get("parts"), list) else []
            texts = [part["text"] for part in parts if isinstance(part, dict) and isinstance(part.get("text"), str)]
            if texts:
                return "".join(texts).strip(), first.get("finishReason")
        if isinstance(data.get("text"), str):
            return data["text"].strip(), None
    raise LlmGatewayError("No candidates in LLM response")


__all__ = ["GenerationClient", "TextGenerator", "HttpClient", "HttpResponse", "LlmGatewayError", "JSON_INSTRUCTION", "extract_json"]
