import json
import logging

import pytest

from config.routes import GenerationRoute, RetryPolicy
from fakes import FakeHttpClient, FakeResponse, gemini_payload
from llm_gateway import GenerationClient, LlmGatewayError, extract_json
from llm_gateway.llm_gateway import JSON_INSTRUCTION


def _route(attempts: int = 3) -> GenerationRoute:
    return GenerationRoute(
        base_url="http://gemini.test/v1beta",
        model="test-model",
        api_key="k-123",
        temperature=0.3,
        max_output_tokens=256,
        timeout_s=1.0,
        retry=RetryPolicy(max_attempts=attempts, base_delay_s=1.0, max_delay_s=10.0),
    )


def test_generate_sends_prompt_and_generation_config(no_sleep) -> None:
    delays, sleep = no_sleep
    http = FakeHttpClient([FakeResponse(200, gemini_payload("  What is a B-tree?  "))])
    client = GenerationClient(_route(), client=http, sleep=sleep)

    assert client.generate("Ask something") == "What is a B-tree?"

    request = http.requests[0]
    assert request["url"] == "http://gemini.test/v1beta/models/test-model:generateContent"
    assert request["headers"]["x-goog-api-key"] == "k-123"
    assert request["json"]["contents"][0]["parts"][0]["text"] == "Ask something"
    assert request["json"]["generationConfig"] == {"temperature": 0.3, "maxOutputTokens": 256}
    assert delays == []


def test_retries_transport_failures_then_succeeds(no_sleep) -> None:
    delays, sleep = no_sleep
    http = FakeHttpClient(
        [
            ConnectionError("reset"),
            FakeResponse(503, text="unavailable"),
            FakeResponse(200, gemini_payload("ok")),
        ]
    )
    client = GenerationClient(_route(attempts=3), client=http, sleep=sleep)

    assert client.generate("p") == "ok"
    assert len(http.requests) == 3
    assert delays == [1.0, 2.0]


def test_exhausted_retries_raise_last_error(no_sleep) -> None:
    delays, sleep = no_sleep
    http = FakeHttpClient(
        [
            FakeResponse(500, text="boom"),
            FakeResponse(502, text="boom"),
            FakeResponse(429, text="slow down"),
        ]
    )
    client = GenerationClient(_route(attempts=3), client=http, sleep=sleep)

    with pytest.raises(LlmGatewayError) as excinfo:
        client.generate("p")
    assert "429" in str(excinfo.value)
    assert len(http.requests) == 3
    assert delays == [1.0, 2.0]


def test_missing_candidates_is_retried(no_sleep) -> None:
    _, sleep = no_sleep
    http = FakeHttpClient([FakeResponse(200, {"candidates": []}), FakeResponse(200, {"text": "fallback"})])
    client = GenerationClient(_route(), client=http, sleep=sleep)
    assert client.generate("p") == "fallback"


def test_require_json_appends_instruction_once_and_extracts(no_sleep) -> None:
    _, sleep = no_sleep
    body = 'Sure! Here it is: {"score": 7} hope that helps'
    http = FakeHttpClient([FakeResponse(500, text="x"), FakeResponse(200, gemini_payload(body))])
    client = GenerationClient(_route(), client=http, sleep=sleep)

    assert client.generate("Evaluate", require_json=True) == '{"score": 7}'
    for request in http.requests:
        sent = request["json"]["contents"][0]["parts"][0]["text"]
        assert sent.count(JSON_INSTRUCTION) == 1


def test_truncation_is_warned_but_not_fatal(no_sleep, caplog) -> None:
    _, sleep = no_sleep
    http = FakeHttpClient([FakeResponse(200, gemini_payload('{"score": 5', finish_reason="MAX_TOKENS"))])
    client = GenerationClient(_route(), client=http, sleep=sleep)

    with caplog.at_level(logging.WARNING, logger="llm_gateway.llm_gateway"):
        text = client.generate("p", require_json=True)
    assert text == '{"score": 5'
    assert any("truncated" in record.getMessage() for record in caplog.records)


def test_extract_json_from_code_fence() -> None:
    fenced = '```json\n{"score": 6, "followup_intent": "clarify"}\n```'
    assert json.loads(extract_json(fenced)) == {"score": 6, "followup_intent": "clarify"}


def test_extract_json_from_surrounding_prose() -> None:
    text = 'The evaluation follows. {"score": 3, "strengths": []} Thanks.'
    assert json.loads(extract_json(text)) == {"score": 3, "strengths": []}


def test_extract_json_returns_raw_text_when_nothing_parses() -> None:
    text = "I cannot evaluate this answer."
    assert extract_json(text) == text
    broken = '{"score": 4, "strengths": ['
    assert extract_json(broken) == broken


def test_extract_json_stops_at_first_balanced_object() -> None:
    text = 'Here you go: {"score": 7, "strengths": []} (scores use the {0-10} scale)'
    assert json.loads(extract_json(text)) == {"score": 7, "strengths": []}


def test_extract_json_ignores_braces_inside_strings_and_leading_noise() -> None:
    text = 'Note {not json}. Result: {"notes": "uses {curly} braces", "score": 2} and {another}'
    assert json.loads(extract_json(text)) == {"notes": "uses {curly} braces", "score": 2}
