from __future__ import annotations  # Re-export llm_gateway public API

from .llm_gateway import GenerationClient, HttpClient, HttpResponse, LlmGatewayError, TextGenerator, extract_json

__all__ = ["GenerationClient", "HttpClient", "HttpResponse", "LlmGatewayError", "TextGenerator", "extract_json"]
