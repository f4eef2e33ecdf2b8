"""
Unit tests for the Ollama inference client using httpx.MockTransport.
"""

import json

import httpx
import pytest

from research_agent.agent.llm import OllamaClient
from research_agent.core.config import Settings
from research_agent.core.errors import InferenceParseFailure, InferenceUnavailable, ModelNotFound


def _client(handler, **settings) -> OllamaClient:
    return OllamaClient(Settings(**settings), transport=httpx.MockTransport(handler))


def test_generate_posts_model_prompt_and_temperature() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"model": "llama3.2", "response": "  Rust is a language.  ", "done": True})

    client = _client(handler, model="llama3.2", temperature=0.4)
    assert client.generate("What is Rust?") == "Rust is a language."
    assert seen["url"] == "http://localhost:11434/api/generate"
    assert seen["body"] == {
        "model": "llama3.2",
        "prompt": "What is Rust?",
        "stream": False,
        "options": {"temperature": 0.4},
    }


def test_explicit_temperature_wins() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"response": "ok"})

    _client(handler, temperature=0.9).generate("hi", temperature=0.0)
    assert seen["body"]["options"] == {"temperature": 0.0}


def test_temperature_out_of_range_rejected() -> None:
    client = _client(lambda request: httpx.Response(200, json={"response": "ok"}))
    with pytest.raises(ValueError):
        client.generate("hi", temperature=1.5)


def test_connection_refused_is_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(InferenceUnavailable):
        _client(handler).generate("hi")


def test_timeout_is_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(InferenceUnavailable):
        _client(handler).generate("hi")


def test_server_error_is_unavailable() -> None:
    client = _client(lambda request: httpx.Response(503, text="overloaded"))
    with pytest.raises(InferenceUnavailable) as exc_info:
        client.generate("hi")
    assert "503" in exc_info.value.message


def test_missing_model_is_model_not_found() -> None:
    client = _client(
        lambda request: httpx.Response(404, json={"error": "model 'nope' not found, try pulling it first"}),
        model="nope",
    )
    with pytest.raises(ModelNotFound) as exc_info:
        client.generate("hi")
    assert exc_info.value.model == "nope"


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="not json"),
        httpx.Response(200, json=["response"]),
        httpx.Response(200, json={"done": True}),
        httpx.Response(200, json={"response": None}),
    ],
)
def test_malformed_body_is_parse_failure(response: httpx.Response) -> None:
    client = _client(lambda request: response)
    with pytest.raises(InferenceParseFailure):
        client.generate("hi")
