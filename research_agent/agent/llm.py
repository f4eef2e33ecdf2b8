"""
Inference client for a local Ollama server.

One blocking POST to /api/generate per call; the full response is returned
as a single string. Stateless, no retries.
"""

import logging
from typing import Any

import httpx

from research_agent.core.config import Settings
from research_agent.core.errors import InferenceParseFailure, InferenceUnavailable, ModelNotFound

logger = logging.getLogger(__name__)

GENERATE_PATH = "/api/generate"


class OllamaClient:
    """Calls the Ollama generate endpoint with the configured model."""

    def __init__(self, settings: Settings, transport: httpx.BaseTransport | None = None) -> None:
        self.settings = settings
        # transport is for tests (httpx.MockTransport); None uses the network
        self._transport = transport

    @property
    def model(self) -> str:
        return self.settings.model

    def generate(self, prompt: str, temperature: float | None = None) -> str:
        """
        Send prompt to the model and return the generated text.

        Raises InferenceUnavailable, ModelNotFound or InferenceParseFailure.
        """
        temp = self.settings.temperature if temperature is None else temperature
        if not 0.0 <= temp <= 1.0:
            raise ValueError(f"temperature must be within [0.0, 1.0], got {temp}")
        payload: dict[str, Any] = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": {"temperature": temp},
        }
        url = self.settings.ollama_host + GENERATE_PATH
        logger.info("[llm:generate] IN  model=%s prompt_len=%d temperature=%.2f", self.model, len(prompt), temp)
        logger.debug("[llm:generate] prompt_sample=%r", prompt[:500])
        try:
            with httpx.Client(timeout=self.settings.llm_timeout, transport=self._transport) as client:
                response = client.post(url, json=payload)
        except httpx.TimeoutException as e:
            raise InferenceUnavailable(f"Ollama at {self.settings.ollama_host} timed out: {e}") from e
        except httpx.TransportError as e:
            raise InferenceUnavailable(f"Can't connect to Ollama at {self.settings.ollama_host}: {e}") from e

        if response.status_code != 200:
            self._raise_for_status(response)

        try:
            data = response.json()
        except ValueError as e:
            raise InferenceParseFailure(f"Ollama returned a non-JSON body: {response.text[:200]!r}") from e
        if not isinstance(data, dict) or not isinstance(data.get("response"), str):
            raise InferenceParseFailure(f"Ollama response has no generated text: {str(data)[:200]!r}")

        out = data["response"].strip()
        logger.info("[llm:generate] OUT response_len=%d", len(out))
        logger.debug("[llm:generate] OUT response_full=%r", out)
        return out

    def _raise_for_status(self, response: httpx.Response) -> None:
        detail = _error_detail(response)
        logger.warning("[llm:generate] Ollama error %s: %s", response.status_code, detail[:200])
        if response.status_code == 404 or "not found" in detail.lower():
            raise ModelNotFound(self.model, f"model {self.model!r} not found on {self.settings.ollama_host}: {detail}")
        raise InferenceUnavailable(f"Ollama returned HTTP {response.status_code}: {detail}")


def _error_detail(response: httpx.Response) -> str:
    """Pull Ollama's {"error": "..."} message out of a failed response."""
    try:
        data = response.json()
    except ValueError:
        return response.text.strip()
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return response.text.strip()
