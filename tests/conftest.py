"""Shared fakes for tests: no network, no Ollama."""

import pytest

from research_agent.core.config import Settings
from research_agent.core.errors import SearchUnavailable
from research_agent.schemas.research import SearchResult


class FakeLLM:
    """Records prompts and returns canned answers (or raises a given error)."""

    def __init__(self, answers=None, error: Exception | None = None) -> None:
        self.answers = list(answers or ["fake answer"])
        self.error = error
        self.prompts: list[str] = []
        self.temperatures: list[float | None] = []

    def generate(self, prompt: str, temperature: float | None = None) -> str:
        self.prompts.append(prompt)
        self.temperatures.append(temperature)
        if self.error is not None:
            raise self.error
        if len(self.answers) > 1:
            return self.answers.pop(0)
        return self.answers[0]


class FakeTool:
    def __init__(self, results=None, name: str = "fake_search") -> None:
        self.name = name
        self.results = list(results or [])
        self.queries: list[str] = []

    def execute(self, query: str) -> list[SearchResult]:
        self.queries.append(query)
        return list(self.results)


class FailingTool:
    name = "failing_search"

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error or SearchUnavailable("connection refused")
        self.calls = 0

    def execute(self, query: str) -> list[SearchResult]:
        self.calls += 1
        raise self.error


class ForbiddenTool:
    name = "forbidden"

    def execute(self, query: str) -> list[SearchResult]:
        pytest.fail("tool must not be called in quick mode")


def make_results(n: int) -> list[SearchResult]:
    return [
        SearchResult(title=f"Title {i}", snippet=f"Snippet {i}", url=f"https://example.com/{i}")
        for i in range(1, n + 1)
    ]


@pytest.fixture
def settings() -> Settings:
    return Settings(max_search_results=3, temperature=0.2)
