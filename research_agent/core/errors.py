"""
Application errors for clean CLI error handling.

Search errors are absorbed by the orchestrator (the answer degrades to no web
context). Inference errors reach the interactive session or one-shot runner,
which report them to the user. Nothing here is retried.
"""


class ResearchAgentError(Exception):
    """Base class for every error raised by the research agent."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigInvalid(ResearchAgentError):
    """Raised when an environment value cannot be parsed or is out of range."""


class SearchError(ResearchAgentError):
    """Raised when the web search tool cannot produce results."""


class SearchUnavailable(SearchError):
    """Search provider unreachable, timed out, or rate limited."""


class SearchParseFailure(SearchError):
    """Search provider answered with something we cannot turn into results."""


class InferenceError(ResearchAgentError):
    """Raised when the local model endpoint cannot produce an answer."""


class InferenceUnavailable(InferenceError):
    """Ollama endpoint unreachable, timed out, or failing with a server error."""


class ModelNotFound(InferenceError):
    """The requested model is not installed on the Ollama endpoint."""

    def __init__(self, model: str, message: str | None = None) -> None:
        self.model = model
        super().__init__(message or f"model {model!r} not found")


class InferenceParseFailure(InferenceError):
    """Ollama answered with a body that has no generated text."""
