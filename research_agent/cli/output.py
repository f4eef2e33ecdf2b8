"""Terminal rendering: banners, answers with sources, and error tips."""

from research_agent.core.errors import InferenceUnavailable, ModelNotFound, ResearchAgentError
from research_agent.schemas.research import ResearchAnswer

RULE = "=" * 60


def format_sources(answer: ResearchAnswer) -> str:
    if not answer.sources:
        return ""
    lines = ["Sources:"]
    for i, r in enumerate(answer.sources, 1):
        lines.append(f"  {i}. {r.title or r.url}")
        lines.append(f"     {r.url}")
    return "\n".join(lines)


def format_answer(answer: ResearchAnswer) -> str:
    """Answer text followed by the numbered source list (if any)."""
    parts = [answer.text or "(no answer generated)"]
    if answer.degraded:
        parts.append("(web search was unavailable; answered without search results)")
    sources = format_sources(answer)
    if sources:
        parts.append(sources)
    return "\n\n".join(parts)


def interactive_banner() -> str:
    return "\n".join(
        [
            "",
            RULE,
            "AI Research Agent - Interactive Mode",
            RULE,
            "Type your question and press Enter.",
            "Commands: 'clear' to clear history, 'quit' or 'exit' to quit.",
            RULE,
            "",
        ]
    )


def research_block(body: str, title: str = "RESEARCH RESULTS") -> str:
    return f"\n{RULE}\n{title}\n{RULE}\n\n{body}\n\n{RULE}"


def error_tip(exc: BaseException, model: str | None = None) -> str | None:
    """Hint for the user on how to fix a failed query, or None."""
    if isinstance(exc, ModelNotFound):
        return f"Tip: Make sure the model is installed (ollama pull {exc.model or model})"
    if isinstance(exc, InferenceUnavailable):
        return "Tip: Make sure Ollama is running (ollama serve)"
    return None


def format_error(exc: BaseException, model: str | None = None) -> str:
    message = exc.message if isinstance(exc, ResearchAgentError) else str(exc)
    out = f"Error: {message}"
    tip = error_tip(exc, model)
    if tip:
        out += "\n" + tip
    return out
