"""
LangGraph agent: (search →) build prompt → generate.

Quick mode enters at build_prompt and never touches a tool. Search failures
are absorbed and the answer degrades to no web context; inference failures
propagate to the caller.
"""

import logging
from collections.abc import Sequence
from typing import Literal, Protocol, TypedDict

from langgraph.graph import END, START, StateGraph

from research_agent.agent.tools import Tool
from research_agent.core.config import Settings
from research_agent.core.errors import SearchError
from research_agent.schemas.research import ConversationTurn, ResearchAnswer, Role, SearchResult

logger = logging.getLogger(__name__)

SYSTEM_PREAMBLE = """You are an AI research assistant. You help users by summarizing findings from web searches and your own knowledge.

RULES:
1. Answer the current question directly and completely.
2. When web search results are provided, base your answer on them and cite the URLs you used.
3. When no search results are provided, answer from your own knowledge and say so if you are unsure.
4. Use the conversation history to resolve references like "it" or "that"."""

NO_HISTORY = "No previous conversation."


class TextGenerator(Protocol):
    def generate(self, prompt: str, temperature: float | None = None) -> str: ...


class ResearchState(TypedDict):
    query: str
    history: tuple
    quick: bool
    results: list
    search_failed: bool
    prompt: str
    answer: str


def format_history(history: Sequence[ConversationTurn]) -> str:
    """Serialize turns in chronological order, one 'User:'/'Assistant:' line each."""
    lines = []
    for turn in history:
        label = "User" if turn.role == Role.USER else "Assistant"
        lines.append(f"{label}: {turn.text.strip()}")
    return "\n".join(lines) if lines else NO_HISTORY


def format_search_context(results: Sequence[SearchResult]) -> str:
    blocks = []
    for i, r in enumerate(results, 1):
        blocks.append(f"[{i}] {r.title}\n{r.snippet}\nURL: {r.url}")
    return "\n\n".join(blocks)


def build_prompt(query: str, history: Sequence[ConversationTurn], results: Sequence[SearchResult]) -> str:
    """
    Assemble the final prompt: preamble, history, search results (if any), question.
    Pure function; the same inputs always give the same prompt.
    """
    sections = [SYSTEM_PREAMBLE, "Conversation history:\n" + format_history(history)]
    if results:
        sections.append("Web search results:\n" + format_search_context(results))
    sections.append("Question: " + query.strip())
    return "\n\n".join(sections) + "\n\nAnswer:"


class ResearchAgent:
    """Sequences the registered tools and the inference client into one answer."""

    def __init__(self, settings: Settings, llm: TextGenerator, tools: Sequence[Tool] = ()) -> None:
        self.settings = settings
        self.llm = llm
        self.tools = list(tools)
        self._graph = self._build_graph()

    # --- graph nodes ---

    def _search_node(self, state: ResearchState) -> dict:
        """Run every tool in registration order; absorb search errors."""
        query = state["query"]
        limit = self.settings.max_search_results
        results: list[SearchResult] = []
        failures = 0
        for tool in self.tools:
            if len(results) >= limit:
                break
            try:
                hits = tool.execute(query)
            except SearchError as e:
                failures += 1
                logger.warning("[graph:search] tool=%s failed, continuing without it: %s", tool.name, e)
                continue
            logger.info("[graph:search] tool=%s hits=%d", tool.name, len(hits))
            results.extend(hits)
        results = results[:limit]
        failed = bool(self.tools) and failures == len(self.tools)
        logger.info("[graph:search] OUT results=%d degraded=%s", len(results), failed)
        return {"results": results, "search_failed": failed}

    def _build_prompt_node(self, state: ResearchState) -> dict:
        prompt = build_prompt(state["query"], state["history"], state["results"])
        logger.debug("[graph:build_prompt] prompt_len=%d", len(prompt))
        return {"prompt": prompt}

    def _generate_node(self, state: ResearchState) -> dict:
        answer = self.llm.generate(state["prompt"], self.settings.temperature)
        logger.info("[graph:generate] OUT answer_len=%d", len(answer))
        return {"answer": answer}

    def _route_entry(self, state: ResearchState) -> Literal["search", "build_prompt"]:
        next_node = "build_prompt" if state["quick"] or not self.tools else "search"
        logger.debug("[graph:route_entry] quick=%s tools=%d -> %s", state["quick"], len(self.tools), next_node)
        return next_node

    def _build_graph(self):
        graph = StateGraph(ResearchState)

        graph.add_node("search", self._search_node)
        graph.add_node("build_prompt", self._build_prompt_node)
        graph.add_node("generate", self._generate_node)

        graph.add_conditional_edges(START, self._route_entry)
        graph.add_edge("search", "build_prompt")
        graph.add_edge("build_prompt", "generate")
        graph.add_edge("generate", END)

        return graph.compile()

    # --- public API ---

    def research(
        self,
        query: str,
        history: Sequence[ConversationTurn] = (),
        quick: bool = False,
    ) -> ResearchAnswer:
        """
        Answer query, optionally grounded on web search results.

        Raises ValueError for an empty query and any InferenceError from the
        model client. Search errors never escape.
        """
        if not query or not str(query).strip():
            raise ValueError("query is required")
        q = str(query).strip()
        logger.info("[research] START query=%r history_len=%d quick=%s", q, len(history), quick)
        initial: ResearchState = {
            "query": q,
            "history": tuple(history),
            "quick": quick,
            "results": [],
            "search_failed": False,
            "prompt": "",
            "answer": "",
        }
        final = self._graph.invoke(initial)
        sources = tuple(final.get("results") or ())
        answer = ResearchAnswer(
            text=(final.get("answer") or "").strip(),
            sources=sources,
            degraded=bool(final.get("search_failed")),
        )
        logger.info("[research] END sources=%d degraded=%s answer_len=%d", len(sources), answer.degraded, len(answer.text))
        return answer

    def search_only(self, query: str) -> list[SearchResult]:
        """Run the tools without inference. Search errors propagate."""
        q = (query or "").strip()
        if not q:
            raise ValueError("query is required")
        results: list[SearchResult] = []
        for tool in self.tools:
            results.extend(tool.execute(q))
        return results[: self.settings.max_search_results]
