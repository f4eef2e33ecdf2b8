"""
Agent tools: capabilities the orchestrator can call before inference.

Tools: web_search (DuckDuckGo via ddgs). New tools implement the Tool protocol
and are registered on the ResearchAgent in the order they should run.
"""

import logging
import math
import time
from typing import Any, Protocol, runtime_checkable

from ddgs import DDGS
from ddgs.exceptions import DDGSException, RatelimitException, TimeoutException

from research_agent.core.errors import SearchParseFailure, SearchUnavailable
from research_agent.schemas.research import SearchResult

logger = logging.getLogger(__name__)


@runtime_checkable
class Tool(Protocol):
    """A capability with one operation: turn a query into search results."""

    name: str

    def execute(self, query: str) -> list[SearchResult]: ...


class WebSearchTool:
    """DuckDuckGo text search, truncated to max_results in provider order."""

    name = "web_search"

    def __init__(self, max_results: int, timeout: float = 10.0) -> None:
        if max_results < 1:
            raise ValueError("max_results must be >= 1")
        self.max_results = max_results
        self.timeout = timeout

    def execute(self, query: str) -> list[SearchResult]:
        """
        Run one search and return up to max_results hits.

        Raises SearchUnavailable on network/timeout/rate-limit failures and
        SearchParseFailure when the provider payload is malformed. A search
        with no hits returns [].
        """
        q = (query or "").strip()
        if not q:
            raise ValueError("query is required")
        logger.info("[tools:web_search] IN  query=%r max_results=%d", q, self.max_results)
        raw = self._fetch(q)
        results = _parse_hits(raw, self.max_results)
        logger.info("[tools:web_search] OUT results=%d urls=%s", len(results), [r.url for r in results])
        return results

    search = execute

    @property
    def ddgs_timeout(self) -> int:
        """Whole seconds handed to ddgs; never rounds down to 0."""
        return max(1, math.ceil(self.timeout))

    def _fetch(self, query: str) -> Any:
        started = time.monotonic()
        try:
            with DDGS(timeout=self.ddgs_timeout) as ddgs:
                return ddgs.text(query, max_results=self.max_results)
        except (TimeoutException, RatelimitException) as e:
            raise SearchUnavailable(f"Web search failed: {e}") from e
        except DDGSException as e:
            if "no results" not in str(e).lower():
                raise SearchUnavailable(f"Web search failed: {e}") from e
            # ddgs also reports engines that ran out of time as "no results"
            elapsed = time.monotonic() - started
            if elapsed >= self.ddgs_timeout:
                logger.warning("[tools:web_search] no results after %.1fs, treating as timeout", elapsed)
                raise SearchUnavailable(f"Web search timed out after {elapsed:.1f}s") from e
            logger.info("[tools:web_search] provider returned no results")
            return []
        except OSError as e:
            raise SearchUnavailable(f"Web search failed: {e}") from e


def _parse_hits(raw: Any, limit: int) -> list[SearchResult]:
    """Convert ddgs hit dicts ({title, href, body}) into SearchResult records."""
    if raw is None:
        return []
    if not isinstance(raw, (list, tuple)):
        raise SearchParseFailure(f"unexpected search payload type: {type(raw).__name__}")
    results: list[SearchResult] = []
    for hit in raw[:limit]:
        if not isinstance(hit, dict):
            raise SearchParseFailure(f"unexpected search hit: {hit!r}")
        url = (hit.get("href") or hit.get("url") or "").strip()
        if not url:
            raise SearchParseFailure(f"search hit without a URL: {hit!r}")
        results.append(
            SearchResult(
                title=(hit.get("title") or "").strip(),
                snippet=(hit.get("body") or "").strip(),
                url=url,
            )
        )
    return results


def format_results(query: str, results: list[SearchResult]) -> str:
    """Render hits as a numbered markdown list (search-only mode)."""
    if not results:
        return f"No results found for: {query}"
    lines = []
    for i, r in enumerate(results, 1):
        lines.append(f"{i}. **{r.title}**\n   {r.snippet}\n   URL: {r.url}\n")
    return "## Search Results\n\n" + "\n".join(lines)
