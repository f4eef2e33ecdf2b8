#!/usr/bin/env python3
"""
AI Research Agent - ask a local Ollama model, grounded on a DuckDuckGo search.

    research-agent "What are the latest developments in Rust async?"
    research-agent --quick "Explain ownership in Rust"
    research-agent --search-only "Rust web frameworks"
    research-agent --model qwen2.5 --interactive

Prerequisites: install Ollama (https://ollama.ai), pull a model
(`ollama pull llama3.2`) and start it (`ollama serve`).
"""

import argparse
import logging
import sys

from research_agent.agent.graph import ResearchAgent
from research_agent.agent.llm import OllamaClient
from research_agent.agent.tools import WebSearchTool, format_results
from research_agent.cli.output import format_answer, format_error, research_block
from research_agent.cli.session import InteractiveSession
from research_agent.core.config import LogLevel, Settings, load_settings
from research_agent.core.errors import ConfigInvalid, InferenceError, SearchError

logger = logging.getLogger(__name__)

__version__ = "0.1.0"

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="research-agent",
        description="An AI-powered research assistant that searches the web and summarizes findings.",
    )
    parser.add_argument("query", nargs="?", metavar="QUERY", help="The topic or question to research.")
    parser.add_argument("-i", "--interactive", action="store_true", help="Enter interactive REPL mode.")
    parser.add_argument("-q", "--quick", action="store_true", help="Skip web search and ask the model directly.")
    parser.add_argument("-m", "--model", help="Ollama model to use (overrides OLLAMA_MODEL).")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose/debug logging.")
    parser.add_argument(
        "--search-only",
        action="store_true",
        help="Print web search results without asking the model (one-shot only; not with -i or -q).",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def configure_logging(level: LogLevel) -> None:
    logging.basicConfig(
        level=level.logging_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )
    # httpx logs every request at INFO
    noisy_level = logging.NOTSET if level is LogLevel.VERBOSE else logging.WARNING
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(noisy_level)


def build_agent(settings: Settings) -> ResearchAgent:
    llm = OllamaClient(settings)
    tools = [WebSearchTool(settings.max_search_results, timeout=settings.search_timeout)]
    return ResearchAgent(settings, llm, tools)


def run_once(agent: ResearchAgent, query: str, quick: bool = False, search_only: bool = False) -> int:
    """Answer a single query and print it. Returns the process exit code."""
    if search_only:
        try:
            results = agent.search_only(query)
        except SearchError as e:
            logger.error("[main:run_once] search failed: %s", e)
            print(format_error(e), file=sys.stderr)
            return EXIT_FAILURE
        print(research_block(format_results(query, results), title="SEARCH RESULTS"))
        return EXIT_OK

    try:
        answer = agent.research(query, quick=quick)
    except InferenceError as e:
        logger.error("[main:run_once] research failed: %s", e)
        print("\nResearch failed. " + format_error(e, agent.settings.model), file=sys.stderr)
        return EXIT_FAILURE
    print(research_block(format_answer(answer)))
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.search_only and args.interactive:
        parser.error("--search-only cannot be combined with --interactive")
    if args.search_only and args.quick:
        parser.error("--search-only cannot be combined with --quick")

    try:
        settings = load_settings().with_overrides(
            model=args.model,
            log_level=LogLevel.VERBOSE if args.verbose else None,
        )
    except ConfigInvalid as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_USAGE

    configure_logging(settings.log_level)
    logger.info("[main] AI Research Agent starting up model=%s host=%s", settings.model, settings.ollama_host)

    query = (args.query or "").strip()
    if not args.interactive and not query:
        print("Error: Please provide a query or use --interactive mode", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return EXIT_USAGE

    agent = build_agent(settings)
    try:
        if args.interactive:
            InteractiveSession(agent, quick=args.quick).run()
            return EXIT_OK
        return run_once(agent, query, quick=args.quick, search_only=args.search_only)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
