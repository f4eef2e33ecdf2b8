"""
Interactive session: read a line, dispatch it, answer, remember the exchange.

Reading → Dispatching → {Clearing, Exiting, Querying} → Reading. Exiting is terminal.
"""

import logging
import sys
from collections.abc import Callable
from enum import Enum
from typing import TextIO

from research_agent.agent.graph import ResearchAgent
from research_agent.cli.output import RULE, format_answer, format_error, interactive_banner
from research_agent.core.errors import InferenceError
from research_agent.core.session_store import ConversationHistory

logger = logging.getLogger(__name__)

PROMPT = "You: "
EXIT_COMMANDS = frozenset({"quit", "exit"})
CLEAR_COMMAND = "clear"


class SessionState(str, Enum):
    READING = "reading"
    DISPATCHING = "dispatching"
    CLEARING = "clearing"
    QUERYING = "querying"
    EXITING = "exiting"


class InteractiveSession:
    """REPL over a ResearchAgent with an in-memory ConversationHistory."""

    def __init__(
        self,
        agent: ResearchAgent,
        quick: bool = False,
        input_fn: Callable[[str], str] = input,
        out: TextIO | None = None,
        err: TextIO | None = None,
    ) -> None:
        self.agent = agent
        self.quick = quick
        self.history = ConversationHistory()
        self.state = SessionState.READING
        self._input = input_fn
        self._out = out or sys.stdout
        self._err = err or sys.stderr

    def _print(self, text: str = "") -> None:
        print(text, file=self._out, flush=True)

    def dispatch(self, line: str) -> SessionState:
        """Classify a raw input line into the state it leads to."""
        command = line.strip().lower()
        if command in EXIT_COMMANDS:
            return SessionState.EXITING
        if command == CLEAR_COMMAND:
            return SessionState.CLEARING
        if not command:
            return SessionState.READING
        return SessionState.QUERYING

    def handle(self, line: str) -> SessionState:
        """Process one input line; return the state the session ends up in."""
        self.state = SessionState.DISPATCHING
        target = self.dispatch(line)
        logger.debug("[session:handle] line_len=%d -> %s", len(line), target.value)

        if target is SessionState.EXITING:
            self._print("Goodbye!")
            self.state = SessionState.EXITING
            return self.state

        if target is SessionState.CLEARING:
            self.state = SessionState.CLEARING
            self.history.clear()
            self._print("Conversation history cleared.\n")
        elif target is SessionState.QUERYING:
            self.state = SessionState.QUERYING
            self._query(line.strip())

        self.state = SessionState.READING
        return self.state

    def _query(self, query: str) -> None:
        try:
            answer = self.agent.research(query, self.history.snapshot(), quick=self.quick)
        except InferenceError as e:
            logger.error("[session:query] inference failed: %s", e)
            print("\n" + format_error(e, self.agent.settings.model) + "\n", file=self._err, flush=True)
            return
        except KeyboardInterrupt:
            self._print("\nQuery cancelled.\n")
            return
        self._print(f"\n{RULE}\nAI:\n{format_answer(answer)}\n{RULE}\n")
        self.history.append_exchange(query, answer.text)

    def run(self) -> None:
        """Loop until quit/exit, end of input, or Ctrl-C at the prompt."""
        self._print(interactive_banner())
        self.state = SessionState.READING
        while self.state is not SessionState.EXITING:
            try:
                line = self._input(PROMPT)
            except (EOFError, KeyboardInterrupt):
                self._print("\nGoodbye!")
                self.state = SessionState.EXITING
                break
            self.handle(line)
        logger.info("[session:run] exited turns=%d", len(self.history))
