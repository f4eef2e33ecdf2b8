"""
In-memory conversation history for the interactive session.

Owned by a single session; lives only as long as the process.
"""

import logging
from collections.abc import Iterator

from research_agent.schemas.research import ConversationTurn, Role

logger = logging.getLogger(__name__)


class ConversationHistory:
    """Ordered user/assistant turns, appended after every completed exchange."""

    def __init__(self) -> None:
        self._turns: list[ConversationTurn] = []

    def append_exchange(self, user_text: str, assistant_text: str) -> None:
        """Append one user turn followed by one assistant turn."""
        self._turns.append(ConversationTurn(role=Role.USER, text=user_text))
        self._turns.append(ConversationTurn(role=Role.ASSISTANT, text=assistant_text or ""))
        logger.debug(
            "[session_store:append_exchange] user_len=%d assistant_len=%d turns=%d",
            len(user_text),
            len(assistant_text or ""),
            len(self._turns),
        )

    def clear(self) -> None:
        logger.info("[session_store:clear] dropped turns=%d", len(self._turns))
        self._turns.clear()

    def snapshot(self) -> tuple[ConversationTurn, ...]:
        """Return the turns as a tuple so callers cannot mutate the history."""
        return tuple(self._turns)

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[ConversationTurn]:
        return iter(tuple(self._turns))
