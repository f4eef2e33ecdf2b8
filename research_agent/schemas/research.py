"""Schemas for search hits, conversation turns, and research answers."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class SearchResult(BaseModel):
    """One web search hit, in the provider's relevance order."""

    model_config = ConfigDict(frozen=True)

    title: str = Field("", description="Page title as returned by the provider.")
    snippet: str = Field("", description="Short body excerpt for the hit.")
    url: str = Field(..., description="Link to the page.")


class ConversationTurn(BaseModel):
    """One utterance in the conversation history."""

    model_config = ConfigDict(frozen=True)

    role: Role
    text: str


class ResearchAnswer(BaseModel):
    """Generated answer plus the search results that were fed into the prompt."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="Answer text from the model.")
    sources: tuple[SearchResult, ...] = Field(default=(), description="Search results used for the answer.")
    degraded: bool = Field(False, description="True when search was attempted but every tool failed.")
