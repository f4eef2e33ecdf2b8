"""
Application configuration (env, settings, constants).

Responsibility: Load settings once at startup from the environment (and a
local .env file) into an immutable Settings value. Components receive the
Settings instance explicitly instead of reading the environment themselves.
"""

import logging
import os
from collections.abc import Mapping
from enum import Enum

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from research_agent.core.errors import ConfigInvalid

# Ollama (local inference)
DEFAULT_MODEL: str = "llama3.2"
DEFAULT_OLLAMA_HOST: str = "http://localhost:11434"
DEFAULT_TEMPERATURE: float = 0.7

# Web search
DEFAULT_MAX_SEARCH_RESULTS: int = 5

# Timeouts (seconds)
DEFAULT_LLM_TIMEOUT: float = 120.0
DEFAULT_SEARCH_TIMEOUT: float = 10.0

# Settings field -> environment variable
ENV_VARS: dict[str, str] = {
    "model": "OLLAMA_MODEL",
    "ollama_host": "OLLAMA_HOST",
    "temperature": "OLLAMA_TEMPERATURE",
    "max_search_results": "MAX_SEARCH_RESULTS",
    "log_level": "LOG_LEVEL",
    "llm_timeout": "OLLAMA_TIMEOUT",
    "search_timeout": "SEARCH_TIMEOUT",
}


class LogLevel(str, Enum):
    QUIET = "quiet"
    INFO = "info"
    VERBOSE = "verbose"

    @property
    def logging_level(self) -> int:
        return {
            LogLevel.QUIET: logging.WARNING,
            LogLevel.INFO: logging.INFO,
            LogLevel.VERBOSE: logging.DEBUG,
        }[self]


# Accept the usual logging names as well
_LOG_LEVEL_ALIASES = {
    "warning": LogLevel.QUIET,
    "warn": LogLevel.QUIET,
    "error": LogLevel.QUIET,
    "debug": LogLevel.VERBOSE,
}


class Settings(BaseModel):
    """Validated, read-only configuration for one process."""

    model_config = ConfigDict(frozen=True)

    model: str = Field(DEFAULT_MODEL, min_length=1)
    ollama_host: str = DEFAULT_OLLAMA_HOST
    temperature: float = Field(DEFAULT_TEMPERATURE, ge=0.0, le=1.0)
    max_search_results: int = Field(DEFAULT_MAX_SEARCH_RESULTS, ge=1)
    log_level: LogLevel = LogLevel.INFO
    llm_timeout: float = Field(DEFAULT_LLM_TIMEOUT, gt=0)
    search_timeout: float = Field(DEFAULT_SEARCH_TIMEOUT, gt=0)

    @field_validator("model", mode="before")
    @classmethod
    def _strip_model(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("ollama_host", mode="before")
    @classmethod
    def _normalize_host(cls, value):
        if not isinstance(value, str):
            return value
        host = value.strip().rstrip("/")
        if not host.startswith(("http://", "https://")):
            raise ValueError("host must start with http:// or https://")
        return host

    @field_validator("log_level", mode="before")
    @classmethod
    def _parse_log_level(cls, value):
        if isinstance(value, str):
            key = value.strip().lower()
            return _LOG_LEVEL_ALIASES.get(key, key)
        return value

    def with_overrides(self, **changes) -> "Settings":
        """Return a new validated Settings with the given fields replaced."""
        data = self.model_dump()
        data.update({k: v for k, v in changes.items() if v is not None})
        return _build(data)


def _describe(err: ValidationError) -> str:
    parts = []
    for e in err.errors():
        field = str(e["loc"][0]) if e.get("loc") else "?"
        name = ENV_VARS.get(field, field)
        parts.append(f"{name}: {e['msg']} (got {e.get('input')!r})")
    return "; ".join(parts)


def _build(data: Mapping[str, object]) -> Settings:
    try:
        return Settings(**data)
    except ValidationError as e:
        raise ConfigInvalid(f"Invalid configuration: {_describe(e)}") from e


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """
    Build Settings from environment variables, falling back to defaults.

    env: optional mapping used instead of os.environ (no .env file is read then).
    Raises ConfigInvalid when a value cannot be parsed or is out of range.
    """
    if env is None:
        load_dotenv()
        env = os.environ
    data: dict[str, object] = {}
    for field, var in ENV_VARS.items():
        raw = env.get(var)
        if raw is None or not raw.strip():
            continue
        data[field] = raw.strip()
    return _build(data)
