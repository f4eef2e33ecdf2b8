"""
Unit tests for settings loading: defaults, env parsing, validation, overrides.
"""

import logging

import pytest
from pydantic import ValidationError

from research_agent.core.config import LogLevel, Settings, load_settings
from research_agent.core.errors import ConfigInvalid


class TestLoadSettings:
    """Tests for load_settings()."""

    def test_defaults_when_env_empty(self) -> None:
        s = load_settings({})
        assert s.model == "llama3.2"
        assert s.ollama_host == "http://localhost:11434"
        assert s.temperature == 0.7
        assert s.max_search_results == 5
        assert s.log_level is LogLevel.INFO

    def test_reads_environment_values(self) -> None:
        s = load_settings(
            {
                "OLLAMA_MODEL": " qwen2.5 ",
                "OLLAMA_HOST": "http://gpu-box:11434/",
                "OLLAMA_TEMPERATURE": "0.1",
                "MAX_SEARCH_RESULTS": "3",
                "LOG_LEVEL": "VERBOSE",
                "OLLAMA_TIMEOUT": "30",
            }
        )
        assert s.model == "qwen2.5"
        assert s.ollama_host == "http://gpu-box:11434"
        assert s.temperature == 0.1
        assert s.max_search_results == 3
        assert s.log_level is LogLevel.VERBOSE
        assert s.llm_timeout == 30.0

    def test_blank_values_fall_back_to_defaults(self) -> None:
        assert load_settings({"OLLAMA_MODEL": "   "}).model == "llama3.2"

    def test_logging_aliases(self) -> None:
        assert load_settings({"LOG_LEVEL": "debug"}).log_level is LogLevel.VERBOSE
        assert load_settings({"LOG_LEVEL": "warning"}).log_level is LogLevel.QUIET
        assert LogLevel.QUIET.logging_level == logging.WARNING

    @pytest.mark.parametrize(
        "env, var",
        [
            ({"OLLAMA_TEMPERATURE": "1.5"}, "OLLAMA_TEMPERATURE"),
            ({"OLLAMA_TEMPERATURE": "hot"}, "OLLAMA_TEMPERATURE"),
            ({"MAX_SEARCH_RESULTS": "0"}, "MAX_SEARCH_RESULTS"),
            ({"MAX_SEARCH_RESULTS": "many"}, "MAX_SEARCH_RESULTS"),
            ({"OLLAMA_HOST": "localhost:11434"}, "OLLAMA_HOST"),
            ({"LOG_LEVEL": "loud"}, "LOG_LEVEL"),
        ],
    )
    def test_invalid_values_raise_config_invalid(self, env: dict, var: str) -> None:
        with pytest.raises(ConfigInvalid) as exc_info:
            load_settings(env)
        assert var in exc_info.value.message


class TestSettings:
    """Tests for the Settings value object."""

    def test_is_immutable(self) -> None:
        s = Settings()
        with pytest.raises(ValidationError):
            s.model = "other"

    def test_with_overrides_returns_new_instance(self) -> None:
        s = Settings()
        t = s.with_overrides(model="mistral", log_level=None)
        assert t.model == "mistral"
        assert s.model == "llama3.2"
        assert t.log_level is s.log_level

    def test_with_overrides_validates(self) -> None:
        with pytest.raises(ConfigInvalid):
            Settings().with_overrides(temperature=2.0)
