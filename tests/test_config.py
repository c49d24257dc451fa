from __future__ import annotations

import os

import pytest

from forge.agent import AgentConfig
from forge.defaults import DEFAULT_MODEL, LOG_DIR, MAX_RETRIES, MAX_TURNS
from forge.startup import check_configuration_ready

ENV_VARS = ("FORGE_MODEL", "FORGE_MAX_TURNS", "FORGE_MAX_RETRIES",
            "FORGE_LLM_TIMEOUT", "FORGE_BASH_TIMEOUT", "FORGE_LOG_DIR")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    config = AgentConfig.from_env()

    assert config.model == DEFAULT_MODEL
    assert config.max_turns == MAX_TURNS == 5
    assert config.max_retries == MAX_RETRIES == 2
    assert config.bash_timeout is None


def test_environment_overrides_defaults(monkeypatch) -> None:
    monkeypatch.setenv("FORGE_MODEL", "openai/gpt-4.1")
    monkeypatch.setenv("FORGE_MAX_TURNS", "8")
    monkeypatch.setenv("FORGE_BASH_TIMEOUT", "30.5")

    config = AgentConfig.from_env()

    assert config.model == "openai/gpt-4.1"
    assert config.max_turns == 8
    assert config.bash_timeout == 30.5


def test_invalid_environment_values_fall_back(monkeypatch) -> None:
    monkeypatch.setenv("FORGE_MAX_RETRIES", "lots")
    monkeypatch.setenv("FORGE_LLM_TIMEOUT", "soon")

    config = AgentConfig.from_env()

    assert config.max_retries == MAX_RETRIES
    assert config.llm_timeout == AgentConfig().llm_timeout


def test_explicit_overrides_win_and_none_is_ignored(monkeypatch) -> None:
    monkeypatch.setenv("FORGE_MAX_TURNS", "8")

    config = AgentConfig.from_env(max_turns=3, model=None)

    assert config.max_turns == 3
    assert config.model == DEFAULT_MODEL


def test_log_dir_defaults_under_working_dir(monkeypatch, tmp_path) -> None:
    config = AgentConfig.from_env(working_dir=str(tmp_path))
    assert config.resolved_log_dir == os.path.join(str(tmp_path), LOG_DIR)

    monkeypatch.setenv("FORGE_LOG_DIR", "/var/log/forge")
    assert AgentConfig.from_env().resolved_log_dir == "/var/log/forge"


def test_configuration_ready_checks_provider_key(monkeypatch) -> None:
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    ready, issues = check_configuration_ready("anthropic/claude-sonnet-4-5-20250929")
    assert not ready
    assert issues == ["ANTHROPIC_API_KEY not found in environment"]

    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test")
    assert check_configuration_ready("claude-3-haiku") == (True, [])

    # local models need no key
    assert check_configuration_ready("ollama/llama3") == (True, [])
