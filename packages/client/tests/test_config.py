"""
Tests for client configuration loading.
"""

from __future__ import annotations

import pytest
import yaml
from pydantic import ValidationError

from orgtodo_client.config import ClientConfig, OnboardingPollConfig, load_config


class TestLoadConfig:

    def test_minimal(self, tmp_path):
        path = tmp_path / "client.yaml"
        path.write_text(yaml.dump({"server": {"url": "https://todo.example.org"}}))

        config = load_config(path)
        assert config.server.url == "https://todo.example.org"
        assert config.onboarding.max_retries == 3
        assert config.onboarding.post_completion_max_retries == 5
        assert config.onboarding.retry_base_delay_ms == 1000
        assert config.logging.format == "text"

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "client.yaml"
        path.write_text("")
        assert load_config(path) == ClientConfig()

    def test_full(self, tmp_path):
        path = tmp_path / "client.yaml"
        path.write_text(yaml.dump({
            "server": {"url": "http://localhost:9000", "verify_tls": False, "token_env": "MY_TOKEN"},
            "onboarding": {"max_retries": 2, "post_completion_max_retries": 4, "retry_base_delay_ms": 500},
            "logging": {"level": "debug", "format": "json"},
        }))
        config = load_config(path)
        assert config.server.verify_tls is False
        assert config.onboarding.retry_base_delay_ms == 500
        assert config.logging.format == "json"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_token_from_environment(self, monkeypatch):
        monkeypatch.setenv("ORGTODO_TOKEN", "abc")
        assert ClientConfig().server.token == "abc"
        monkeypatch.delenv("ORGTODO_TOKEN")
        assert ClientConfig().server.token is None


class TestPollConfigValidation:

    def test_retry_budget_ceiling(self):
        with pytest.raises(ValidationError):
            OnboardingPollConfig(max_retries=6, post_completion_max_retries=6)

    def test_budgets_are_independent(self):
        config = OnboardingPollConfig(max_retries=5, post_completion_max_retries=3)
        assert config.max_retries == 5
        assert config.post_completion_max_retries == 3

    def test_bad_log_format(self):
        with pytest.raises(ValidationError):
            ClientConfig.model_validate({"logging": {"format": "xml"}})
