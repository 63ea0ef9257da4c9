"""
Configuration loading and validation.

Loads client configuration from a YAML file. The bearer token issued by the
identity provider is read from the environment, never from the config file.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field

# Hard ceiling on status re-queries for any single check
MAX_RETRY_BUDGET = 5


class ServerConfig(BaseModel):
    url: str = "http://localhost:8000"
    verify_tls: bool = True
    request_timeout_seconds: int = 30
    token_env: str = "ORGTODO_TOKEN"

    @property
    def token(self) -> str | None:
        return os.environ.get(self.token_env)


class OnboardingPollConfig(BaseModel):
    max_retries: int = Field(default=3, ge=0, le=MAX_RETRY_BUDGET)
    post_completion_max_retries: int = Field(default=5, ge=0, le=MAX_RETRY_BUDGET)
    retry_base_delay_ms: int = Field(default=1000, ge=0)
    # Show the onboarding form at most this many times before giving up on it
    max_completion_attempts: int = Field(default=2, ge=1)


class LoggingConfig(BaseModel):
    level: str = "info"
    format: Literal["json", "text"] = "text"


class ClientConfig(BaseModel):
    server: ServerConfig = Field(default_factory=ServerConfig)
    onboarding: OnboardingPollConfig = Field(default_factory=OnboardingPollConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(path: str | Path) -> ClientConfig:
    """Load and validate client configuration from a YAML file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    return ClientConfig.model_validate(raw)
