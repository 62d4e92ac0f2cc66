"""Shared pytest fixtures for edgekit tests."""

import json
from pathlib import Path
from typing import Any

import pytest

from edgekit.deploy.config import DEFAULT_DOMAINS_ENV_VAR
from edgekit.deploy.registry import DomainRegistry
from edgekit.deploy.router import DomainRouter


@pytest.fixture(autouse=True)
def clear_domains_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the domain override variable out of every test unless set explicitly."""
    monkeypatch.delenv(DEFAULT_DOMAINS_ENV_VAR, raising=False)


@pytest.fixture
def sample_config() -> dict[str, Any]:
    """Return a configuration with tiered domains and overrides."""
    return {
        "domains": {
            "production": ["api.example.com", "app.example.com"],
            "staging": ["staging.example.com"],
            "development": ["localhost:8787"],
        },
        "environments": {"production": {}, "staging": {}},
        "api.example.com": {
            "accountId": "acc-123",
            "primaryEndpoint": "https://api-primary.example.com",
            "secondaryEndpoints": ["https://api-eu.example.com", "https://api-us.example.com"],
            "maxRetries": 8,
            "production": {"timeout": 10000, "corsEnabled": True},
        },
    }


@pytest.fixture
def config_file(tmp_path: Path, sample_config: dict[str, Any]) -> Path:
    """Write the sample configuration to disk."""
    path = tmp_path / "config" / "domains.json"
    path.parent.mkdir()
    path.write_text(json.dumps(sample_config))
    return path


@pytest.fixture
def registry(sample_config: dict[str, Any]) -> DomainRegistry:
    """Return a registry with the sample configuration detected."""
    reg = DomainRegistry(config=sample_config)
    reg.detect_domains()
    return reg


@pytest.fixture
def router(sample_config: dict[str, Any]) -> DomainRouter:
    """Return a router with the sample configuration detected."""
    r = DomainRouter(config=sample_config)
    r.detect_domains()
    return r
