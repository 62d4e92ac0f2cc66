"""
Configuration models for edgekit deployments.

Orchestrator settings are loaded from the edgekit.toml [deploy] section.
Domain configuration itself is JSON and is loaded by the DomainRegistry;
the per-domain override blocks inside it are parsed here.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .models import EnvironmentTier

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/domains.json"
DEFAULT_DOMAINS_ENV_VAR = "EDGEKIT_DOMAINS"
DEFAULT_PARALLEL_DEPLOYMENTS = 3


# =============================================================================
# Orchestrator Settings
# =============================================================================


class OrchestratorSettings(BaseModel):
    """Settings that shape planning and execution of a deployment run."""

    config_path: str = DEFAULT_CONFIG_PATH
    environment: str = EnvironmentTier.DEVELOPMENT.value
    parallel_deployments: int = Field(default=DEFAULT_PARALLEL_DEPLOYMENTS, ge=1)
    rollback_on_error: bool = False
    validate_before_deploy: bool = True
    dry_run: bool = False
    domains_env_var: str = DEFAULT_DOMAINS_ENV_VAR

    def get_config_path(self, project_root: Path) -> Path:
        """Get the domain configuration path relative to a project root."""
        path = Path(self.config_path)
        return path if path.is_absolute() else project_root / path


# =============================================================================
# Per-domain Overrides
# =============================================================================


class DomainOverrides(BaseModel):
    """
    Override block stored under a domain's own key in the configuration.

    Every field is optional; a field that is absent or null leaves the
    failover default in place.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    account_id: str | None = Field(default=None, alias="accountId")
    primary_endpoint: str | None = Field(default=None, alias="primaryEndpoint")
    secondary_endpoints: list[str] | None = Field(default=None, alias="secondaryEndpoints")
    health_check_interval_ms: int | None = Field(default=None, alias="healthCheckInterval", ge=0)
    health_check_path: str | None = Field(default=None, alias="healthCheckPath")
    failover_threshold: int | None = Field(default=None, alias="failoverThreshold", ge=1)
    auto_failover: bool | None = Field(default=None, alias="autoFailover")
    max_retries: int | None = Field(default=None, alias="maxRetries", ge=0)
    rollback_on_failure: bool | None = Field(default=None, alias="rollbackOnFailure")
    notifications: list[str] | None = None

    def explicit_values(self) -> dict[str, Any]:
        """Return only the fields the configuration actually set."""
        return self.model_dump(exclude_none=True)


class RoutingOverrides(BaseModel):
    """Per-domain, per-tier routing overrides (``config[domain][tier]``)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    timeout_ms: int | None = Field(default=None, alias="timeout", ge=0)
    retries: int | None = Field(default=None, ge=0)
    cors_enabled: bool | None = Field(default=None, alias="corsEnabled")
    custom_headers: dict[str, str] | None = Field(default=None, alias="customHeaders")
    endpoints: list[str] | None = None

    def explicit_values(self) -> dict[str, Any]:
        """Return only the fields the configuration actually set."""
        return self.model_dump(exclude_none=True)


# =============================================================================
# Settings Loading
# =============================================================================


def load_orchestrator_settings(toml_path: Path) -> OrchestratorSettings:
    """
    Load orchestrator settings from edgekit.toml.

    Args:
        toml_path: Path to edgekit.toml file

    Returns:
        OrchestratorSettings with values from the [deploy] section or defaults
    """
    if not toml_path.exists():
        return OrchestratorSettings()

    try:
        with open(toml_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        logger.warning("Could not read %s, using default settings", toml_path, exc_info=True)
        return OrchestratorSettings()

    deploy_section = data.get("deploy", {})
    if not isinstance(deploy_section, dict) or not deploy_section:
        return OrchestratorSettings()

    return OrchestratorSettings.model_validate(deploy_section)
