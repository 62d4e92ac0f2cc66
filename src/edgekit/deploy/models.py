"""
Data models for domain routing and multi-domain deployment.

Every model converts to plain JSON-serializable data via ``to_dict()``,
using the camelCase keys of the domain configuration format.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class EnvironmentTier(StrEnum):
    """Environment tiers with their own routing defaults."""

    PRODUCTION = "production"
    STAGING = "staging"
    DEVELOPMENT = "development"


KNOWN_TIERS = frozenset(tier.value for tier in EnvironmentTier)

PHASE_VALIDATION = "validation"
PHASE_PREPARATION = "preparation"
PHASE_DEPLOYMENT = "deployment"

PLAN_PHASES = (PHASE_VALIDATION, PHASE_PREPARATION, PHASE_DEPLOYMENT)

# Coarse per-domain estimate used for plans (5 minutes)
PER_DOMAIN_ESTIMATE_MS = 5 * 60 * 1000


@dataclass
class ValidationResult:
    """Outcome of structural configuration validation."""

    valid: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_error(self, error: str) -> None:
        """Add an error and mark the result invalid."""
        self.errors.append(error)
        self.valid = False

    def add_warning(self, warning: str) -> None:
        """Add a non-fatal warning."""
        self.warnings.append(warning)

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class RoutingPolicy:
    """Routing parameters for one domain in one environment tier."""

    domain: str
    environment: str
    rate_limit: int
    cache_ttl: int  # seconds
    strategies: tuple[str, ...]
    timeout_ms: int = 30000
    retries: int = 3
    cors_enabled: bool = False
    custom_headers: Mapping[str, str] = field(default_factory=dict)
    endpoints: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "domain": self.domain,
            "environment": self.environment,
            "endpoints": list(self.endpoints),
            "strategies": list(self.strategies),
            "rateLimit": self.rate_limit,
            "timeout": self.timeout_ms,
            "retries": self.retries,
            "cacheTTL": self.cache_ttl,
            "corsEnabled": self.cors_enabled,
            "customHeaders": dict(self.custom_headers),
        }


@dataclass(frozen=True)
class FailoverStrategy:
    """Failover policy for a single domain."""

    domain: str
    primary_endpoint: str | None = None
    secondary_endpoints: tuple[str, ...] = ()
    health_check_interval_ms: int = 30000
    health_check_path: str = "/health"
    failover_threshold: int = 3
    auto_failover: bool = True
    max_retries: int = 5
    rollback_on_failure: bool = True
    notifications: tuple[str, ...] = ()
    account_id: str | None = None

    @property
    def mode(self) -> str:
        """Human-readable failover mode."""
        return "auto" if self.auto_failover else "manual"

    def to_dict(self) -> dict[str, Any]:
        return {
            "domain": self.domain,
            "accountId": self.account_id,
            "primaryEndpoint": self.primary_endpoint,
            "secondaryEndpoints": list(self.secondary_endpoints),
            "healthCheckInterval": self.health_check_interval_ms,
            "healthCheckPath": self.health_check_path,
            "failoverThreshold": self.failover_threshold,
            "autoFailover": self.auto_failover,
            "maxRetries": self.max_retries,
            "rollbackOnFailure": self.rollback_on_failure,
            "notifications": list(self.notifications),
        }


@dataclass(frozen=True)
class DeploymentPhase:
    """A descriptive pipeline phase attached to a plan."""

    name: str
    domains: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {"phase": self.name, "domains": list(self.domains)}


@dataclass(frozen=True)
class DeploymentPlan:
    """Batched execution plan over a set of domains."""

    total_domains: int
    batches: tuple[tuple[str, ...], ...]
    phases: tuple[DeploymentPhase, ...]
    parallel_deployments: int
    environment: str
    estimated_duration_ms: int
    rollback_on_error: bool = True
    validate_before_deploy: bool = True

    @property
    def domains(self) -> list[str]:
        """All planned domains in execution order."""
        return [domain for batch in self.batches for domain in batch]

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalDomains": self.total_domains,
            "batches": [list(batch) for batch in self.batches],
            "parallelDeployments": self.parallel_deployments,
            "environment": self.environment,
            "phases": [phase.to_dict() for phase in self.phases],
            "estimatedDuration": self.estimated_duration_ms,
            "rollbackOnError": self.rollback_on_error,
            "validateBeforeDeploy": self.validate_before_deploy,
        }


@dataclass
class DeploymentSuccess:
    """A domain whose deploy operation completed."""

    domain: str
    value: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {"domain": self.domain, "result": self.value}


@dataclass
class DeploymentFailure:
    """A domain whose deploy operation raised."""

    domain: str
    error: str
    error_type: str = "Exception"

    @classmethod
    def from_exception(cls, domain: str, exc: BaseException) -> DeploymentFailure:
        return cls(domain=domain, error=str(exc) or repr(exc), error_type=type(exc).__name__)

    def to_dict(self) -> dict[str, Any]:
        return {"domain": self.domain, "error": self.error, "errorType": self.error_type}


@dataclass
class DeploymentResult:
    """Aggregated outcome of a multi-domain deployment run."""

    successful: list[DeploymentSuccess] = field(default_factory=list)
    failed: list[DeploymentFailure] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    duration_ms: int = 0
    started_at: str | None = None

    @property
    def success(self) -> bool:
        """Check if every dispatched domain deployed."""
        return not self.failed and not self.skipped

    @property
    def successful_domains(self) -> list[str]:
        return [item.domain for item in self.successful]

    @property
    def failed_domains(self) -> list[str]:
        return [item.domain for item in self.failed]

    def summary(self) -> dict[str, Any]:
        """Get a compact summary of the run."""
        return {
            "success": self.success,
            "successful": len(self.successful),
            "failed": len(self.failed),
            "skipped": len(self.skipped),
            "duration": self.duration_ms,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "successful": [item.to_dict() for item in self.successful],
            "failed": [item.to_dict() for item in self.failed],
            "skipped": list(self.skipped),
            "duration": self.duration_ms,
            "startedAt": self.started_at,
        }
