"""
Domain router: the entry point for multi-domain routing and deployment.

A DomainRouter is an explicit object. Callers construct it with settings
and (optionally) an already-parsed configuration, and pass it along; there
is no module-level instance.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, TypeVar

from edgekit.core.errors import ConfigLoadError, DeploymentAbortedError

from .config import OrchestratorSettings
from .executor import DeployFn, DeploymentExecutor
from .failover import FailoverStrategyManager
from .models import (
    DeploymentFailure,
    DeploymentPlan,
    DeploymentResult,
    FailoverStrategy,
    RoutingPolicy,
    ValidationResult,
)
from .planner import plan_deployment
from .registry import DomainRegistry
from .routing import get_environment_routing
from .validator import validate_configuration

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DomainRouter:
    """
    Coordinates domain detection, policy lookup, planning and execution.

    Usage:
        router = DomainRouter(OrchestratorSettings(environment="staging"))
        router.load_configuration()
        router.detect_domains()
        result = await router.deploy_across_domains(router.domains, deploy)
    """

    def __init__(
        self,
        settings: OrchestratorSettings | None = None,
        config: dict[str, Any] | None = None,
    ):
        self.settings = settings or OrchestratorSettings()
        self.registry = DomainRegistry(config=config, env_var=self.settings.domains_env_var)
        self.failover = FailoverStrategyManager(self.registry)
        self.executor = DeploymentExecutor()

    @property
    def environment(self) -> str:
        return self.settings.environment

    @property
    def domains(self) -> list[str]:
        return self.registry.domains

    @property
    def config(self) -> dict[str, Any] | None:
        return self.registry.config

    # -------------------------------------------------------------------------
    # Configuration & detection
    # -------------------------------------------------------------------------

    def load_configuration(self, path: Path | str | None = None) -> dict[str, Any] | None:
        """
        Load the JSON domain configuration.

        Cached failover strategies are dropped when a configuration loads,
        since they were derived from the previous one.
        """
        config = self.registry.load_configuration(path or self.settings.config_path)
        if config is not None:
            self.failover.clear_cache()
        return config

    def detect_domains(self, config: Mapping[str, Any] | None = None) -> list[str]:
        return self.registry.detect_domains(config)

    def select_domain(
        self,
        specific_domain: str | None = None,
        environment: str | None = None,
        select_all: bool = False,
        environment_map: Mapping[str, str | list[str]] | None = None,
    ) -> str | list[str]:
        return self.registry.select_domain(
            specific_domain=specific_domain,
            environment=environment or self.environment,
            select_all=select_all,
            environment_map=environment_map,
        )

    def validate_configuration(self, config: Any) -> ValidationResult:
        return validate_configuration(config)

    # -------------------------------------------------------------------------
    # Policies
    # -------------------------------------------------------------------------

    def get_environment_routing(self, domain: str, environment: str | None = None) -> RoutingPolicy:
        """Resolve routing, applying ``config[domain][tier]`` overrides."""
        tier = environment or self.environment
        overrides = self.registry.domain_config(domain).get(tier)
        return get_environment_routing(
            domain, tier, overrides if isinstance(overrides, Mapping) else None
        )

    def get_failover_strategy(self, domain: str) -> FailoverStrategy:
        return self.failover.get_failover_strategy(domain)

    # -------------------------------------------------------------------------
    # Planning & execution
    # -------------------------------------------------------------------------

    def plan_multi_domain_deployment(
        self,
        domains: Sequence[str],
        parallel_deployments: int | None = None,
        environment: str | None = None,
        rollback_on_error: bool | None = None,
        validate_before_deploy: bool | None = None,
    ) -> DeploymentPlan:
        """Plan a deployment; unset options come from settings."""
        return plan_deployment(
            self.registry,
            domains,
            parallel_deployments=_pick(parallel_deployments, self.settings.parallel_deployments),
            environment=environment or self.environment,
            rollback_on_error=_pick(rollback_on_error, self.settings.rollback_on_error),
            validate_before_deploy=_pick(
                validate_before_deploy, self.settings.validate_before_deploy
            ),
        )

    async def deploy_across_domains(
        self,
        domains: Sequence[str],
        deploy_fn: DeployFn,
        parallel_deployments: int | None = None,
        rollback_on_error: bool | None = None,
    ) -> DeploymentResult:
        """
        Plan and execute a deployment across domains.

        Unknown domains fail the call before anything is deployed. With
        validation enabled, domains whose failover or routing overrides are
        malformed are recorded as failed and are not deployed.

        Raises:
            UnknownDomainError: If a domain was not detected
            DeploymentAbortedError: If rollback_on_error is set and any
                domain failed
        """
        plan = self.plan_multi_domain_deployment(
            domains,
            parallel_deployments=parallel_deployments,
            rollback_on_error=rollback_on_error,
        )

        result = DeploymentResult(started_at=datetime.now(UTC).isoformat())
        start = time.perf_counter()
        to_deploy = plan.domains

        if plan.validate_before_deploy:
            to_deploy = []
            for domain in plan.domains:
                try:
                    self.get_failover_strategy(domain)
                    self.get_environment_routing(domain, plan.environment)
                except ConfigLoadError as e:
                    logger.warning("Validation failed for %s: %s", domain, e.message)
                    result.failed.append(DeploymentFailure(domain, str(e), "ValidationError"))
                else:
                    to_deploy.append(domain)

            if result.failed and plan.rollback_on_error:
                result.skipped.extend(to_deploy)
                result.duration_ms = int((time.perf_counter() - start) * 1000)
                raise DeploymentAbortedError(
                    f"Validation failed for {len(result.failed)} domain(s)", result
                )

        return await self.executor.execute(
            to_deploy,
            deploy_fn,
            parallel_deployments=plan.parallel_deployments,
            rollback_on_error=plan.rollback_on_error,
            result=result,
        )

    # -------------------------------------------------------------------------
    # Reporting
    # -------------------------------------------------------------------------

    def get_summary(self) -> dict[str, Any]:
        """Routing and failover for every detected domain, as plain data."""
        return {
            "totalDomains": len(self.registry),
            "domains": self.domains,
            "environment": self.environment,
            "routing": {d: self.get_environment_routing(d).to_dict() for d in self.domains},
            "failover": {d: self.get_failover_strategy(d).to_dict() for d in self.domains},
        }


def _pick(value: T | None, default: T) -> T:
    return default if value is None else value
