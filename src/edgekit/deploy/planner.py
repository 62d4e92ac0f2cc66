"""
Deployment planning: batching and plan construction.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .config import DEFAULT_PARALLEL_DEPLOYMENTS
from .models import (
    PER_DOMAIN_ESTIMATE_MS,
    PLAN_PHASES,
    DeploymentPhase,
    DeploymentPlan,
    EnvironmentTier,
)
from .registry import DomainRegistry

logger = logging.getLogger(__name__)


def create_batches(domains: Sequence[str], parallel_deployments: int) -> list[list[str]]:
    """
    Split domains into consecutive batches.

    Every batch holds ``parallel_deployments`` domains except possibly the
    last one.
    """
    if parallel_deployments < 1:
        raise ValueError(f"parallel_deployments must be at least 1, got {parallel_deployments}")
    return [
        list(domains[i : i + parallel_deployments])
        for i in range(0, len(domains), parallel_deployments)
    ]


def plan_deployment(
    registry: DomainRegistry,
    domain_ids: Sequence[str],
    parallel_deployments: int = DEFAULT_PARALLEL_DEPLOYMENTS,
    environment: str = EnvironmentTier.DEVELOPMENT.value,
    rollback_on_error: bool = True,
    validate_before_deploy: bool = True,
) -> DeploymentPlan:
    """
    Build a batched deployment plan.

    Args:
        registry: Registry whose detected domains bound the plan
        domain_ids: Domains to deploy, in execution order
        parallel_deployments: Maximum batch size
        environment: Target environment tier
        rollback_on_error: Recorded on the plan for the executor
        validate_before_deploy: Recorded on the plan for the executor

    Returns:
        DeploymentPlan

    Raises:
        UnknownDomainError: If any id was not detected by the registry
        ValueError: If parallel_deployments is below 1
    """
    domains = list(domain_ids)
    registry.require(domains)

    batches = create_batches(domains, parallel_deployments)
    all_domains = tuple(domains)

    plan = DeploymentPlan(
        total_domains=len(domains),
        batches=tuple(tuple(batch) for batch in batches),
        phases=tuple(DeploymentPhase(name, all_domains) for name in PLAN_PHASES),
        parallel_deployments=parallel_deployments,
        environment=environment,
        estimated_duration_ms=len(domains) * PER_DOMAIN_ESTIMATE_MS,
        rollback_on_error=rollback_on_error,
        validate_before_deploy=validate_before_deploy,
    )

    logger.info(
        "Deployment plan created: %d batches for %d domains", len(batches), len(domains)
    )
    return plan
