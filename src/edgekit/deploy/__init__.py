"""
edgekit Deploy - domain routing and batched multi-domain deployment.

Detects deployable domains from configuration, resolves routing and
failover policy per domain, plans batched deployments and executes them
against an injected deploy operation.

Usage:
    edgekit domains list        # Detected domains
    edgekit domains validate    # Structural validation
    edgekit domains plan        # Batched deployment plan
    edgekit domains deploy      # Execute the plan
"""

from .config import OrchestratorSettings, load_orchestrator_settings
from .executor import DeploymentExecutor
from .failover import FailoverStrategyManager
from .models import (
    DeploymentPlan,
    DeploymentResult,
    EnvironmentTier,
    FailoverStrategy,
    RoutingPolicy,
    ValidationResult,
)
from .planner import create_batches, plan_deployment
from .registry import DomainRegistry
from .router import DomainRouter
from .routing import get_environment_routing
from .validator import validate_configuration
from .wrangler import WranglerDeployer

__all__ = [
    # Configuration
    "OrchestratorSettings",
    "load_orchestrator_settings",
    "validate_configuration",
    # Registry & policies
    "DomainRegistry",
    "EnvironmentTier",
    "FailoverStrategy",
    "FailoverStrategyManager",
    "RoutingPolicy",
    "get_environment_routing",
    # Planning & execution
    "DeploymentExecutor",
    "DeploymentPlan",
    "DeploymentResult",
    "DomainRouter",
    "ValidationResult",
    "create_batches",
    "plan_deployment",
    # Deploy operations
    "WranglerDeployer",
]
