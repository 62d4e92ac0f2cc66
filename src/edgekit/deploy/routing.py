"""
Environment-specific routing policy resolution.

Resolution is a pure function of the domain, the tier and any explicit
overrides. Nothing is cached; every call builds a new RoutingPolicy.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from pydantic import ValidationError

from edgekit.core.errors import ConfigLoadError

from .config import RoutingOverrides
from .models import EnvironmentTier, RoutingPolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TierDefaults:
    """Routing values that depend on the environment tier."""

    rate_limit: int
    cache_ttl: int
    strategies: tuple[str, ...]


TIER_DEFAULTS: Mapping[EnvironmentTier, TierDefaults] = MappingProxyType(
    {
        EnvironmentTier.PRODUCTION: TierDefaults(10000, 86400, ("load-balance", "geo-route")),
        EnvironmentTier.STAGING: TierDefaults(5000, 3600, ("round-robin",)),
        EnvironmentTier.DEVELOPMENT: TierDefaults(100, 300, ("direct",)),
    }
)

DEFAULT_TIMEOUT_MS = 30000
DEFAULT_RETRIES = 3


def resolve_tier(environment: str | None) -> EnvironmentTier:
    """
    Map an environment name to a tier.

    Unknown or missing names fall back to development.
    """
    if environment:
        try:
            return EnvironmentTier(environment)
        except ValueError:
            logger.warning(
                "Unknown environment tier %r, using development routing defaults", environment
            )
    return EnvironmentTier.DEVELOPMENT


def get_environment_routing(
    domain: str,
    environment: str | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> RoutingPolicy:
    """
    Resolve the routing policy for a domain in an environment tier.

    Args:
        domain: Domain identifier
        environment: Tier name; unknown values use development defaults
        overrides: Per-domain, per-tier block (timeout, retries,
            corsEnabled, customHeaders, endpoints)

    Returns:
        A new RoutingPolicy. Rate limit, cache TTL and strategies always
        come from the tier table.
    """
    tier = resolve_tier(environment)
    defaults = TIER_DEFAULTS[tier]

    try:
        explicit = RoutingOverrides.model_validate(overrides or {}).explicit_values()
    except ValidationError as e:
        raise ConfigLoadError(f"Invalid routing overrides for '{domain}': {e}") from e

    policy = RoutingPolicy(
        domain=domain,
        environment=environment or tier.value,
        rate_limit=defaults.rate_limit,
        cache_ttl=defaults.cache_ttl,
        strategies=defaults.strategies,
        timeout_ms=explicit.get("timeout_ms", DEFAULT_TIMEOUT_MS),
        retries=explicit.get("retries", DEFAULT_RETRIES),
        cors_enabled=explicit.get("cors_enabled", False),
        custom_headers=MappingProxyType(dict(explicit.get("custom_headers", {}))),
        endpoints=tuple(explicit.get("endpoints", ())),
    )

    logger.debug(
        "Routing for %s (%s): %s", domain, policy.environment, ", ".join(policy.strategies)
    )
    return policy
