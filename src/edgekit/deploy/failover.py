"""
Per-domain failover strategy resolution with memoization.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from edgekit.core.errors import ConfigLoadError

from .config import DomainOverrides
from .models import FailoverStrategy
from .registry import DomainRegistry

logger = logging.getLogger(__name__)


class FailoverStrategyManager:
    """
    Computes failover strategies from defaults plus per-domain overrides.

    Strategies are computed on first request and cached for the lifetime
    of the manager. Repeated calls for a domain return the same object.
    """

    def __init__(self, registry: DomainRegistry):
        self.registry = registry
        self._strategies: dict[str, FailoverStrategy] = {}

    def get_failover_strategy(self, domain: str) -> FailoverStrategy:
        """
        Get the failover strategy for a domain.

        Raises:
            ConfigLoadError: If the domain's override block is malformed
        """
        cached = self._strategies.get(domain)
        if cached is not None:
            return cached

        strategy = self._build(domain)
        self._strategies[domain] = strategy

        logger.debug(
            "Failover strategy for %s: %s with %d backups",
            domain,
            strategy.mode,
            len(strategy.secondary_endpoints),
        )
        return strategy

    def cached_domains(self) -> list[str]:
        """Domains with a computed strategy."""
        return sorted(self._strategies)

    def clear_cache(self) -> None:
        """Drop every cached strategy."""
        self._strategies.clear()

    def _build(self, domain: str) -> FailoverStrategy:
        try:
            overrides = DomainOverrides.model_validate(self.registry.domain_config(domain))
        except ValidationError as e:
            raise ConfigLoadError(f"Invalid failover overrides for '{domain}': {e}") from e

        values = overrides.explicit_values()
        for key in ("secondary_endpoints", "notifications"):
            if key in values:
                values[key] = tuple(values[key])

        return FailoverStrategy(domain=domain, **values)
