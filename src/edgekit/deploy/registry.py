"""
Domain registry: configuration loading and domain detection.

Detection is tier-inclusive. Domains declared under any environment tier
are known to the registry; environment-specific behaviour is applied later
by routing, failover and selection.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from edgekit.core.errors import ConfigLoadError, NoDomainsError, UnknownDomainError

from .config import DEFAULT_DOMAINS_ENV_VAR
from .validator import flatten_domain_entries

logger = logging.getLogger(__name__)


def parse_domain_list(value: str) -> list[str]:
    """Split a comma-separated domain list, dropping blank entries."""
    return [item.strip() for item in value.split(",") if item.strip()]


class DomainRegistry:
    """
    Holds the loaded configuration and the detected set of domains.

    Usage:
        registry = DomainRegistry()
        registry.load_configuration(Path("config/domains.json"))
        domains = registry.detect_domains()
    """

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        env_var: str = DEFAULT_DOMAINS_ENV_VAR,
    ):
        self.config = config
        self.env_var = env_var
        self._domains: list[str] = []

    @property
    def domains(self) -> list[str]:
        """Detected domains, sorted."""
        return list(self._domains)

    def __contains__(self, domain: object) -> bool:
        return domain in self._domains

    def __len__(self) -> int:
        return len(self._domains)

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def load_configuration(self, path: Path | str) -> dict[str, Any] | None:
        """
        Load domain configuration from a JSON file.

        Args:
            path: Path to the JSON configuration

        Returns:
            The parsed configuration, or None if the file does not exist

        Raises:
            ConfigLoadError: If the file exists but cannot be parsed
        """
        config_path = Path(path)
        if not config_path.exists():
            logger.debug("No domain configuration at %s", config_path)
            return None

        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ConfigLoadError(
                f"Failed to load domain configuration from {config_path}: {e}"
            ) from e

        if not isinstance(data, dict):
            raise ConfigLoadError(
                f"Failed to load domain configuration from {config_path}: "
                f"expected a JSON object, got {type(data).__name__}"
            )

        self.config = data
        logger.info("Loaded domain configuration from %s", config_path)
        return data

    def domain_config(self, domain: str) -> dict[str, Any]:
        """Get the override block stored under a domain's own key."""
        block = (self.config or {}).get(domain)
        return block if isinstance(block, dict) else {}

    # -------------------------------------------------------------------------
    # Detection
    # -------------------------------------------------------------------------

    def detect_domains(self, config: Mapping[str, Any] | None = None) -> list[str]:
        """
        Detect domains from configuration and the environment override.

        Sources are merged and deduplicated, then sorted. The result
        replaces any previous detection.

        Args:
            config: Configuration to read; defaults to the loaded one

        Returns:
            Sorted list of unique domain identifiers
        """
        source = config if config is not None else (self.config or {})
        found: set[str] = set()

        for entry in flatten_domain_entries(source.get("domains")):
            if isinstance(entry, str) and entry.strip():
                found.add(entry.strip())

        env_value = os.environ.get(self.env_var)
        if env_value:
            found.update(parse_domain_list(env_value))

        self._domains = sorted(found)
        logger.info("Detected %d domains: %s", len(self._domains), ", ".join(self._domains))
        return list(self._domains)

    def require(self, domains: list[str]) -> None:
        """
        Ensure every given domain has been detected.

        Raises:
            UnknownDomainError: Naming every unknown domain
        """
        unknown = [d for d in domains if d not in self._domains]
        if unknown:
            raise UnknownDomainError(f"Invalid domains: {', '.join(unknown)}", unknown)

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    def select_domain(
        self,
        specific_domain: str | None = None,
        environment: str | None = None,
        select_all: bool = False,
        environment_map: Mapping[str, str | list[str]] | None = None,
    ) -> str | list[str]:
        """
        Select the domain(s) to deploy.

        Priority: an explicitly requested domain, then all domains when
        ``select_all`` is set, then the environment map entry, then the
        first detected domain.

        Raises:
            UnknownDomainError: If ``specific_domain`` was not detected
            NoDomainsError: If nothing has been detected
        """
        if specific_domain:
            if specific_domain in self._domains:
                return specific_domain
            raise UnknownDomainError(
                f"Domain '{specific_domain}' not found in available domains: "
                f"{', '.join(self._domains) or '(none)'}",
                [specific_domain],
            )

        if select_all:
            return list(self._domains)

        if environment and environment_map:
            mapped = environment_map.get(environment)
            if isinstance(mapped, list):
                mapped = mapped[0] if mapped else None
            if mapped and mapped in self._domains:
                return mapped
            if mapped:
                logger.debug("Mapped domain %s for %s was not detected", mapped, environment)

        if self._domains:
            return self._domains[0]

        raise NoDomainsError("No domains available for selection")
