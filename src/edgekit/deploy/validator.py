"""
Structural validation of raw domain configuration.

Validation never raises for structural problems. Every issue is reported
in the returned ValidationResult so tooling can show them all at once.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .models import KNOWN_TIERS, ValidationResult

logger = logging.getLogger(__name__)


def flatten_domain_entries(domains: Any) -> list[Any]:
    """
    Flatten the ``domains`` value of a configuration into one sequence.

    A list is taken as is. A mapping of tier name to list (or single
    string) is flattened across every tier in declaration order.
    Entries are not type-checked here.
    """
    if isinstance(domains, list | tuple):
        return list(domains)
    if isinstance(domains, str):
        return [domains]
    if isinstance(domains, Mapping):
        entries: list[Any] = []
        for tier_domains in domains.values():
            if isinstance(tier_domains, list | tuple):
                entries.extend(tier_domains)
            elif tier_domains is not None:
                entries.append(tier_domains)
        return entries
    return []


def validate_configuration(config: Any) -> ValidationResult:
    """
    Validate the structure of a domain configuration.

    Args:
        config: Raw configuration (usually parsed JSON)

    Returns:
        ValidationResult with all errors and warnings collected
    """
    result = ValidationResult()

    if not isinstance(config, Mapping):
        result.add_error("Configuration cannot be empty")
        return result

    entries = flatten_domain_entries(config.get("domains"))
    if not entries:
        result.add_error("At least one domain must be specified")

    for position, entry in enumerate(entries):
        if not isinstance(entry, str) or not entry.strip():
            result.add_error(
                f"Domain at position {position} must be a non-empty string "
                f"(got {type(entry).__name__})"
            )

    environments = config.get("environments")
    if isinstance(environments, Mapping):
        for env in environments:
            if env not in KNOWN_TIERS:
                result.add_warning(f"Unknown environment: {env}")

    if not result.valid:
        logger.debug("Configuration validation failed: %s", "; ".join(result.errors))

    return result
