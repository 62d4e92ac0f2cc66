"""
edgekit - deployment orchestration for multi-domain edge services.

Detects deployable domains from configuration, resolves routing and
failover policy, and runs batched deployments across many domains.
"""

from __future__ import annotations

from ._version import get_version
from .core.errors import (
    ConfigLoadError,
    DeployCommandError,
    DeploymentAbortedError,
    EdgekitError,
    NoDomainsError,
    UnknownDomainError,
)

__version__ = get_version()

__all__ = [
    "__version__",
    "EdgekitError",
    "ConfigLoadError",
    "DeployCommandError",
    "DeploymentAbortedError",
    "NoDomainsError",
    "UnknownDomainError",
]
