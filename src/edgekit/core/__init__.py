"""Core building blocks shared across edgekit."""

from .errors import (
    ConfigLoadError,
    DeployCommandError,
    DeploymentAbortedError,
    EdgekitError,
    NoDomainsError,
    UnknownDomainError,
)

__all__ = [
    "ConfigLoadError",
    "DeployCommandError",
    "DeploymentAbortedError",
    "EdgekitError",
    "NoDomainsError",
    "UnknownDomainError",
]
