"""
Error types for edgekit configuration loading, domain selection, and deployment.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from edgekit.deploy.models import DeploymentResult


class EdgekitError(Exception):
    """Base exception for all edgekit errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigLoadError(EdgekitError):
    """
    Raised when a domain configuration exists but cannot be used.

    Examples:
    - File is not valid JSON
    - Top-level value is not an object
    - Per-domain override block has the wrong types

    A configuration file that does not exist is not an error; loaders
    return None for that case.
    """

    pass


class UnknownDomainError(EdgekitError):
    """
    Raised when a caller references domains that were never detected.

    The offending identifiers are available as ``domains``.
    """

    def __init__(self, message: str, domains: Iterable[str] = ()):
        self.domains = list(domains)
        super().__init__(message)


class NoDomainsError(EdgekitError):
    """Raised when a selection is requested from an empty registry."""

    pass


class DeploymentAbortedError(EdgekitError):
    """
    Raised when rollback-on-error escalation stops a deployment run.

    ``result`` holds everything accumulated up to the failing batch,
    including the domains that were never dispatched.
    """

    def __init__(self, message: str, result: DeploymentResult):
        self.result = result
        super().__init__(message)


class DeployCommandError(EdgekitError):
    """Raised when the external deployment CLI fails for a domain."""

    def __init__(self, domain: str, returncode: int, stderr: str = ""):
        self.domain = domain
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip().splitlines()[-1] if stderr.strip() else "no output"
        super().__init__(f"Deploy command for '{domain}' exited with {returncode}: {detail}")
