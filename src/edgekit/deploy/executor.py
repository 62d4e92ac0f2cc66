"""
Batched multi-domain deployment executor.

Batches run strictly one after another. Inside a batch every deploy call
runs concurrently and the executor waits for all of them to settle before
looking at the outcome, so one failing domain never cancels its siblings.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Sequence
from datetime import UTC, datetime
from typing import Any

from edgekit.core.errors import DeploymentAbortedError

from .config import DEFAULT_PARALLEL_DEPLOYMENTS
from .models import DeploymentFailure, DeploymentResult, DeploymentSuccess
from .planner import create_batches

logger = logging.getLogger(__name__)

DeployFn = Callable[[str], Awaitable[Any]]


class DeploymentExecutor:
    """
    Executes a deploy operation across many domains in bounded batches.

    Usage:
        executor = DeploymentExecutor()
        result = await executor.execute(["a.com", "b.com"], deploy)
    """

    async def execute(
        self,
        domain_ids: Sequence[str],
        deploy_fn: DeployFn,
        parallel_deployments: int = DEFAULT_PARALLEL_DEPLOYMENTS,
        rollback_on_error: bool = False,
        result: DeploymentResult | None = None,
    ) -> DeploymentResult:
        """
        Deploy every domain, batch by batch.

        Args:
            domain_ids: Domains in execution order
            deploy_fn: Async operation deploying one domain
            parallel_deployments: Maximum concurrent deploys per batch
            rollback_on_error: Stop after the first batch with a failure
                and raise DeploymentAbortedError
            result: Result to accumulate into (the router passes one that
                already holds validation failures)

        Returns:
            DeploymentResult with successes, failures and duration

        Raises:
            DeploymentAbortedError: If rollback_on_error is set and any
                domain failed; carries the partial result
        """
        batches = create_batches(list(domain_ids), parallel_deployments)
        if result is None:
            result = DeploymentResult()
        if result.started_at is None:
            result.started_at = datetime.now(UTC).isoformat()
        start = time.perf_counter()

        for index, batch in enumerate(batches, start=1):
            logger.info("Deploying batch %d/%d: %s", index, len(batches), ", ".join(batch))

            outcomes = await asyncio.gather(
                *(self._invoke(deploy_fn, domain) for domain in batch),
                return_exceptions=True,
            )

            batch_failed = False
            for domain, outcome in zip(batch, outcomes, strict=True):
                if isinstance(outcome, Exception):
                    logger.warning("Deployment failed for %s: %s", domain, outcome)
                    result.failed.append(DeploymentFailure.from_exception(domain, outcome))
                    batch_failed = True
                elif isinstance(outcome, BaseException):
                    raise outcome
                else:
                    result.successful.append(DeploymentSuccess(domain, outcome))

            if batch_failed and rollback_on_error:
                result.skipped.extend(d for later in batches[index:] for d in later)
                result.duration_ms = self._elapsed_ms(start)
                raise DeploymentAbortedError(
                    f"Deployment failed at batch {index}/{len(batches)}. "
                    f"Completed: {len(result.successful)}, Failed: {len(result.failed)}, "
                    f"Skipped: {len(result.skipped)}",
                    result,
                )

        result.duration_ms = self._elapsed_ms(start)
        logger.info(
            "Deployment complete: %d successful, %d failed in %.1fs",
            len(result.successful),
            len(result.failed),
            result.duration_ms / 1000,
        )
        return result

    @staticmethod
    async def _invoke(deploy_fn: DeployFn, domain: str) -> Any:
        return await deploy_fn(domain)

    @staticmethod
    def _elapsed_ms(start: float) -> int:
        return int((time.perf_counter() - start) * 1000)
