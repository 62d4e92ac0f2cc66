"""
Deploy operation backed by the wrangler CLI.

The orchestrator never calls this directly; the CLI injects it as the
per-domain deploy operation.
"""

from __future__ import annotations

import asyncio
import logging
import os
import re
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from edgekit.core.errors import DeployCommandError

logger = logging.getLogger(__name__)

DEFAULT_COMMAND = ("npx", "wrangler")
DOMAIN_ENV_VAR = "EDGEKIT_DOMAIN"
ACCOUNT_ENV_VAR = "CLOUDFLARE_ACCOUNT_ID"

_URL_PATTERN = re.compile(r"https://\S+")


class WranglerDeployer:
    """
    Runs ``wrangler deploy --env <environment>`` for one domain per call.

    The target domain is passed to the child process in EDGEKIT_DOMAIN.
    A domain with an ``accountId`` override deploys under that account via
    CLOUDFLARE_ACCOUNT_ID; other domains inherit the parent environment.
    """

    def __init__(
        self,
        environment: str,
        project_dir: Path,
        command: Sequence[str] = DEFAULT_COMMAND,
        dry_run: bool = False,
        account_ids: Mapping[str, str] | None = None,
    ):
        self.environment = environment
        self.project_dir = project_dir
        self.command = tuple(command)
        self.dry_run = dry_run
        self.account_ids = dict(account_ids or {})

    def build_command(self) -> list[str]:
        return [*self.command, "deploy", "--env", self.environment]

    def build_env(self, domain: str) -> dict[str, str]:
        env = {**os.environ, DOMAIN_ENV_VAR: domain}
        if account_id := self.account_ids.get(domain):
            env[ACCOUNT_ENV_VAR] = account_id
        return env

    async def __call__(self, domain: str) -> dict[str, Any]:
        if self.dry_run:
            logger.info("DRY RUN: would deploy %s to %s", domain, self.environment)
            return {
                "domain": domain,
                "environment": self.environment,
                "deployed": False,
                "dryRun": True,
            }

        cmd = self.build_command()
        logger.debug("Running %s for %s", " ".join(cmd), domain)

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                cwd=self.project_dir,
                env=self.build_env(domain),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise DeployCommandError(domain, 127, f"{cmd[0]} not found: {e}") from e

        stdout, stderr = await process.communicate()
        out = stdout.decode(errors="replace")
        err = stderr.decode(errors="replace")

        if process.returncode != 0:
            raise DeployCommandError(domain, process.returncode or 1, err or out)

        match = _URL_PATTERN.search(out)
        return {
            "domain": domain,
            "environment": self.environment,
            "deployed": True,
            "url": match.group(0) if match else None,
        }
