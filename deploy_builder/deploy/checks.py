"""Pre-deployment environment checks."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from deploy_builder.database.url import NEON_HOST_MARKER, database_config
from deploy_builder.logging import get_logger
from deploy_builder.types import DEFAULT_REQUIRED_ENV, DeploymentReport

log = get_logger(__name__)


def check_deployment_config(
    env: Mapping[str, str],
    required: Iterable[str] = DEFAULT_REQUIRED_ENV,
    marker: str = NEON_HOST_MARKER,
) -> DeploymentReport:
    log.info("Checking deployment configuration")
    missing = [name for name in required if not env.get(name)]
    if missing:
        log.error("Missing required environment variables: %s", ", ".join(missing))
        return DeploymentReport(ok=False, missing=missing)

    database = None
    url = env.get("DATABASE_URL")
    if url:
        try:
            database = database_config(url, marker)
        except ValueError as exc:
            log.error("DATABASE_URL is not a valid URL: %s", exc)
            return DeploymentReport(ok=False, invalid=["DATABASE_URL"])
        if database.provider:
            log.info("Using Neon database with corrected URL format")

    log.info("Configuration check complete")
    return DeploymentReport(ok=True, database=database)
