"""Database reachability probe returning a status object instead of raising."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from deploy_builder.logging import get_logger
from deploy_builder.types import HealthStatus

log = get_logger(__name__)


def check_database_health(connect: Callable[[], Any]) -> HealthStatus:
    """Run ``SELECT 1`` on a connection from *connect* (any DB-API driver)."""
    try:
        conn = connect()
        try:
            cur = conn.cursor()
            cur.execute("SELECT 1")
            cur.fetchone()
        finally:
            conn.close()
    except Exception as exc:
        log.error("Database health check failed: %s", exc)
        return HealthStatus(
            status="error",
            message="Database connection failed",
            error=str(exc),
            solution="Check DATABASE_URL format and credentials",
        )
    return HealthStatus(status="ok", message="Database connection successful")
