"""Storage feature smoke checks against a running server.

Flow:
- Ensure the admin account exists (failure is only a warning).
- Log in as admin and keep the session cookie.
- POST each feature name to the storage test endpoint and report the JSON body.

Only login failure aborts; a failing feature is reported and the run goes on.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

import httpx

from deploy_builder.logging import get_logger

log = get_logger(__name__)

DEFAULT_BASE_URL = "http://localhost:5000"
DEFAULT_FEATURES = ["coupons", "subscriptions", "audit", "forum"]
ADMIN_CREDENTIALS = {"username": "admin", "password": "adminpass123"}
TEST_API_KEY = "test-admin-key"


class SmokeFailure(Exception):
    pass


@dataclass
class StorageReport:
    user: dict | None = None
    results: dict[str, dict | None] = field(default_factory=dict)

    @property
    def failed(self) -> list[str]:
        return [name for name, body in self.results.items() if body is None]


def ensure_admin(client: httpx.Client) -> bool:
    try:
        r = client.post("/api/create-admin-account")
    except httpx.HTTPError as exc:
        log.warning("Error ensuring admin exists: %s", exc)
        return False
    if r.is_error:
        log.warning("Admin account creation failed: %s %s", r.status_code, r.text)
        return False
    log.info("Admin account ready")
    return True


def login(client: httpx.Client, credentials: dict | None = None) -> dict:
    """Log in; the session cookie stays on *client*. Raises SmokeFailure."""
    try:
        r = client.post("/api/auth/login", json=credentials or ADMIN_CREDENTIALS)
    except httpx.HTTPError as exc:
        raise SmokeFailure(f"Login request failed: {exc}") from exc
    if r.is_error:
        raise SmokeFailure(f"Login failed: {r.status_code} {r.text}")
    if not r.cookies:
        log.warning("No cookies returned from login")

    user = None
    try:
        body = r.json()
    except ValueError:
        log.info("Login appeared successful but response was not JSON")
    else:
        if isinstance(body, dict):
            user = body.get("user")
    # Minimal user object when the body does not carry one
    return user or {"id": 1, "role": "admin"}


def check_feature(client: httpx.Client, feature: str) -> dict | None:
    try:
        r = client.post(
            "/api/test/storage",
            json={"feature": feature},
            headers={"X-API-Key": TEST_API_KEY},
        )
        if r.is_error:
            log.error("Testing %s failed: %s %s", feature, r.status_code, r.text)
            return None
        data = r.json()
    except (httpx.HTTPError, ValueError) as exc:
        log.error("Error testing %s: %s", feature, exc)
        return None
    log.info("Feature %s passed", feature)
    return data


def run_storage_checks(
    base_url: str = DEFAULT_BASE_URL,
    features: Iterable[str] = DEFAULT_FEATURES,
    timeout: float = 10.0,
    transport: httpx.BaseTransport | None = None,
) -> StorageReport:
    report = StorageReport()
    with httpx.Client(base_url=base_url, timeout=timeout, transport=transport) as client:
        ensure_admin(client)
        report.user = login(client)
        for feature in features:
            report.results[feature] = check_feature(client, feature)
    return report
