"""Shared Pydantic models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_ISOLATED_CONFIGS = [
    "postcss.config.js",
    "postcss.config.cjs",
    "tailwind.config.js",
    "tailwind.config.cjs",
    "tailwind.config.ts",
]

DEFAULT_SERVER_EXTERNALS = [
    "express",
    "pg",
    "@neondatabase/serverless",
    "drizzle-orm",
    "session-file-store",
    "express-session",
]

DEFAULT_REQUIRED_ENV = ["DATABASE_URL", "SESSION_SECRET", "MAIN_LTC_ADDRESS"]


class BuildSettings(BaseModel):
    """Run configuration, loaded from ``deploy.build.json`` (camelCase keys)."""

    model_config = ConfigDict(populate_by_name=True)

    app_name: str = Field("LostShop", alias="appName")
    client_dir: str = Field("client", alias="clientDir")
    server_dir: str = Field("server", alias="serverDir")
    dist_dir: str = Field("dist", alias="distDir")
    public_dir: str = Field("dist/public", alias="publicDir")
    api_dir: str = Field("api", alias="apiDir")
    isolate_configs: list[str] = Field(
        default_factory=lambda: list(DEFAULT_ISOLATED_CONFIGS), alias="isolateConfigs"
    )
    path_fix_targets: list[str] = Field(
        default_factory=lambda: ["dist/index.js"], alias="pathFixTargets"
    )
    poll_attempts: int = Field(10, alias="pollAttempts")
    poll_delay: float = Field(0.5, alias="pollDelay")
    server_externals: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SERVER_EXTERNALS), alias="serverExternals"
    )
    required_env: list[str] = Field(
        default_factory=lambda: list(DEFAULT_REQUIRED_ENV), alias="requiredEnv"
    )
    database_host_marker: str = Field("neon.tech", alias="databaseHostMarker")


class ClientReport(BaseModel):
    """What we know about the front-end project before building it."""

    exists: bool = False
    has_manifest: bool = False
    typescript: bool = False
    tailwind: bool = False
    package_manager: Literal["pnpm", "npm"] | None = None
    frozen_lockfile: bool = False
    notes: list[str] = []


class DatabaseConfig(BaseModel):
    url: str
    provider: str | None = None
    ssl_required: bool = False


class DatabaseStatus(BaseModel):
    status: Literal["missing", "invalid", "unchanged", "fixed", "not-applicable"]
    message: str
    provider: str | None = None
    masked_url: str | None = None
    config: DatabaseConfig | None = None


class HealthStatus(BaseModel):
    status: Literal["ok", "error"]
    message: str
    error: str | None = None
    solution: str | None = None


class DeploymentReport(BaseModel):
    ok: bool
    missing: list[str] = []
    invalid: list[str] = []
    database: DatabaseConfig | None = None
