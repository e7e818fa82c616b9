"""Schema validation and settings loading."""

from __future__ import annotations

import json
from importlib import resources
from pathlib import Path

from jsonschema import Draft202012Validator

from deploy_builder.types import BuildSettings

CONFIG_FILENAME = "deploy.build.json"

# --- Schema loaders ---------------------------------------------------------


def _load_schema(package: str, resource_name: str) -> dict:
    with resources.files(package).joinpath(resource_name).open("r", encoding="utf-8") as f:
        return json.load(f)


def _build_schema() -> dict:
    return _load_schema("deploy_builder.schema", "build.schema.json")


# --- Public validators ------------------------------------------------------


def validate_build_config(data: dict) -> None:
    Draft202012Validator(_build_schema()).validate(data)


def load_settings(root: Path, config: Path | None = None) -> BuildSettings:
    """Return settings for *root*.

    Reads *config* when given, else ``deploy.build.json`` under *root* if it
    exists, else the defaults. Raises ``jsonschema.ValidationError`` on an
    invalid file and ``FileNotFoundError`` when an explicit *config* is missing.
    """
    path = config if config is not None else root / CONFIG_FILENAME
    if config is None and not path.exists():
        return BuildSettings()
    data = json.loads(path.read_text(encoding="utf-8"))
    validate_build_config(data)
    return BuildSettings.model_validate(data)
