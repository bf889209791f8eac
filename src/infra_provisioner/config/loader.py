"""Local defaults file (``.settings``) and invocation resolution."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from dotenv import dotenv_values
from pydantic import ValidationError

from infra_provisioner.config.schema import (
    DEFAULT_ENVIRONMENT,
    DEFAULT_LOCATION,
    InvocationContext,
    ProviderConfig,
)
from infra_provisioner.core.provider import AzureProvider

if TYPE_CHECKING:
    from infra_provisioner.config.schema import Command

logger = logging.getLogger(__name__)

DEFAULTS_FILE = ".settings"


class ConfigError(Exception):
    """Raised for configuration loading / validation errors."""


def load_defaults(directory: Path | str) -> dict[str, str]:
    """Read ``key=value`` defaults from ``<directory>/.settings`` if present."""
    path = Path(directory) / DEFAULTS_FILE
    if not path.is_file():
        return {}
    values = {k: v for k, v in dotenv_values(path, encoding="utf-8-sig").items() if v is not None}
    logger.debug("Loaded %d defaults from %s", len(values), path)
    return values


def _pick(
    explicit: str | None, defaults: dict[str, str], key: str, fallback: str | None
) -> str | None:
    """Priority (highest wins): explicit argument > defaults file > fallback."""
    if explicit:
        return explicit
    if defaults.get(key):
        return defaults[key]
    return fallback


def resolve_context(
    command: Command,
    project_name: str | None = None,
    environment: str | None = None,
    location: str | None = None,
    *,
    directory: Path | str = Path(),
) -> InvocationContext:
    """Merge explicit arguments with the defaults file into an InvocationContext.

    Raises:
        ConfigError: If no project name is given or the values are invalid.
    """
    defaults = load_defaults(directory)
    project = _pick(project_name, defaults, "project_name", None)
    if not project:
        raise ConfigError("project name is required.")

    try:
        context = InvocationContext(
            command=command,
            project_name=project,
            environment=_pick(environment, defaults, "environment", DEFAULT_ENVIRONMENT),
            location=_pick(location, defaults, "location", DEFAULT_LOCATION),
            work_dir=Path(directory),
        )
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc

    logger.info(
        "Resolved %s for project=%s environment=%s location=%s",
        command,
        context.project_name,
        context.environment,
        context.location,
    )
    return context


def build_provider(directory: Path | str = Path()) -> AzureProvider:
    """Build an AzureProvider from the environment and the defaults file.

    Priority (highest wins): ``AZURE_SUBSCRIPTION_ID`` env var > defaults file.
    """
    config = ProviderConfig()
    subscription_id = config.subscription_id or load_defaults(directory).get(
        "AZURE_SUBSCRIPTION_ID"
    )
    if not subscription_id:
        raise ConfigError(
            "Azure subscription is required (set AZURE_SUBSCRIPTION_ID in the "
            f"environment or in {DEFAULTS_FILE})"
        )
    return AzureProvider(subscription_id=subscription_id)
