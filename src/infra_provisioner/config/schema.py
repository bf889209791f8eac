"""Configuration models."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

from infra_provisioner.core.naming import ResourceNames, resolve_names

DEFAULT_ENVIRONMENT = "prod"
DEFAULT_LOCATION = "eastus"

Command = Literal["update", "delete", "cancel", "env"]


class ProviderConfig(BaseSettings):
    """Azure connection settings.

    Fields can be set via constructor kwargs or environment variables with
    the ``AZURE_`` prefix.  Constructor kwargs take precedence.
    """

    model_config = SettingsConfigDict(env_prefix="AZURE_")

    subscription_id: str | None = None


class InvocationContext(BaseModel):
    """Resolved inputs of one command run."""

    model_config = ConfigDict(frozen=True)

    command: Command
    project_name: str
    environment: str = DEFAULT_ENVIRONMENT
    location: str = DEFAULT_LOCATION
    work_dir: Path = Path()

    @property
    def names(self) -> ResourceNames:
        return resolve_names(self.project_name, self.environment, self.location)

    @property
    def tags(self) -> dict[str, str]:
        return {
            "project": self.project_name,
            "environment": self.environment,
            "managedBy": "infra-provisioner",
        }
