"""Engine types (outputs, secrets, stages, results)."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from infra_provisioner.core.naming import ResourceNames


class Stage(str, Enum):
    NAMESPACE_ENSURING = "namespace-ensuring"
    DEPLOYMENT_SUBMITTING = "deployment-submitting"
    OUTPUTS_FETCHING = "outputs-fetching"
    OUTPUTS_EXTRACTING = "outputs-extracting"
    SECRETS_ENRICHING = "secrets-enriching"
    SETTINGS_WRITING = "settings-writing"
    DONE = "done"
    FAILED = "failed"


class DeploymentMode(str, Enum):
    COMPLETE = "Complete"


class OutputType(str, Enum):
    """Template output types as reported by Azure Resource Manager."""

    STRING = "String"
    SECURE_STRING = "SecureString"
    INT = "Int"
    BOOL = "Bool"
    ARRAY = "Array"
    OBJECT = "Object"
    SECURE_OBJECT = "SecureObject"

    @classmethod
    def parse(cls, value: str) -> OutputType:
        """Look up a type name case-insensitively (``array`` -> ``ARRAY``)."""
        for member in cls:
            if member.value.lower() == value.lower():
                return member
        raise ValueError(f"Unknown output type: {value!r}")


class OutputEntry(BaseModel):
    """One named, typed deployment output, with values already stringified."""

    model_config = ConfigDict(frozen=True)

    key: str
    value: str | list[str]
    type: OutputType = OutputType.STRING

    @property
    def is_array(self) -> bool:
        return self.type == OutputType.ARRAY


class SecretEntry(BaseModel):
    """A credential fetched after deployment for a provisioned resource.

    Attributes:
        name: Setting name in the artifact (e.g. ``REGISTRY_PASSWORD``)
        resource: The identifying setting it was fetched for
            (e.g. ``REGISTRY_NAME=crdemoprod``)
        value: The secret itself
    """

    model_config = ConfigDict(frozen=True)

    name: str
    resource: str
    value: SecretStr


class ProvisionResult(BaseModel):
    names: ResourceNames
    path: Path
    outputs: list[OutputEntry] = Field(default_factory=list)
    secrets: list[SecretEntry] = Field(default_factory=list)
    elapsed: float = 0.0

    def summary(self) -> dict[str, int]:
        return {"settings": len(self.outputs), "secrets": len(self.secrets)}
