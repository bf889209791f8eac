"""Engine error types."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from infra_provisioner.engine.types import SecretEntry


class ProvisionerError(Exception):
    """Base exception for provisioning errors."""


class ProviderError(ProvisionerError):
    """Raised when the cloud control plane rejects or fails a request.

    The message is the provider's own diagnostic, prefixed with the action
    that was attempted.  The SDK exception is chained via ``__cause__``.
    """

    def __init__(self, action: str, message: str) -> None:
        super().__init__(f"{action}: {message}")
        self.action = action


class DeploymentTimeoutError(ProviderError):
    """Raised when a deployment does not reach a terminal state in time."""

    def __init__(self, deployment: str, timeout: float) -> None:
        super().__init__(
            f"Deployment '{deployment}'",
            f"not finished after {timeout:g}s (still running provider-side)",
        )
        self.deployment = deployment
        self.timeout = timeout


class OutputContractError(ProvisionerError):
    """Raised when deployment outputs do not have the expected shape."""


class TemplateError(ProvisionerError):
    """Raised when the infrastructure template cannot be loaded."""


class SettingsWriteError(ProvisionerError):
    """Raised when the settings artifact cannot be written."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"Cannot write {path}: {message}")
        self.path = path


class SecretEnrichmentError(ProvisionerError):
    """Raised after secret enrichment when one or more sources failed.

    Secrets that were fetched successfully are kept in ``collected`` (and
    already written to the artifact by the orchestrators).
    """

    def __init__(self, failures: dict[str, str], collected: list[SecretEntry]) -> None:
        self.failures = failures
        self.collected = collected
        msg = "Secret retrieval failed:\n" + "\n".join(
            f"  - {source}: {reason}" for source, reason in failures.items()
        )
        super().__init__(msg)
