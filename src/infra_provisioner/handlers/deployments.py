"""Handler for resource group template deployments."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from azure.mgmt.resource.resources.models import Deployment, DeploymentProperties

from infra_provisioner.engine.errors import DeploymentTimeoutError
from infra_provisioner.handlers.base import provider_call

if TYPE_CHECKING:
    from azure.mgmt.resource import ResourceManagementClient

logger = logging.getLogger(__name__)


class DeploymentHandler:
    """Handler for deployment operations scoped to a resource group."""

    def __init__(self, client: ResourceManagementClient) -> None:
        self.client = client

    def submit(
        self,
        resource_group: str,
        name: str,
        template: dict[str, Any],
        parameters: dict[str, Any],
        *,
        mode: str,
        timeout: float | None = None,
    ) -> Any:
        """Submit a deployment and wait for it; returns its output map.

        With ``timeout=None`` this blocks until ARM reports a terminal state.
        """
        deployment = Deployment(
            properties=DeploymentProperties(
                mode=mode,
                template=template,
                parameters={k: {"value": v} for k, v in parameters.items()},
            )
        )
        with provider_call(f"Deployment '{name}'"):
            poller = self.client.deployments.begin_create_or_update(
                resource_group, name, deployment
            )
            if timeout is not None:
                poller.wait(timeout)
                if not poller.done():
                    raise DeploymentTimeoutError(name, timeout)
            result = poller.result()
        logger.debug("Deployment %s finished", name)
        return result.properties.outputs

    def outputs(self, resource_group: str, name: str) -> Any:
        """Return the output map of an existing deployment."""
        with provider_call(f"Show deployment '{name}'"):
            result = self.client.deployments.get(resource_group, name)
        return result.properties.outputs

    def cancel(self, resource_group: str, name: str) -> None:
        """Cancel a running deployment (ARM rejects this if none is running)."""
        with provider_call(f"Cancel deployment '{name}'"):
            self.client.deployments.cancel(resource_group, name)
