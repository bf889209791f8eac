"""Handler for Azure resource groups."""

from __future__ import annotations

from typing import TYPE_CHECKING

from azure.mgmt.resource.resources.models import ResourceGroup

from infra_provisioner.handlers.base import provider_call

if TYPE_CHECKING:
    from azure.mgmt.resource import ResourceManagementClient


class ResourceGroupHandler:
    """Handler for resource group operations."""

    def __init__(self, client: ResourceManagementClient) -> None:
        self.client = client

    def create_or_update(self, name: str, location: str, tags: dict[str, str]) -> None:
        """Create the group, or update its tags if it already exists."""
        with provider_call(f"Create resource group '{name}'"):
            self.client.resource_groups.create_or_update(
                name, ResourceGroup(location=location, tags=tags)
            )

    def delete(self, name: str) -> None:
        """Delete the group and everything in it, waiting for completion."""
        with provider_call(f"Delete resource group '{name}'"):
            self.client.resource_groups.begin_delete(name).result()
