"""Handler for Application Insights components (read as generic resources)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from infra_provisioner.engine.errors import ProviderError
from infra_provisioner.handlers.base import provider_call

if TYPE_CHECKING:
    from azure.mgmt.resource import ResourceManagementClient

_PROVIDER_NAMESPACE = "Microsoft.Insights"
_RESOURCE_TYPE = "components"
_API_VERSION = "2020-02-02"


class ComponentHandler:
    """Handler for Application Insights component properties."""

    def __init__(self, client: ResourceManagementClient) -> None:
        self.client = client

    def get_property(self, resource_group: str, name: str, prop: str) -> str:
        """Return one top-level property (e.g. ``InstrumentationKey``)."""
        action = f"Application Insights '{name}'"
        with provider_call(action):
            resource = self.client.resources.get(
                resource_group,
                _PROVIDER_NAMESPACE,
                "",
                _RESOURCE_TYPE,
                name,
                _API_VERSION,
            )
        properties = resource.properties or {}
        if prop not in properties:
            raise ProviderError(action, f"property '{prop}' not found")
        return str(properties[prop])
