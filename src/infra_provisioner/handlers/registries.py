"""Handler for Azure container registries."""

from __future__ import annotations

from typing import TYPE_CHECKING

from infra_provisioner.engine.errors import ProviderError
from infra_provisioner.handlers.base import provider_call

if TYPE_CHECKING:
    from azure.mgmt.containerregistry import ContainerRegistryManagementClient


class RegistryHandler:
    """Handler for container registry admin credentials."""

    def __init__(self, client: ContainerRegistryManagementClient) -> None:
        self.client = client

    def username(self, resource_group: str, name: str) -> str:
        action = f"Registry credentials for '{name}'"
        with provider_call(action):
            username = self.client.registries.list_credentials(resource_group, name).username
        if not username:
            raise ProviderError(action, "no admin username returned")
        return username

    def password(self, resource_group: str, name: str) -> str:
        """Return the first admin password."""
        action = f"Registry credentials for '{name}'"
        with provider_call(action):
            passwords = self.client.registries.list_credentials(resource_group, name).passwords
        if not passwords:
            raise ProviderError(action, "no admin passwords returned")
        return passwords[0].value
