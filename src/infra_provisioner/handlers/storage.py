"""Handler for Azure storage accounts."""

from __future__ import annotations

from typing import TYPE_CHECKING

from infra_provisioner.engine.errors import ProviderError
from infra_provisioner.handlers.base import provider_call

if TYPE_CHECKING:
    from azure.mgmt.storage import StorageManagementClient

_ENDPOINT_SUFFIX = "core.windows.net"


class StorageAccountHandler:
    """Handler for storage account keys."""

    def __init__(self, client: StorageManagementClient) -> None:
        self.client = client

    def connection_string(self, resource_group: str, name: str) -> str:
        """Build a connection string from the account's first key.

        Same layout as ``az storage account show-connection-string``.
        """
        action = f"Storage account keys for '{name}'"
        with provider_call(action):
            keys = self.client.storage_accounts.list_keys(resource_group, name).keys
        if not keys:
            raise ProviderError(action, "no account keys returned")
        key = keys[0].value
        return (
            f"DefaultEndpointsProtocol=https;EndpointSuffix={_ENDPOINT_SUFFIX};"
            f"AccountName={name};AccountKey={key}"
        )
