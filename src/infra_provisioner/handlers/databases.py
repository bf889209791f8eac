"""Handler for Cosmos DB accounts."""

from __future__ import annotations

from typing import TYPE_CHECKING

from infra_provisioner.engine.errors import ProviderError
from infra_provisioner.handlers.base import provider_call

if TYPE_CHECKING:
    from azure.mgmt.cosmosdb import CosmosDBManagementClient


class DatabaseAccountHandler:
    """Handler for Cosmos DB connection strings."""

    def __init__(self, client: CosmosDBManagementClient) -> None:
        self.client = client

    def connection_string(self, resource_group: str, name: str) -> str:
        """Return the first (primary) connection string of the account."""
        action = f"Database connection strings for '{name}'"
        with provider_call(action):
            result = self.client.database_accounts.list_connection_strings(resource_group, name)
        if not result.connection_strings:
            raise ProviderError(action, "no connection strings returned")
        return result.connection_strings[0].connection_string
