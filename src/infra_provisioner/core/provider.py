"""Cloud provider boundary and its Azure implementation."""

from __future__ import annotations

from functools import cached_property
from typing import TYPE_CHECKING, Any, Protocol, Self

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from azure.core.credentials import TokenCredential
    from azure.mgmt.containerregistry import ContainerRegistryManagementClient
    from azure.mgmt.cosmosdb import CosmosDBManagementClient
    from azure.mgmt.resource import ResourceManagementClient
    from azure.mgmt.storage import StorageManagementClient

    from infra_provisioner.engine.types import DeploymentMode
    from infra_provisioner.handlers import (
        ComponentHandler,
        DatabaseAccountHandler,
        DeploymentHandler,
        RegistryHandler,
        ResourceGroupHandler,
        StorageAccountHandler,
    )


class CloudProvider(Protocol):
    """Operations the orchestrators need from the control plane.

    Every call is a blocking round trip.  Failures raise
    :class:`~infra_provisioner.engine.errors.ProviderError`.
    """

    def ensure_namespace(self, name: str, location: str, tags: dict[str, str]) -> None: ...

    def submit_deployment(
        self,
        namespace: str,
        name: str,
        template: dict[str, Any],
        parameters: dict[str, Any],
        *,
        mode: DeploymentMode,
        timeout: float | None = None,
    ) -> Any: ...

    def deployment_outputs(self, namespace: str, name: str) -> Any: ...

    def cancel_deployment(self, namespace: str, name: str) -> None: ...

    def delete_namespace(self, name: str) -> None: ...

    def registry_username(self, namespace: str, name: str) -> str: ...

    def registry_password(self, namespace: str, name: str) -> str: ...

    def storage_connection_string(self, namespace: str, name: str) -> str: ...

    def app_insights_property(self, namespace: str, name: str, prop: str) -> str: ...

    def database_connection_string(self, namespace: str, name: str) -> str: ...


class AzureProvider(BaseModel):
    """Azure Resource Manager access for one subscription.

    For normal use, provide the subscription id (credentials come from
    ``DefaultAzureCredential``).  For testing, use `from_clients` to inject
    SDK clients.

    Examples:
        provider = AzureProvider(subscription_id="00000000-0000-0000-0000-000000000000")

        provider = AzureProvider.from_clients(resources=MagicMock())
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    subscription_id: str | None = None
    credential: Any = None

    # Injected SDK clients (for testing), keyed by client property name
    _injected_clients: dict[str, Any] = {}

    @classmethod
    def from_clients(cls, **clients: Any) -> Self:
        """Create a provider with injected SDK clients.

        Accepted keys: ``resources``, ``registries``, ``storage``, ``cosmosdb``.
        Clients that are not injected are built on first use.
        """
        provider = cls.model_construct()
        provider._injected_clients = dict(clients)
        return provider

    def _client_args(self) -> tuple[TokenCredential, str]:
        if self.subscription_id is None:
            raise ValueError(
                "Either provide subscription_id, or use AzureProvider.from_clients() "
                "to inject clients"
            )
        credential = self.credential
        if credential is None:
            from azure.identity import DefaultAzureCredential

            credential = DefaultAzureCredential()
        return credential, self.subscription_id

    # SDK clients
    @cached_property
    def resource_client(self) -> ResourceManagementClient:
        if "resources" in self._injected_clients:
            return self._injected_clients["resources"]
        from azure.mgmt.resource import ResourceManagementClient

        return ResourceManagementClient(*self._client_args())

    @cached_property
    def registry_client(self) -> ContainerRegistryManagementClient:
        if "registries" in self._injected_clients:
            return self._injected_clients["registries"]
        from azure.mgmt.containerregistry import ContainerRegistryManagementClient

        return ContainerRegistryManagementClient(*self._client_args())

    @cached_property
    def storage_client(self) -> StorageManagementClient:
        if "storage" in self._injected_clients:
            return self._injected_clients["storage"]
        from azure.mgmt.storage import StorageManagementClient

        return StorageManagementClient(*self._client_args())

    @cached_property
    def cosmosdb_client(self) -> CosmosDBManagementClient:
        if "cosmosdb" in self._injected_clients:
            return self._injected_clients["cosmosdb"]
        from azure.mgmt.cosmosdb import CosmosDBManagementClient

        return CosmosDBManagementClient(*self._client_args())

    # Handlers for each Azure concept
    @cached_property
    def groups(self) -> ResourceGroupHandler:
        from infra_provisioner.handlers import ResourceGroupHandler

        return ResourceGroupHandler(self.resource_client)

    @cached_property
    def deployments(self) -> DeploymentHandler:
        from infra_provisioner.handlers import DeploymentHandler

        return DeploymentHandler(self.resource_client)

    @cached_property
    def components(self) -> ComponentHandler:
        from infra_provisioner.handlers import ComponentHandler

        return ComponentHandler(self.resource_client)

    @cached_property
    def registries(self) -> RegistryHandler:
        from infra_provisioner.handlers import RegistryHandler

        return RegistryHandler(self.registry_client)

    @cached_property
    def storage_accounts(self) -> StorageAccountHandler:
        from infra_provisioner.handlers import StorageAccountHandler

        return StorageAccountHandler(self.storage_client)

    @cached_property
    def database_accounts(self) -> DatabaseAccountHandler:
        from infra_provisioner.handlers import DatabaseAccountHandler

        return DatabaseAccountHandler(self.cosmosdb_client)

    # CloudProvider
    def ensure_namespace(self, name: str, location: str, tags: dict[str, str]) -> None:
        self.groups.create_or_update(name, location, tags)

    def submit_deployment(
        self,
        namespace: str,
        name: str,
        template: dict[str, Any],
        parameters: dict[str, Any],
        *,
        mode: DeploymentMode,
        timeout: float | None = None,
    ) -> Any:
        return self.deployments.submit(
            namespace, name, template, parameters, mode=mode.value, timeout=timeout
        )

    def deployment_outputs(self, namespace: str, name: str) -> Any:
        return self.deployments.outputs(namespace, name)

    def cancel_deployment(self, namespace: str, name: str) -> None:
        self.deployments.cancel(namespace, name)

    def delete_namespace(self, name: str) -> None:
        self.groups.delete(name)

    def registry_username(self, namespace: str, name: str) -> str:
        return self.registries.username(namespace, name)

    def registry_password(self, namespace: str, name: str) -> str:
        return self.registries.password(namespace, name)

    def storage_connection_string(self, namespace: str, name: str) -> str:
        return self.storage_accounts.connection_string(namespace, name)

    def app_insights_property(self, namespace: str, name: str, prop: str) -> str:
        return self.components.get_property(namespace, name, prop)

    def database_connection_string(self, namespace: str, name: str) -> str:
        return self.database_accounts.connection_string(namespace, name)
