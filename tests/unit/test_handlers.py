"""Error mapping and waiting behaviour of the Azure handlers."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from azure.core.exceptions import AzureError, HttpResponseError

from infra_provisioner.engine.errors import DeploymentTimeoutError, ProviderError
from infra_provisioner.handlers import (
    ComponentHandler,
    DatabaseAccountHandler,
    DeploymentHandler,
    RegistryHandler,
    ResourceGroupHandler,
    StorageAccountHandler,
)
from infra_provisioner.handlers.base import provider_call


class TestProviderCall:
    def test_wraps_azure_error(self) -> None:
        cause = AzureError("quota exceeded")

        with pytest.raises(ProviderError, match="Deploy: quota exceeded") as exc_info:
            with provider_call("Deploy"):
                raise cause

        assert exc_info.value.action == "Deploy"
        assert exc_info.value.__cause__ is cause

    def test_other_errors_propagate_unchanged(self) -> None:
        with pytest.raises(KeyError), provider_call("Deploy"):
            raise KeyError("x")


def test_resource_group_failure_is_provider_error() -> None:
    client = MagicMock()
    client.resource_groups.create_or_update.side_effect = HttpResponseError(
        message="AuthorizationFailed"
    )

    with pytest.raises(ProviderError, match="AuthorizationFailed") as exc_info:
        ResourceGroupHandler(client).create_or_update("rg", "eastus", {})

    assert "rg" in exc_info.value.action


class TestDeploymentHandler:
    def test_timeout_raises_when_not_done(self) -> None:
        client = MagicMock()
        poller = client.deployments.begin_create_or_update.return_value
        poller.done.return_value = False

        with pytest.raises(DeploymentTimeoutError) as exc_info:
            DeploymentHandler(client).submit("rg", "dep", {}, {}, mode="Complete", timeout=5)

        poller.wait.assert_called_once_with(5)
        poller.result.assert_not_called()
        assert exc_info.value.deployment == "dep"
        assert "5s" in str(exc_info.value)

    def test_finishes_within_timeout(self) -> None:
        client = MagicMock()
        poller = client.deployments.begin_create_or_update.return_value
        poller.done.return_value = True
        poller.result.return_value.properties.outputs = {}

        outputs = DeploymentHandler(client).submit("rg", "dep", {}, {}, mode="Complete", timeout=5)

        assert outputs == {}

    def test_failed_deployment_carries_provider_message(self) -> None:
        client = MagicMock()
        poller = client.deployments.begin_create_or_update.return_value
        poller.result.side_effect = HttpResponseError(message="InvalidTemplate: bad resource")

        with pytest.raises(ProviderError, match="InvalidTemplate: bad resource"):
            DeploymentHandler(client).submit("rg", "dep", {}, {}, mode="Complete")

    def test_cancel_without_running_deployment(self) -> None:
        client = MagicMock()
        client.deployments.cancel.side_effect = HttpResponseError(message="DeploymentNotActive")

        with pytest.raises(ProviderError, match="DeploymentNotActive"):
            DeploymentHandler(client).cancel("rg", "dep")


def test_registry_failure_is_provider_error() -> None:
    client = MagicMock()
    client.registries.list_credentials.side_effect = HttpResponseError(
        message="admin user is disabled"
    )

    with pytest.raises(ProviderError, match="admin user is disabled"):
        RegistryHandler(client).password("rg", "cr")


def test_component_missing_property() -> None:
    client = MagicMock()
    client.resources.get.return_value.properties = {"ConnectionString": "x"}

    with pytest.raises(ProviderError, match="InstrumentationKey"):
        ComponentHandler(client).get_property("rg", "appi", "InstrumentationKey")


class TestEmptyCredentialResponses:
    @pytest.mark.parametrize("passwords", [[], None])
    def test_registry_without_passwords(self, passwords) -> None:
        client = MagicMock()
        client.registries.list_credentials.return_value.passwords = passwords

        with pytest.raises(ProviderError, match="no admin passwords"):
            RegistryHandler(client).password("rg", "cr")

    def test_registry_without_username(self) -> None:
        client = MagicMock()
        client.registries.list_credentials.return_value.username = None

        with pytest.raises(ProviderError, match="no admin username"):
            RegistryHandler(client).username("rg", "cr")

    @pytest.mark.parametrize("keys", [[], None])
    def test_storage_without_keys(self, keys) -> None:
        client = MagicMock()
        client.storage_accounts.list_keys.return_value.keys = keys

        with pytest.raises(ProviderError, match="no account keys"):
            StorageAccountHandler(client).connection_string("rg", "st")

    @pytest.mark.parametrize("connection_strings", [[], None])
    def test_database_without_connection_strings(self, connection_strings) -> None:
        client = MagicMock()
        result = client.database_accounts.list_connection_strings.return_value
        result.connection_strings = connection_strings

        with pytest.raises(ProviderError, match="no connection strings"):
            DatabaseAccountHandler(client).connection_string("rg", "db")
