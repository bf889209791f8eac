"""Handlers for Azure resource types."""

from infra_provisioner.handlers.components import ComponentHandler
from infra_provisioner.handlers.databases import DatabaseAccountHandler
from infra_provisioner.handlers.deployments import DeploymentHandler
from infra_provisioner.handlers.groups import ResourceGroupHandler
from infra_provisioner.handlers.registries import RegistryHandler
from infra_provisioner.handlers.storage import StorageAccountHandler

__all__ = [
    "ComponentHandler",
    "DatabaseAccountHandler",
    "DeploymentHandler",
    "RegistryHandler",
    "ResourceGroupHandler",
    "StorageAccountHandler",
]
