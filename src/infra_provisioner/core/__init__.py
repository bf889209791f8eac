"""Core infrastructure components for infra-provisioner."""

from infra_provisioner.core.naming import ResourceNames, resolve_names
from infra_provisioner.core.provider import AzureProvider, CloudProvider

__all__ = ["AzureProvider", "CloudProvider", "ResourceNames", "resolve_names"]
