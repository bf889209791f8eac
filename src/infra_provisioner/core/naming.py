"""Deterministic names for the resource group and deployment of an environment."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ResourceNames:
    """Provider-side identities for one project/environment/location."""

    namespace: str
    deployment: str


def namespace_name(project: str, environment: str) -> str:
    return f"rg-{project}-{environment}"


def deployment_name(project: str, environment: str, location: str) -> str:
    return f"deployment-{project}-{environment}-{location}"


def resolve_names(project: str, environment: str, location: str) -> ResourceNames:
    """Compute the resource group and deployment names.

    The location only affects the deployment name: one resource group per
    project/environment, one deployment per project/environment/location.
    Re-submitting under the same deployment name supersedes the previous one,
    which is what lets ``cancel`` and ``env`` find it again.
    """
    return ResourceNames(
        namespace=namespace_name(project, environment),
        deployment=deployment_name(project, environment, location),
    )
