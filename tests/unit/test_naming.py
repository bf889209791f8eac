from __future__ import annotations

import pytest

from infra_provisioner.core.naming import ResourceNames, resolve_names


def test_resolve_names_format() -> None:
    names = resolve_names("demo", "dev", "westeurope")
    assert names == ResourceNames(
        namespace="rg-demo-dev",
        deployment="deployment-demo-dev-westeurope",
    )


def test_resolve_names_is_deterministic() -> None:
    assert resolve_names("demo", "prod", "eastus") == resolve_names("demo", "prod", "eastus")


def test_location_only_changes_deployment() -> None:
    a = resolve_names("demo", "dev", "eastus")
    b = resolve_names("demo", "dev", "westus")
    assert a.namespace == b.namespace
    assert a.deployment != b.deployment


@pytest.mark.parametrize(
    ("project", "environment"),
    [("other", "dev"), ("demo", "staging")],
)
def test_project_or_environment_change_both(project: str, environment: str) -> None:
    base = resolve_names("demo", "dev", "eastus")
    changed = resolve_names(project, environment, "eastus")
    assert changed.namespace != base.namespace
    assert changed.deployment != base.deployment
