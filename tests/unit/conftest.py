"""Shared fixtures for unit tests."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest

from infra_provisioner.config.schema import InvocationContext
from infra_provisioner.engine.errors import ProviderError

if TYPE_CHECKING:
    from collections.abc import Callable

    from infra_provisioner.engine.types import DeploymentMode

_ENV_VARS = ("AZURE_SUBSCRIPTION_ID", "INFRA_LOG", "NO_COLOR")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove AZURE_*/INFRA_* env vars so unit tests don't leak host config."""
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)


class FakeProvider:
    """In-memory CloudProvider returning scripted outputs and secrets.

    ``fail`` maps a method name to the exception it raises.
    """

    def __init__(
        self,
        outputs: Any = None,
        *,
        secrets: dict[str, str] | None = None,
        fail: dict[str, Exception] | None = None,
    ) -> None:
        self.outputs = outputs
        self.secrets = secrets or {}
        self.fail = fail or {}
        self.calls: list[tuple[Any, ...]] = []
        self.modes: list[DeploymentMode] = []

    def _record(self, method: str, *args: Any) -> None:
        self.calls.append((method, *args))
        if method in self.fail:
            raise self.fail[method]

    def called(self, method: str) -> list[tuple[Any, ...]]:
        return [c for c in self.calls if c[0] == method]

    def ensure_namespace(self, name: str, location: str, tags: dict[str, str]) -> None:
        self._record("ensure_namespace", name, location, tags)

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
        self.modes.append(mode)
        self._record("submit_deployment", namespace, name, template, parameters, timeout)
        return self.outputs

    def deployment_outputs(self, namespace: str, name: str) -> Any:
        self._record("deployment_outputs", namespace, name)
        return self.outputs

    def cancel_deployment(self, namespace: str, name: str) -> None:
        self._record("cancel_deployment", namespace, name)

    def delete_namespace(self, name: str) -> None:
        self._record("delete_namespace", name)

    def _secret(self, method: str, namespace: str, name: str, *extra: str) -> str:
        self._record(method, namespace, name, *extra)
        key = ":".join((method, *extra))
        if key not in self.secrets:
            raise ProviderError(method, f"no secret scripted for {name}")
        return self.secrets[key]

    def registry_username(self, namespace: str, name: str) -> str:
        return self._secret("registry_username", namespace, name)

    def registry_password(self, namespace: str, name: str) -> str:
        return self._secret("registry_password", namespace, name)

    def storage_connection_string(self, namespace: str, name: str) -> str:
        return self._secret("storage_connection_string", namespace, name)

    def app_insights_property(self, namespace: str, name: str, prop: str) -> str:
        return self._secret("app_insights_property", namespace, name, prop)

    def database_connection_string(self, namespace: str, name: str) -> str:
        return self._secret("database_connection_string", namespace, name)


_ALL_SECRETS = {
    "registry_username": "cruser",
    "registry_password": "crp@ss'word",
    "storage_connection_string": "DefaultEndpointsProtocol=https;AccountName=st;AccountKey=k==",
    "app_insights_property:InstrumentationKey": "ikey-123",
    "app_insights_property:ConnectionString": "InstrumentationKey=ikey-123;IngestionEndpoint=x",
    "database_connection_string": "AccountEndpoint=https://db/;AccountKey=abc==;",
}


@pytest.fixture
def all_secrets() -> dict[str, str]:
    """Scripted secrets for every built-in secret source."""
    return dict(_ALL_SECRETS)


@pytest.fixture
def fake_provider() -> Callable[..., FakeProvider]:
    """Factory fixture for FakeProvider."""

    def _make(outputs: Any = None, **kwargs: Any) -> FakeProvider:
        return FakeProvider(outputs, **kwargs)

    return _make


@pytest.fixture
def make_context(tmp_path: Path) -> Callable[..., InvocationContext]:
    """Factory fixture: InvocationContext rooted in ``tmp_path``."""

    def _make(
        command: str = "update",
        project: str = "demo",
        environment: str = "dev",
        location: str = "westeurope",
    ) -> InvocationContext:
        return InvocationContext(
            command=command,
            project_name=project,
            environment=environment,
            location=location,
            work_dir=tmp_path,
        )

    return _make
