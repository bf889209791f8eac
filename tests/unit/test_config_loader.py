"""Tests for defaults loading and invocation resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from infra_provisioner.config import (
    ConfigError,
    build_provider,
    load_defaults,
    resolve_context,
)


def _write_defaults(directory: Path, text: str) -> None:
    (directory / ".settings").write_text(text)


class TestLoadDefaults:
    def test_missing_file(self, tmp_path: Path) -> None:
        assert load_defaults(tmp_path) == {}

    def test_reads_key_values(self, tmp_path: Path) -> None:
        _write_defaults(
            tmp_path,
            "# local defaults\nproject_name=myapp\nlocation='west europe'\nempty\n",
        )

        assert load_defaults(tmp_path) == {"project_name": "myapp", "location": "west europe"}


class TestResolveContext:
    def test_builtin_defaults(self, tmp_path: Path) -> None:
        context = resolve_context("update", "demo", directory=tmp_path)

        assert context.project_name == "demo"
        assert context.environment == "prod"
        assert context.location == "eastus"
        assert context.work_dir == tmp_path

    def test_defaults_file_beats_builtin(self, tmp_path: Path) -> None:
        _write_defaults(tmp_path, "project_name=myapp\nenvironment=dev\nlocation=westus\n")

        context = resolve_context("env", directory=tmp_path)

        assert (context.project_name, context.environment, context.location) == (
            "myapp",
            "dev",
            "westus",
        )

    def test_explicit_beats_defaults_file(self, tmp_path: Path) -> None:
        _write_defaults(tmp_path, "project_name=myapp\nenvironment=dev\nlocation=westus\n")

        context = resolve_context("update", "other", "staging", "eastus2", directory=tmp_path)

        assert (context.project_name, context.environment, context.location) == (
            "other",
            "staging",
            "eastus2",
        )

    def test_empty_default_falls_through(self, tmp_path: Path) -> None:
        _write_defaults(tmp_path, "environment=\n")

        assert resolve_context("update", "demo", directory=tmp_path).environment == "prod"

    def test_missing_project(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="project name is required"):
            resolve_context("update", directory=tmp_path)

    def test_unknown_command(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            resolve_context("deploy", "demo", directory=tmp_path)  # type: ignore[arg-type]

    def test_names_and_tags(self, tmp_path: Path) -> None:
        context = resolve_context("update", "demo", "dev", "westeurope", directory=tmp_path)

        assert context.names.namespace == "rg-demo-dev"
        assert context.names.deployment == "deployment-demo-dev-westeurope"
        assert context.tags == {
            "project": "demo",
            "environment": "dev",
            "managedBy": "infra-provisioner",
        }


class TestBuildProvider:
    def test_from_environment(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AZURE_SUBSCRIPTION_ID", "sub-env")
        _write_defaults(tmp_path, "AZURE_SUBSCRIPTION_ID=sub-file\n")

        assert build_provider(tmp_path).subscription_id == "sub-env"

    def test_from_defaults_file(self, tmp_path: Path) -> None:
        _write_defaults(tmp_path, "AZURE_SUBSCRIPTION_ID=sub-file\n")

        assert build_provider(tmp_path).subscription_id == "sub-file"

    def test_missing_subscription(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="AZURE_SUBSCRIPTION_ID"):
            build_provider(tmp_path)
