"""Post-deployment secret retrieval for optional resources.

Deployment outputs only carry resource *names*; credentials are fetched in a
second pass.  Each :class:`SecretSource` is keyed by the setting that
identifies its resource (e.g. ``REGISTRY_NAME``).  Sources whose setting is
missing from the deployment outputs are skipped: most resources are optional
per template.  Support for a new resource kind is added by extending
:data:`SECRET_SOURCES`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pydantic import SecretStr

from infra_provisioner.engine.errors import ProviderError, SecretEnrichmentError
from infra_provisioner.engine.settings import (
    parse_settings,
    read_text,
    settings_path,
    to_canonical_key,
    write_settings,
)
from infra_provisioner.engine.types import OutputEntry, OutputType, SecretEntry

if TYPE_CHECKING:
    from pathlib import Path

    from infra_provisioner.core.provider import CloudProvider
    from infra_provisioner.engine.settings import SettingValue

logger = logging.getLogger(__name__)

# (provider, resource group, resource name) -> secret value
SecretFetcher = Callable[["CloudProvider", str, str], str]


@dataclass(frozen=True)
class SecretQuery:
    """One secret, fetched with exactly one provider call."""

    name: str
    fetch: SecretFetcher


@dataclass(frozen=True)
class SecretSource:
    """An optional resource kind and the secrets to fetch when it exists."""

    setting: str
    description: str
    queries: tuple[SecretQuery, ...]


SECRET_SOURCES: tuple[SecretSource, ...] = (
    SecretSource(
        setting="REGISTRY_NAME",
        description="container registry",
        queries=(
            SecretQuery("REGISTRY_USERNAME", lambda p, rg, name: p.registry_username(rg, name)),
            SecretQuery("REGISTRY_PASSWORD", lambda p, rg, name: p.registry_password(rg, name)),
        ),
    ),
    SecretSource(
        setting="STORAGE_ACCOUNT_NAME",
        description="storage account",
        queries=(
            SecretQuery(
                "STORAGE_ACCOUNT_CONNECTION_STRING",
                lambda p, rg, name: p.storage_connection_string(rg, name),
            ),
        ),
    ),
    SecretSource(
        setting="APP_INSIGHTS_NAME",
        description="Application Insights",
        queries=(
            SecretQuery(
                "APP_INSIGHTS_INSTRUMENTATION_KEY",
                lambda p, rg, name: p.app_insights_property(rg, name, "InstrumentationKey"),
            ),
            SecretQuery(
                "APP_INSIGHTS_CONNECTION_STRING",
                lambda p, rg, name: p.app_insights_property(rg, name, "ConnectionString"),
            ),
        ),
    ),
    SecretSource(
        setting="DATABASE_NAME",
        description="Cosmos DB account",
        queries=(
            SecretQuery(
                "DATABASE_CONNECTION_STRING",
                lambda p, rg, name: p.database_connection_string(rg, name),
            ),
        ),
    ),
)


def _resource_name(settings: Mapping[str, SettingValue], setting: str) -> str | None:
    value = settings.get(setting)
    if isinstance(value, str) and value:
        return value
    return None


def collect_secrets(
    provider: CloudProvider,
    settings: Mapping[str, SettingValue],
    namespace: str,
    sources: Sequence[SecretSource] = SECRET_SOURCES,
) -> list[SecretEntry]:
    """Fetch the secrets of every source whose identifying setting is present.

    A failing source does not stop the others.  When any source failed,
    :class:`SecretEnrichmentError` is raised after all sources were tried,
    carrying the secrets that were collected.
    """
    collected: list[SecretEntry] = []
    failures: dict[str, str] = {}

    for source in sources:
        name = _resource_name(settings, source.setting)
        if name is None:
            logger.debug("No %s, skipping %s secrets", source.setting, source.description)
            continue

        resource = f"{source.setting}={name}"
        logger.info("Retrieving %s secrets for %s", source.description, name)
        try:
            entries = [
                SecretEntry(
                    name=query.name,
                    resource=resource,
                    value=SecretStr(query.fetch(provider, namespace, name)),
                )
                for query in source.queries
            ]
        except ProviderError as exc:
            logger.warning(
                "Could not retrieve %s secrets for %s: %s", source.description, name, exc
            )
            failures[resource] = str(exc)
            continue
        collected.extend(entries)

    if failures:
        raise SecretEnrichmentError(failures, collected)
    return collected


def settings_from_outputs(outputs: Sequence[OutputEntry]) -> dict[str, SettingValue]:
    """Canonical ``KEY -> value`` view of deployment outputs."""
    return {to_canonical_key(o.key): o.value for o in outputs}


def _outputs_from_settings(settings: Mapping[str, SettingValue]) -> list[OutputEntry]:
    return [
        OutputEntry(
            key=key,
            value=value,
            type=OutputType.ARRAY if isinstance(value, list) else OutputType.STRING,
        )
        for key, value in settings.items()
    ]


def enrich_secrets(
    provider: CloudProvider,
    environment: str,
    namespace: str,
    *,
    directory: Path,
) -> list[SecretEntry]:
    """Refresh the secrets block of an existing settings artifact.

    Standalone form of the enrichment step that ``provision`` and
    ``show_settings`` run in memory: use it to re-fetch rotated keys without
    touching the deployment.  Reads the artifact back, fetches secrets for the
    resources it names and rewrites it (outputs unchanged, secrets block
    replaced).  On partial failure the artifact is still rewritten with what
    was collected before the error propagates.
    """
    path = settings_path(environment, directory)
    outputs, previous = parse_settings(read_text(path))
    logger.debug("Read %d settings (%d old secrets) from %s", len(outputs), len(previous), path)

    entries = _outputs_from_settings(outputs)
    try:
        secrets = collect_secrets(provider, outputs, namespace)
    except SecretEnrichmentError as exc:
        write_settings(environment, entries, exc.collected, directory=directory)
        raise
    write_settings(environment, entries, secrets, directory=directory)
    logger.info("Secrets for environment '%s' saved to %s", environment, path)
    return secrets
