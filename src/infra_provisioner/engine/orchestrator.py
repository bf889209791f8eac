"""Provisioning lifecycle: update, delete, cancel, and env."""

from __future__ import annotations

import contextlib
import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from infra_provisioner.engine.errors import SecretEnrichmentError
from infra_provisioner.engine.outputs import parse_outputs
from infra_provisioner.engine.secrets import collect_secrets, settings_from_outputs
from infra_provisioner.engine.settings import write_settings
from infra_provisioner.engine.types import DeploymentMode, ProvisionResult, Stage

if TYPE_CHECKING:
    from collections.abc import Iterator

    from infra_provisioner.config.schema import InvocationContext
    from infra_provisioner.core.naming import ResourceNames
    from infra_provisioner.core.provider import CloudProvider

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[Stage], None]


class _Stages:
    """Tracks the current stage and forwards transitions to a progress callback."""

    def __init__(self, progress: ProgressCallback | None) -> None:
        self._progress = progress
        self.current: Stage | None = None

    def enter(self, stage: Stage) -> None:
        self.current = stage
        logger.debug("Stage: %s", stage.value)
        if self._progress is not None:
            self._progress(stage)


@contextlib.contextmanager
def _tracked(progress: ProgressCallback | None) -> Iterator[_Stages]:
    """Report DONE on normal exit, FAILED on any exception (which propagates)."""
    stages = _Stages(progress)
    try:
        yield stages
    except Exception as exc:
        failed_in = stages.current.value if stages.current else "start"
        logger.error("Failed during %s: %s", failed_in, exc)
        stages.enter(Stage.FAILED)
        raise
    stages.enter(Stage.DONE)


def deployment_parameters(context: InvocationContext) -> dict[str, Any]:
    """Parameters every template receives."""
    return {
        "projectName": context.project_name,
        "environment": context.environment,
        "location": context.location,
    }


def _materialize(
    provider: CloudProvider,
    context: InvocationContext,
    raw_outputs: Any,
    stages: _Stages,
    started: float,
) -> ProvisionResult:
    """Shared tail of update/env: extract outputs, fetch secrets, write once."""
    names = context.names

    stages.enter(Stage.OUTPUTS_EXTRACTING)
    outputs = parse_outputs(raw_outputs)

    stages.enter(Stage.SECRETS_ENRICHING)
    failure: SecretEnrichmentError | None = None
    try:
        secrets = collect_secrets(provider, settings_from_outputs(outputs), names.namespace)
    except SecretEnrichmentError as exc:
        failure = exc
        secrets = exc.collected

    # Written even when some secrets failed, so the outputs are not lost.
    stages.enter(Stage.SETTINGS_WRITING)
    path = write_settings(context.environment, outputs, secrets, directory=context.work_dir)
    logger.info("Settings for environment '%s' saved to '%s'", context.environment, path)

    if failure is not None:
        raise failure

    return ProvisionResult(
        names=names,
        path=path,
        outputs=outputs,
        secrets=secrets,
        elapsed=time.monotonic() - started,
    )


def provision(
    provider: CloudProvider,
    context: InvocationContext,
    template: dict[str, Any],
    *,
    timeout: float | None = None,
    progress: ProgressCallback | None = None,
) -> ProvisionResult:
    """Create or update the environment and write its settings artifact.

    Stages: NAMESPACE_ENSURING -> DEPLOYMENT_SUBMITTING -> OUTPUTS_EXTRACTING
    -> SECRETS_ENRICHING -> SETTINGS_WRITING -> DONE (or FAILED).

    The deployment always runs in complete mode: resources in the resource
    group that the template does not declare are deleted.  Nothing is rolled
    back on failure; a resource group created before a failed deployment is
    left in place.
    """
    started = time.monotonic()
    names = context.names

    with _tracked(progress) as stages:
        stages.enter(Stage.NAMESPACE_ENSURING)
        provider.ensure_namespace(names.namespace, context.location, context.tags)
        logger.info("Resource group '%s' ready", names.namespace)

        stages.enter(Stage.DEPLOYMENT_SUBMITTING)
        raw_outputs = provider.submit_deployment(
            names.namespace,
            names.deployment,
            template,
            deployment_parameters(context),
            mode=DeploymentMode.COMPLETE,
            timeout=timeout,
        )
        logger.info("Deployment '%s' succeeded", names.deployment)

        result = _materialize(provider, context, raw_outputs, stages, started)
    return result


def show_settings(
    provider: CloudProvider,
    context: InvocationContext,
    *,
    progress: ProgressCallback | None = None,
) -> ProvisionResult:
    """Regenerate the settings artifact from the existing deployment (no submission)."""
    started = time.monotonic()
    names = context.names

    with _tracked(progress) as stages:
        stages.enter(Stage.OUTPUTS_FETCHING)
        raw_outputs = provider.deployment_outputs(names.namespace, names.deployment)
        result = _materialize(provider, context, raw_outputs, stages, started)
    return result


def teardown(provider: CloudProvider, context: InvocationContext) -> ResourceNames:
    """Delete the resource group and everything in it.  No confirmation, no dry run."""
    names = context.names
    logger.info("Deleting resource group '%s'", names.namespace)
    provider.delete_namespace(names.namespace)
    return names


def cancel(provider: CloudProvider, context: InvocationContext) -> ResourceNames:
    """Cancel the in-progress deployment of this project/environment/location."""
    names = context.names
    logger.info("Cancelling deployment '%s'", names.deployment)
    provider.cancel_deployment(names.namespace, names.deployment)
    return names
