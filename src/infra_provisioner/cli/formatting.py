"""Usage text, stage labels, and result summaries."""

from __future__ import annotations

from typing import TYPE_CHECKING

import typer

from infra_provisioner.engine.types import Stage

if TYPE_CHECKING:
    from collections.abc import Callable

    from infra_provisioner.config.schema import InvocationContext
    from infra_provisioner.engine.types import ProvisionResult

USAGE = """\
Usage: infra-provisioner <command> <project_name> [environment_name] [location]
Manages the Azure infrastructure for this project.

Commands:
  update   Creates or updates the infrastructure for this project.
  delete   Deletes the infrastructure for this project.
  cancel   Cancels the last infrastructure deployment.
  env      Retrieve settings for the target environment.
"""

_STAGE_LABELS: dict[Stage, str] = {
    Stage.NAMESPACE_ENSURING: "Preparing resource group {namespace}",
    Stage.DEPLOYMENT_SUBMITTING: "Deploying {deployment}",
    Stage.OUTPUTS_FETCHING: "Reading outputs of {deployment}",
    Stage.OUTPUTS_EXTRACTING: "Extracting outputs",
    Stage.SECRETS_ENRICHING: "Retrieving secrets",
    Stage.SETTINGS_WRITING: "Writing settings",
}


def styler(color: bool) -> Callable[..., str]:
    """Return ``typer.style`` when *color* is True, otherwise a passthrough."""
    if color:
        return typer.style
    return lambda text, **_kw: text


def stage_label(stage: Stage, context: InvocationContext) -> str | None:
    """Human label for a running stage; ``None`` for DONE/FAILED."""
    template = _STAGE_LABELS.get(stage)
    if template is None:
        return None
    names = context.names
    return template.format(namespace=names.namespace, deployment=names.deployment)


def describe(context: InvocationContext) -> str:
    return f"environment '{context.environment}' of project '{context.project_name}'"


def format_complete_mode_warning(context: InvocationContext, *, color: bool = True) -> str:
    style = styler(color)
    return style(
        f"Warning: deploying in complete mode. Resources in '{context.names.namespace}' "
        "that the template does not declare will be deleted.",
        fg="yellow",
    )


def _plural(n: int, word: str) -> str:
    return f"{n} {word}{'s' if n != 1 else ''}"


def format_result_summary(result: ProvisionResult, *, color: bool = True) -> str:
    """Render ``Saved 3 settings and 2 secrets to '.dev.env'.``"""
    style = styler(color)
    counts = result.summary()
    return (
        f"Saved {style(_plural(counts['settings'], 'setting'), fg='green')} and "
        f"{style(_plural(counts['secrets'], 'secret'), fg='green')} to '{result.path.name}'."
    )


def format_elapsed(seconds: float) -> str:
    return f"Done in {int(seconds)}s"
