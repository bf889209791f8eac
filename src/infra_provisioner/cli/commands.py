"""CLI command implementations."""

from __future__ import annotations

import os
import time
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer

from infra_provisioner.cli import app
from infra_provisioner.cli.errors import handle_error, usage_error

if TYPE_CHECKING:
    from collections.abc import Callable

    from infra_provisioner.config.schema import Command, InvocationContext
    from infra_provisioner.engine.orchestrator import ProgressCallback
    from infra_provisioner.engine.types import ProvisionResult

ProjectName = Annotated[
    str | None,
    typer.Argument(help="Project name [default: project_name in .settings].", show_default=False),
]

EnvironmentName = Annotated[
    str | None,
    typer.Argument(help="Environment name [default: prod].", show_default=False),
]

Location = Annotated[
    str | None,
    typer.Argument(help="Azure region [default: eastus].", show_default=False),
]

WorkDir = Annotated[
    Path,
    typer.Option("--dir", "-d", help="Directory holding .settings and the generated .env files."),
]

NoColor = Annotated[
    bool,
    typer.Option("--no-color", help="Disable colored output."),
]


def _use_color(no_color: bool) -> bool:
    """Determine whether to use color output."""
    return not (no_color or os.environ.get("NO_COLOR"))


def _resolve(
    command: Command,
    project: str | None,
    environment: str | None,
    location: str | None,
    work_dir: Path,
    *,
    color: bool,
) -> InvocationContext:
    """Resolve the invocation; a missing project name is a usage error."""
    from infra_provisioner.config import ConfigError, resolve_context

    try:
        return resolve_context(command, project, environment, location, directory=work_dir)
    except ConfigError as exc:
        if project is None:
            raise typer.Exit(usage_error(str(exc))) from exc
        raise typer.Exit(handle_error(exc, color=color)) from exc


def _run_with_progress(
    context: InvocationContext,
    run: Callable[[ProgressCallback], ProvisionResult],
    *,
    color: bool,
) -> ProvisionResult:
    """Run an orchestrator with a Rich spinner and one line per finished stage."""
    from rich.console import Console
    from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

    from infra_provisioner.cli.formatting import stage_label
    from infra_provisioner.engine.types import Stage

    console = Console(no_color=not color)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Starting", total=None)

        def on_stage(stage: Stage) -> None:
            label = stage_label(stage, context)
            if label is not None:
                progress.update(task, description=f"{label}...")
                progress.console.print(f"  {label}")

        return run(on_stage)


def _print_result(result: ProvisionResult, context: InvocationContext, *, color: bool) -> None:
    from infra_provisioner.cli.formatting import format_result_summary

    typer.echo(format_result_summary(result, color=color))
    typer.echo(f"Settings for environment '{context.environment}' saved to '{result.path}'.")


@app.command()
def update(
    project: ProjectName = None,
    environment: EnvironmentName = None,
    location: Location = None,
    work_dir: WorkDir = Path(),
    template: Annotated[
        Path | None,
        typer.Option(
            "--template",
            "-t",
            help="Bicep or ARM JSON template [default: <dir>/infra/main.bicep].",
            show_default=False,
        ),
    ] = None,
    timeout: Annotated[
        float | None,
        typer.Option("--timeout", help="Give up waiting for the deployment after N seconds."),
    ] = None,
    no_color: NoColor = False,
) -> None:
    """Creates or updates the infrastructure for this project."""
    from infra_provisioner.cli.formatting import (
        describe,
        format_complete_mode_warning,
        format_elapsed,
    )
    from infra_provisioner.config import build_provider
    from infra_provisioner.core.template import DEFAULT_TEMPLATE, load_template
    from infra_provisioner.engine import provision

    started = time.monotonic()
    color = _use_color(no_color)
    ctx = _resolve("update", project, environment, location, work_dir, color=color)

    typer.echo(f"Preparing {describe(ctx)}...")
    typer.echo(format_complete_mode_warning(ctx, color=color), err=True)
    try:
        provider = build_provider(work_dir)
        template_doc = load_template(
            template if template is not None else work_dir / DEFAULT_TEMPLATE
        )
        result = _run_with_progress(
            ctx,
            lambda on_stage: provision(
                provider, ctx, template_doc, timeout=timeout, progress=on_stage
            ),
            color=color,
        )
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    _print_result(result, ctx, color=color)
    typer.echo(f"Environment '{ctx.environment}' of project '{ctx.project_name}' ready.")
    typer.echo(format_elapsed(time.monotonic() - started))


@app.command()
def delete(
    project: ProjectName = None,
    environment: EnvironmentName = None,
    location: Location = None,
    work_dir: WorkDir = Path(),
    no_color: NoColor = False,
) -> None:
    """Deletes the infrastructure for this project."""
    from infra_provisioner.cli.formatting import describe, format_elapsed
    from infra_provisioner.config import build_provider
    from infra_provisioner.engine import teardown

    started = time.monotonic()
    color = _use_color(no_color)
    ctx = _resolve("delete", project, environment, location, work_dir, color=color)

    typer.echo(f"Deleting {describe(ctx)}...")
    try:
        provider = build_provider(work_dir)
        teardown(provider, ctx)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    typer.echo(f"Environment '{ctx.environment}' of project '{ctx.project_name}' deleted.")
    typer.echo(format_elapsed(time.monotonic() - started))


@app.command()
def cancel(
    project: ProjectName = None,
    environment: EnvironmentName = None,
    location: Location = None,
    work_dir: WorkDir = Path(),
    no_color: NoColor = False,
) -> None:
    """Cancels the last infrastructure deployment."""
    from infra_provisioner.cli.formatting import describe, format_elapsed
    from infra_provisioner.config import build_provider
    from infra_provisioner.engine import cancel as cancel_fn

    started = time.monotonic()
    color = _use_color(no_color)
    ctx = _resolve("cancel", project, environment, location, work_dir, color=color)

    typer.echo(f"Cancelling preparation of {describe(ctx)}...")
    try:
        provider = build_provider(work_dir)
        names = cancel_fn(provider, ctx)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    typer.echo(f"Deployment '{names.deployment}' cancelled.")
    typer.echo(format_elapsed(time.monotonic() - started))


@app.command(name="env")
def env_cmd(
    project: ProjectName = None,
    environment: EnvironmentName = None,
    location: Location = None,
    work_dir: WorkDir = Path(),
    no_color: NoColor = False,
) -> None:
    """Retrieve settings for the target environment."""
    from infra_provisioner.cli.formatting import describe, format_elapsed
    from infra_provisioner.config import build_provider
    from infra_provisioner.engine import show_settings

    started = time.monotonic()
    color = _use_color(no_color)
    ctx = _resolve("env", project, environment, location, work_dir, color=color)

    typer.echo(f"Retrieving settings for {describe(ctx)}...")
    try:
        provider = build_provider(work_dir)
        result = _run_with_progress(
            ctx,
            lambda on_stage: show_settings(provider, ctx, progress=on_stage),
            color=color,
        )
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    _print_result(result, ctx, color=color)
    typer.echo(format_elapsed(time.monotonic() - started))
