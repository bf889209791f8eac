"""CLI application for infra-provisioner."""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import typer
from typer.core import TyperGroup

from infra_provisioner import __version__


class _UsageGroup(TyperGroup):
    """Command group that answers unknown commands with the usage text (exit 1)."""

    def resolve_command(
        self, ctx: typer.Context, args: list[str]
    ) -> tuple[str | None, Any, list[str]]:
        name = args[0] if args else ""
        if name and not name.startswith("-") and self.get_command(ctx, name) is None:
            from infra_provisioner.cli.errors import usage_error

            raise typer.Exit(usage_error(f"unknown command '{name}'."))
        return super().resolve_command(ctx, args)


app = typer.Typer(
    name="infra-provisioner",
    cls=_UsageGroup,
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"infra-provisioner {__version__}")
        raise typer.Exit


_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"
_VALID_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _configure_logging(verbose: int) -> None:
    """Set up stdlib logging based on ``-v`` flags or ``INFRA_LOG`` env var."""
    env_level = os.environ.get("INFRA_LOG", "").upper()
    if env_level:
        if env_level not in _VALID_LEVELS:
            print(
                f"WARNING: invalid INFRA_LOG level '{env_level}', "
                f"expected one of {', '.join(sorted(_VALID_LEVELS))}; defaulting to INFO",
                file=sys.stderr,
            )
        level = getattr(logging, env_level, logging.INFO)
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose >= 1:
        level = logging.INFO
    else:
        return  # no flag: stay unconfigured (silent)
    # Azure SDK loggers stay at WARNING; only ours follow the flag.
    logging.basicConfig(
        level=logging.WARNING,
        format=_LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )
    logging.getLogger("infra_provisioner").setLevel(level)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase log verbosity (-v info, -vv debug).",
    ),
) -> None:
    """Manages the Azure infrastructure for a project."""
    _ = version
    _configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        from infra_provisioner.cli.errors import usage_error

        raise typer.Exit(usage_error("command is required."))


# Register commands after app is created to avoid circular imports.
from infra_provisioner.cli import commands as _commands  # noqa: E402, F401
