"""Map exceptions to clean stderr messages and exit codes."""

from __future__ import annotations

import typer


def _err(msg: str, *, fg: str | None) -> None:
    """Print a styled message to stderr."""
    typer.echo(typer.style(msg, fg=fg), err=True)


def usage_error(message: str) -> int:
    """Print the usage text to stdout and *message* to stderr; return exit code 1."""
    from infra_provisioner.cli.formatting import USAGE

    typer.echo(USAGE)
    _err(f"Error: {message}", fg=None)
    return 1


def handle_error(exc: Exception, *, color: bool = True) -> int:
    """Print a clean error message to stderr and return an exit code.

    All errors map to exit code 1.  No tracebacks are printed.
    """
    from infra_provisioner.config.loader import ConfigError
    from infra_provisioner.engine.errors import (
        DeploymentTimeoutError,
        OutputContractError,
        ProviderError,
        SecretEnrichmentError,
        SettingsWriteError,
        TemplateError,
    )

    fg = typer.colors.RED if color else None

    if isinstance(exc, ConfigError):
        _err(f"Configuration error: {exc}", fg=fg)
    elif isinstance(exc, TemplateError):
        _err(f"Template error: {exc}", fg=fg)
    elif isinstance(exc, DeploymentTimeoutError):
        _err(f"Timed out: {exc}", fg=fg)
        _err("  Run 'cancel' to stop the deployment.", fg=fg)
    elif isinstance(exc, ProviderError):
        _err(f"Azure error: {exc}", fg=fg)
    elif isinstance(exc, OutputContractError):
        _err(f"Unexpected deployment outputs: {exc}", fg=fg)
    elif isinstance(exc, SettingsWriteError):
        _err(f"Settings error: {exc}", fg=fg)
    elif isinstance(exc, SecretEnrichmentError):
        _err("Secret retrieval failed:", fg=fg)
        for source, reason in exc.failures.items():
            _err(f"  - {source}: {reason}", fg=fg)
        _err(f"  {len(exc.collected)} other secret(s) were saved.", fg=fg)
    else:
        _err(f"Error: {exc}", fg=fg)

    return 1
