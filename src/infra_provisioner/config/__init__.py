"""Invocation configuration and provider construction."""

from __future__ import annotations

from infra_provisioner.config.loader import (
    ConfigError,
    build_provider,
    load_defaults,
    resolve_context,
)
from infra_provisioner.config.schema import InvocationContext, ProviderConfig

__all__ = [
    "ConfigError",
    "InvocationContext",
    "ProviderConfig",
    "build_provider",
    "load_defaults",
    "resolve_context",
]
