"""Shared helpers for Azure handlers."""

from __future__ import annotations

import contextlib
import logging
from typing import TYPE_CHECKING

from azure.core.exceptions import AzureError

from infra_provisioner.engine.errors import ProviderError

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)


def _message(exc: AzureError) -> str:
    # HttpResponseError carries the ARM error body in `message`; fall back to str().
    return getattr(exc, "message", None) or str(exc)


@contextlib.contextmanager
def provider_call(action: str) -> Iterator[None]:
    """Re-raise SDK errors as :class:`ProviderError` with the provider's message."""
    logger.debug("Provider call: %s", action)
    try:
        yield
    except AzureError as exc:
        raise ProviderError(action, _message(exc)) from exc
