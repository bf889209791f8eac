"""Deployment output extraction."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from infra_provisioner.engine.errors import OutputContractError
from infra_provisioner.engine.types import OutputEntry, OutputType

logger = logging.getLogger(__name__)


def stringify(value: Any) -> str:
    """Convert a JSON scalar (or object) output value to its settings text."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    if isinstance(value, int | float):
        return str(value)
    return json.dumps(value, separators=(",", ":"), sort_keys=True)


def parse_output(key: str, raw: Any) -> OutputEntry:
    """Parse one ``{"type": ..., "value": ...}`` output record."""
    if not isinstance(raw, Mapping) or "type" not in raw or "value" not in raw:
        raise OutputContractError(f"Output '{key}' is not a {{type, value}} record: {raw!r}")

    try:
        output_type = OutputType.parse(str(raw["type"]))
    except ValueError as exc:
        raise OutputContractError(f"Output '{key}': {exc}") from exc

    value = raw["value"]
    if output_type == OutputType.ARRAY:
        if not isinstance(value, list):
            raise OutputContractError(f"Output '{key}' has type Array but value {value!r}")
        return OutputEntry(key=key, value=[stringify(v) for v in value], type=output_type)
    return OutputEntry(key=key, value=stringify(value), type=output_type)


def parse_outputs(raw: Any) -> list[OutputEntry]:
    """Turn a provider output map into an ordered list of entries.

    ``None`` means the template declares no outputs.  Any other non-mapping
    is a contract violation.
    """
    if raw is None:
        logger.debug("Deployment returned no outputs")
        return []
    if not isinstance(raw, Mapping):
        raise OutputContractError(f"Deployment outputs must be a mapping, got {type(raw).__name__}")

    entries = [parse_output(str(key), value) for key, value in raw.items()]
    logger.debug("Extracted %d outputs", len(entries))
    return entries
