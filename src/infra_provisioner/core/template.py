"""Infrastructure template loading (ARM JSON or Bicep)."""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Any

from infra_provisioner.engine.errors import TemplateError

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE = Path("infra/main.bicep")


def load_template(path: Path) -> dict[str, Any]:
    """Load a template as an ARM JSON document.

    ``.bicep`` files are compiled with the Azure CLI; anything else is read
    as JSON.
    """
    path = Path(path)
    if not path.is_file():
        raise TemplateError(f"Template not found: {path}")

    if path.suffix == ".bicep":
        text = _build_bicep(path)
    else:
        text = path.read_text(encoding="utf-8")

    try:
        template = json.loads(text)
    except json.JSONDecodeError as exc:
        raise TemplateError(f"Template {path} is not valid JSON: {exc}") from exc
    if not isinstance(template, dict):
        raise TemplateError(f"Template {path} must be a JSON object")

    logger.debug("Loaded template %s (%d resources)", path, len(template.get("resources", [])))
    return template


def _build_bicep(path: Path) -> str:
    cmd = ["az", "bicep", "build", "--file", str(path), "--stdout"]
    try:
        completed = subprocess.run(
            cmd,
            check=True,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError as exc:
        raise TemplateError("Compiling Bicep requires the Azure CLI ('az') on PATH") from exc
    except subprocess.CalledProcessError as exc:
        stderr = (exc.stderr or "").strip()
        msg = f"Failed to run {' '.join(cmd)}"
        if stderr:
            msg += f": {stderr}"
        raise TemplateError(msg) from exc
    return completed.stdout
