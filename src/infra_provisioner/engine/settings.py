"""Settings artifact serialization (``.<environment>.env``)."""

from __future__ import annotations

import contextlib
import logging
import os
import re
import shlex
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from infra_provisioner.engine.errors import SettingsWriteError

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from infra_provisioner.engine.types import OutputEntry, SecretEntry

logger = logging.getLogger(__name__)

SECRETS_DELIMITER = "### Secrets ###"

_BOUNDARY_RE = re.compile(r"([a-z\d])([A-Z]+)")
_SEPARATOR_RE = re.compile(r"[ _-]+")
_ASSIGNMENT_RE = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)=(.*)$", re.DOTALL)

SettingValue = str | list[str]


def to_canonical_key(raw: str) -> str:
    """Convert an output name to an upper snake case variable name.

    ``storageAccountName`` -> ``STORAGE_ACCOUNT_NAME``; a run of capitals stays
    together (``resourceID`` -> ``RESOURCE_ID``).
    """
    key = _BOUNDARY_RE.sub(r"\1_\2", raw)
    key = _SEPARATOR_RE.sub("_", key)
    return key.strip("_").upper()


def settings_path(environment: str, directory: Path) -> Path:
    return Path(directory) / f".{environment}.env"


# ---------------------------------------------------------------------------
# Value serialization
# ---------------------------------------------------------------------------


def shell_quote(value: str) -> str:
    """Single-quote *value* for POSIX shells, always quoting."""
    return "'" + value.replace("'", "'\\''") + "'"


def format_value(value: SettingValue) -> str:
    """Render a scalar as ``'v'`` and an array as ``('a' 'b')``."""
    if isinstance(value, list):
        return "(" + " ".join(shell_quote(v) for v in value) + ")"
    return shell_quote(value)


def format_assignment(key: str, value: SettingValue) -> str:
    return f"{key}={format_value(value)}"


def render_settings(
    environment: str,
    outputs: Sequence[OutputEntry],
    secrets: Sequence[SecretEntry] | None = None,
) -> str:
    """Render the full artifact text.

    Output lines keep the order of *outputs*.  The secrets block is emitted
    whenever *secrets* is not ``None``, even when empty.
    """
    lines = [
        f"# Generated settings for environment '{environment}'",
        "# Do not edit this file manually!",
        "",
    ]
    for entry in outputs:
        value: SettingValue = list(entry.value) if entry.is_array else _as_scalar(entry.value)
        lines.append(format_assignment(to_canonical_key(entry.key), value))

    if secrets is not None:
        lines.extend(["", SECRETS_DELIMITER, ""])
        lines.extend(
            format_assignment(secret.name, secret.value.get_secret_value()) for secret in secrets
        )
    return "\n".join(lines) + "\n"


def _as_scalar(value: SettingValue) -> str:
    # Only arrays keep their list form; anything else list-shaped is joined.
    return " ".join(value) if isinstance(value, list) else value


# ---------------------------------------------------------------------------
# File I/O
# ---------------------------------------------------------------------------


def write_settings(
    environment: str,
    outputs: Sequence[OutputEntry],
    secrets: Sequence[SecretEntry] | None = None,
    *,
    directory: Path,
) -> Path:
    """Write the artifact for *environment* into *directory*.

    - Replaces any previous artifact (no merge)
    - Writes atomically (temp file + rename)
    """
    path = settings_path(environment, directory)
    content = render_settings(environment, outputs, secrets)

    try:
        fd, tmp_path = tempfile.mkstemp(prefix=f"{path.name}.", dir=str(path.parent))
    except OSError as exc:
        raise SettingsWriteError(path, exc.strerror or str(exc)) from exc

    tmp_file = Path(tmp_path)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        tmp_file.replace(path)
    except OSError as exc:
        raise SettingsWriteError(path, exc.strerror or str(exc)) from exc
    finally:
        with contextlib.suppress(FileNotFoundError):
            tmp_file.unlink()

    logger.debug(
        "Settings written: %d outputs, %s secrets, path=%s",
        len(outputs),
        "no" if secrets is None else len(secrets),
        path,
    )
    return path


def _is_complete(text: str) -> bool:
    try:
        shlex.split(text)
    except ValueError:
        return False
    return True


def _logical_lines(text: str) -> Iterator[str]:
    """Yield artifact lines, joining a quoted value that spans several lines."""
    pending: str | None = None
    for line in text.split("\n"):
        if pending is not None:
            pending += "\n" + line
            if _is_complete(pending):
                yield pending
                pending = None
            continue
        stripped = line.strip()
        if _ASSIGNMENT_RE.match(stripped) and not _is_complete(line.lstrip()):
            pending = line.lstrip()
            continue
        yield stripped
    if pending is not None:
        logger.warning("Ignoring unterminated settings value: %s", pending.split("=", 1)[0])


def parse_settings(text: str) -> tuple[dict[str, SettingValue], dict[str, SettingValue]]:
    """Parse artifact text into ``(outputs, secrets)`` mappings.

    Quoted values may contain newlines; they are read back across lines.
    """
    outputs: dict[str, SettingValue] = {}
    secrets: dict[str, SettingValue] = {}
    target = outputs
    for line in _logical_lines(text):
        if line == SECRETS_DELIMITER:
            target = secrets
            continue
        if not line or line.startswith("#"):
            continue
        match = _ASSIGNMENT_RE.match(line)
        if match is None:
            logger.debug("Ignoring unparsable settings line: %s", line)
            continue
        key, raw = match.groups()
        raw = raw.rstrip()
        if raw.startswith("(") and raw.endswith(")"):
            target[key] = shlex.split(raw[1:-1])
        else:
            target[key] = "".join(shlex.split(raw))
    return outputs, secrets


def read_text(path: Path) -> str:
    """Read an artifact without newline translation (values may hold ``\\r``)."""
    with Path(path).open(encoding="utf-8", newline="") as f:
        return f.read()


def read_settings(path: Path) -> dict[str, SettingValue]:
    """Read an artifact back as a flat ``KEY -> value`` mapping (secrets included)."""
    outputs, secrets = parse_settings(read_text(path))
    return {**outputs, **secrets}
