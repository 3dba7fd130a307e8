"""Loading extension candidate snapshots."""

import json
import logging
from pathlib import Path
from typing import Any

from .models import Candidate, ExtensionState, RegistryError

logger = logging.getLogger(__name__)

EXTENSION_DIRS = (
    Path.home() / ".local" / "share" / "gnome-shell" / "extensions",
    Path("/usr/share/gnome-shell/extensions"),
)


def candidates_from_records(records: Any) -> dict[str, Candidate]:
    """
    Validate raw registry records into candidates keyed by id.

    Accepts a mapping {uuid: record} or a list of records carrying a
    "uuid" key. Invalid records are skipped with a warning.

    Raises:
        RegistryError: if records is neither a mapping nor a list.
    """
    if isinstance(records, dict):
        items = list(records.items())
    elif isinstance(records, list):
        items = []
        for record in records:
            uuid = record.get("uuid") if isinstance(record, dict) else None
            if not uuid:
                logger.warning(f"Skipping record without uuid: {record!r}")
                continue
            items.append((uuid, record))
    else:
        raise RegistryError(f"Expected a mapping or list of extensions, got {type(records).__name__}")

    candidates: dict[str, Candidate] = {}
    for uuid, record in items:
        if uuid in candidates:
            logger.warning(f"Skipping duplicate extension id: {uuid}")
            continue
        try:
            candidates[uuid] = Candidate.from_record(uuid, record)
        except RegistryError as e:
            logger.warning(f"Skipping extension: {e}")

    return candidates


def load_snapshot(path: Path) -> dict[str, Candidate]:
    """Load candidates from a JSON snapshot file."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise RegistryError(f"Invalid snapshot {path}: {e}")

    # Either the bare records or {"extensions": records}
    if isinstance(data, dict) and "extensions" in data:
        data = data["extensions"]
    return candidates_from_records(data)


def _read_metadata(ext_dir: Path) -> dict | None:
    metadata_file = ext_dir / "metadata.json"
    try:
        with open(metadata_file, encoding="utf-8") as f:
            metadata = json.load(f)
    except (OSError, ValueError) as e:
        # ValueError covers bad JSON and undecodable bytes
        logger.warning(f"Skipping {ext_dir}: {e}")
        return None
    if not isinstance(metadata, dict):
        logger.warning(f"Skipping {ext_dir}: metadata is not an object")
        return None
    return metadata


def _supports_shell(metadata: dict, shell_version: str) -> bool:
    supported = [str(v) for v in metadata.get("shell-version", [])]
    major = shell_version.split(".")[0]
    return shell_version in supported or major in supported


def scan_installed(
    enabled: list[str] | None = None,
    shell_version: str | None = None,
    dirs: tuple[Path, ...] = EXTENSION_DIRS,
) -> dict[str, Candidate]:
    """
    Build candidates from installed extension directories.

    Args:
        enabled: Enabled extension uuids in activation order
        shell_version: Running shell version, marks unsupported ones incompatible
        dirs: Directories searched, earlier ones take precedence
    """
    enabled = enabled or []
    records: dict[str, dict] = {}

    for base in dirs:
        if not base.is_dir():
            continue
        for ext_dir in sorted(base.iterdir()):
            if not ext_dir.is_dir() or ext_dir.name in records:
                continue
            metadata = _read_metadata(ext_dir)
            if metadata is None:
                continue

            uuid = metadata.get("uuid", ext_dir.name)
            if not isinstance(uuid, str) or not uuid:
                logger.warning(f"Skipping {ext_dir}: invalid uuid {uuid!r}")
                continue
            if uuid in records:
                continue
            if uuid in enabled:
                state = ExtensionState.ENABLED
            else:
                state = ExtensionState.DISABLED
            if shell_version and not _supports_shell(metadata, shell_version):
                state = ExtensionState.INCOMPATIBLE

            records[uuid] = {
                "metadata": metadata,
                "state": int(state),
                "hasPrefs": (ext_dir / "prefs.js").exists(),
                "activationOrderIndex": enabled.index(uuid) if uuid in enabled else None,
            }

    return candidates_from_records(records)
