"""Extension records as seen by the search provider."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any


class RegistryError(ValueError):
    """Extension registry data could not be interpreted."""


class ExtensionState(IntEnum):
    """Lifecycle state codes reported by the shell's extension manager."""

    ENABLED = 1
    DISABLED = 2
    ERROR = 3
    INCOMPATIBLE = 4
    DOWNLOADING = 5
    INITIALIZED = 6
    DISABLING = 7
    ENABLING = 8

    @property
    def label(self) -> str:
        return self.name


@dataclass(frozen=True)
class Candidate:
    """One installed extension eligible to appear in results."""

    id: str
    name: str
    description: str = ""
    state: ExtensionState = ExtensionState.DISABLED
    has_update: bool = False
    has_prefs: bool = False
    # Position in the host's activation order, None when not enabled
    enabled_order_index: int | None = None
    version: str = ""
    version_name: str = ""

    @property
    def display_text(self) -> str:
        """Text the query is matched against (name, then description)."""
        if self.description:
            return f"{self.name} {self.description}"
        return self.name

    @property
    def is_active(self) -> bool:
        """Enabled, or errored while still listed in the activation order."""
        if self.state == ExtensionState.ENABLED:
            return True
        return self.state == ExtensionState.ERROR and self.enabled_order_index is not None

    @classmethod
    def from_record(cls, uuid: str, record: dict[str, Any]) -> "Candidate":
        """
        Build a candidate from a raw registry record.

        Accepts both the flat snapshot layout and the shell layout where
        name/description/version live under a "metadata" key.

        Raises:
            RegistryError: if the record has no usable name or state.
        """
        if not isinstance(record, dict):
            raise RegistryError(f"Record for '{uuid}' is not a mapping")

        metadata = record.get("metadata") or {}
        name = record.get("name", metadata.get("name"))
        if not isinstance(name, str) or not name:
            raise RegistryError(f"Record for '{uuid}' has no name")

        raw_state = record.get("state", ExtensionState.DISABLED)
        try:
            state = ExtensionState(int(raw_state))
        except (TypeError, ValueError):
            raise RegistryError(f"Record for '{uuid}' has unknown state: {raw_state!r}")

        order = record.get("activationOrderIndex", record.get("enabled_order_index"))
        if order is not None:
            try:
                order = int(order)
            except (TypeError, ValueError):
                raise RegistryError(f"Record for '{uuid}' has bad activation index: {order!r}")
            if order < 0:
                order = None

        description = record.get("description", metadata.get("description")) or ""
        version = record.get("version", metadata.get("version", ""))
        version_name = record.get("version-name", metadata.get("version-name", ""))

        return cls(
            id=uuid,
            name=name,
            description=str(description),
            state=state,
            has_update=bool(record.get("hasUpdate", record.get("has_update", False))),
            has_prefs=bool(record.get("hasPrefs", record.get("has_prefs", False))),
            enabled_order_index=order,
            version="" if version is None else str(version),
            version_name="" if version_name is None else str(version_name),
        )


@dataclass
class ResultMeta:
    """Row data handed to the presentation layer."""

    id: str
    name: str
    version: str
    status: str
    description: str = ""
    has_prefs: bool = False
