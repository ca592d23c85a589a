"""Provider IDs of the form proxmox://<bios-uuid>."""

from __future__ import annotations

from dataclasses import dataclass

PREFIX = "proxmox://"
UUID_FORMAT = r"[a-f\d]{8}-[a-f\d]{4}-[a-f\d]{4}-[a-f\d]{4}-[a-f\d]{12}"


@dataclass(frozen=True)
class ProviderID:
    """Identifies a machine by the BIOS UUID of its VM."""

    uuid: str

    def __post_init__(self) -> None:
        if not self.uuid:
            raise ValueError("uuid is required for provider id")

    def __str__(self) -> str:
        return PREFIX + self.uuid