"""QEMU instance options of a machine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum


class Arch(str, Enum):
    X86_64 = "x86_64"
    AARCH64 = "aarch64"


class BIOS(str, Enum):
    SEABIOS = "seabios"
    OVMF = "ovmf"


class HugePages(IntEnum):
    ANY = 0
    SIZE_2M = 2
    SIZE_1G = 1024


class Lock(str, Enum):
    BACKUP = "backup"
    CLONE = "clone"
    CREATE = "create"
    MIGRATE = "migrate"
    ROLLBACK = "rollback"
    SNAPSHOT = "snapshot"
    SNAPSHOT_DELETE = "snapshot-delete"
    SUSPENDING = "suspending"
    SUSPENDED = "suspended"


class OSType(str, Enum):
    OTHER = "other"
    WXP = "wxp"
    W2K = "w2k"
    W2K3 = "w2k3"
    W2K8 = "w2k8"
    WVISTA = "wvista"
    WIN7 = "win7"
    WIN8 = "win8"
    WIN10 = "win10"
    WIN11 = "win11"
    L24 = "l24"
    L26 = "l26"
    SOLARIS = "solaris"


def format_hugepages(value: int | None) -> str:
    """Render a hugepages setting: empty when unset, "any" for zero."""
    if value is None:
        return ""
    if int(value) == 0:
        return "any"
    return str(int(value))


class Tags(list):
    """VM tags; rendered with each tag followed by a semicolon."""

    def __str__(self) -> str:
        return "".join(f"{tag};" for tag in self)


@dataclass
class Options:
    """Options for a QEMU instance."""

    acpi: bool = False
    arch: Arch | None = None
    balloon: int = 0
    description: str = ""
    hugepages: HugePages | int | None = None
    keep_hugepages: bool = False
    kvm: bool = False
    local_time: bool = False
    lock: Lock | None = None
    numa: bool = False
    on_boot: bool = False
    os_type: OSType | None = None
    protection: bool = False
    reboot: bool = False
    shares: int = 0
    tablet: bool = False
    tags: Tags = field(default_factory=Tags)
    time_drift_fix: bool = False
    template: bool = False
    vcpus: int = 0
    vm_generation_id: str = ""