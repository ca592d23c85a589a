"""Custom resources of the infrastructure API group: clusters, machines and templates."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, TypeVar

from cappx.api.cloudinit_types import CloudInit
from cappx.api.options_types import Options
from cappx.api.types import Hardware, Image, InstanceStatus, Network, ServerRef, Storage

CLUSTER_FINALIZER = "proxmoxcluster.infrastructure.cluster.x-k8s.io"
MACHINE_FINALIZER = "proxmoxmachine.infrastructure.cluster.x-k8s.io"


@dataclass(frozen=True)
class GroupVersion:
    """An API group together with its version."""

    group: str
    version: str

    def __str__(self) -> str:
        if not self.group:
            return self.version
        return f"{self.group}/{self.version}"


GROUP_VERSION = GroupVersion(group="infrastructure.cluster.x-k8s.io", version="v1beta1")

_SCHEME: dict[str, type] = {}

_T = TypeVar("_T", bound=type)


def _register(cls: _T) -> _T:
    cls.kind = cls.__name__
    _SCHEME[cls.kind] = cls
    return cls


def registered_kinds() -> dict[str, type]:
    """Return the kinds registered in this API group, mapped to their classes."""
    return dict(_SCHEME)


class _TypeMeta:
    kind: ClassVar[str]

    @property
    def api_version(self) -> str:
        return str(GROUP_VERSION)


@dataclass
class ObjectMeta:
    """Metadata every persisted resource carries."""

    name: str = ""
    namespace: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    finalizers: list[str] = field(default_factory=list)


@dataclass
class APIEndpoint:
    """An endpoint through which the control plane is reached."""

    host: str = ""
    port: int = 0


@dataclass
class ProxmoxClusterSpec:
    """Desired state of a cluster."""

    server_ref: ServerRef
    control_plane_endpoint: APIEndpoint = field(default_factory=APIEndpoint)
    storage: Storage = field(default_factory=Storage)


@dataclass
class ProxmoxClusterStatus:
    """Observed state of a cluster."""

    ready: bool = False
    failure_domains: dict[str, dict[str, Any]] = field(default_factory=dict)
    conditions: list[dict[str, Any]] = field(default_factory=list)


@_register
@dataclass
class ProxmoxCluster(_TypeMeta):
    """A cluster backed by Proxmox VE."""

    spec: ProxmoxClusterSpec
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    status: ProxmoxClusterStatus = field(default_factory=ProxmoxClusterStatus)


@_register
@dataclass
class ProxmoxClusterList(_TypeMeta):
    items: list[ProxmoxCluster] = field(default_factory=list)


@dataclass
class ProxmoxMachineSpec:
    """Desired state of a machine."""

    image: Image
    provider_id: str | None = None
    node: str = ""
    storage: str = ""
    vmid: int | None = None
    cloud_init: CloudInit = field(default_factory=CloudInit)
    hardware: Hardware = field(default_factory=Hardware)
    network: Network = field(default_factory=Network)
    options: Options = field(default_factory=Options)
    failure_domain: str | None = None


@dataclass
class ProxmoxMachineStatus:
    """Observed state of a machine."""

    ready: bool = False
    failure_reason: str | None = None
    failure_message: str | None = None
    addresses: list[dict[str, str]] = field(default_factory=list)
    conditions: list[dict[str, Any]] = field(default_factory=list)
    config: dict[str, Any] = field(default_factory=dict)
    instance_status: InstanceStatus | None = None


@_register
@dataclass
class ProxmoxMachine(_TypeMeta):
    """A virtual machine hosted on a Proxmox VE node."""

    spec: ProxmoxMachineSpec
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    status: ProxmoxMachineStatus = field(default_factory=ProxmoxMachineStatus)


@_register
@dataclass
class ProxmoxMachineList(_TypeMeta):
    items: list[ProxmoxMachine] = field(default_factory=list)


@dataclass
class ProxmoxMachineTemplateResource:
    """The machine description a template stamps out."""

    spec: ProxmoxMachineSpec
    metadata: ObjectMeta = field(default_factory=ObjectMeta)


@dataclass
class ProxmoxMachineTemplateSpec:
    template: ProxmoxMachineTemplateResource


@_register
@dataclass
class ProxmoxMachineTemplate(_TypeMeta):
    """A template from which machines are created."""

    spec: ProxmoxMachineTemplateSpec
    metadata: ObjectMeta = field(default_factory=ObjectMeta)


@_register
@dataclass
class ProxmoxMachineTemplateList(_TypeMeta):
    items: list[ProxmoxMachineTemplate] = field(default_factory=list)