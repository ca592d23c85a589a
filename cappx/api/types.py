"""Shared machine and cluster specification types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from cappx.api.options_types import BIOS


class InstanceStatus(str, Enum):
    PAUSED = "paused"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass
class ObjectReference:
    """A reference to another Kubernetes object."""

    name: str
    namespace: str = ""


@dataclass
class ServerRef:
    """Where the Proxmox API lives and which secret holds its login."""

    endpoint: str
    secret_ref: ObjectReference | None = None


@dataclass
class Image:
    """The image to provision."""

    url: str
    checksum: str = ""
    checksum_type: str | None = None


class NetworkDeviceModel(str, Enum):
    E1000 = "e1000"
    VIRTIO = "virtio"
    RTL8139 = "rtl8139"
    VMXNET3 = "vmxnet3"


def _text(value: object) -> str:
    return value.value if isinstance(value, Enum) else str(value)


@dataclass
class NetworkDevice:
    """A network device; defaults match the resource's admission defaults."""

    model: NetworkDeviceModel | str = NetworkDeviceModel.VIRTIO
    bridge: str = "vmbr0"
    firewall: bool = True
    link_down: bool = False
    mac_addr: str = ""
    mtu: int = 0
    queues: int = 0
    rate: str = ""
    tag: int = 0
    trunks: list[int] | None = None

    def __str__(self) -> str:
        model = _text(self.model)
        config = [f"model={model}"]
        if self.bridge:
            config.append(f"bridge={self.bridge}")
        if self.firewall:
            config.append("firewall=1")
        if self.link_down:
            config.append("link_down=1")
        if self.mac_addr:
            config.append(f"macaddr={self.mac_addr},{model}={self.mac_addr}")
        if self.mtu:
            config.append(f"mtu={self.mtu}")
        if self.queues:
            config.append(f"queues={self.queues}")
        if self.rate:
            config.append(f"rate={self.rate}")
        if self.tag:
            config.append(f"tag={self.tag}")
        if self.trunks is not None:
            config.append("trunks=" + ";".join(str(t) for t in self.trunks))
        return ",".join(config)


@dataclass
class Hardware:
    """Virtual hardware; defaults match the resource's admission defaults."""

    memory: int = 4096
    cpu: int = 2
    sockets: int = 0
    cpu_limit: int = 0
    bios: BIOS | None = None
    disk: str = "50G"
    network_device: NetworkDevice = field(default_factory=NetworkDevice)


@dataclass
class IPConfig:
    """Addresses and gateways of an interface; DHCP on IPv4 when none is given."""

    ip: str = ""
    gateway: str = ""
    ip6: str = ""
    gateway6: str = ""

    def __str__(self) -> str:
        pairs = (("ip", self.ip), ("gw", self.gateway), ("ip6", self.ip6), ("gw6", self.gateway6))
        ipconfig = ",".join(f"{key}={value}" for key, value in pairs if value)
        if "ip" not in ipconfig:
            return "ip=dhcp"
        return ipconfig


@dataclass
class Network:
    """Cloud-init network settings applied through the Proxmox API."""

    ip_config: IPConfig = field(default_factory=IPConfig)
    name_server: str = ""
    search_domain: str = ""


@dataclass
class Storage:
    """Storage for images and snippets."""

    name: str = ""
    path: str = ""