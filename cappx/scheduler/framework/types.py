"""Proxmox node and VM descriptions and the scheduler's status and score types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from cappx.scheduler.framework.context import Context


class ProcessStatus(str, Enum):
    PAUSED = "paused"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass
class Node:
    """A Proxmox node with its current resource usage."""

    node: str
    status: str = ""
    cpu: float = 0.0
    max_cpu: int = 0
    mem: int = 0
    max_mem: int = 0
    disk: int = 0
    max_disk: int = 0
    uptime: int = 0


@dataclass
class VirtualMachine:
    """A QEMU virtual machine as listed by a node."""

    vmid: int
    name: str = ""
    status: ProcessStatus | str = ""
    cpus: int = 0
    max_mem: int = 0
    mem: int = 0
    node: str = ""


@dataclass
class VirtualMachineCreateOptions:
    """Options for creating a QEMU virtual machine."""

    name: str = ""
    node: str = ""
    vmid: int | None = None
    cores: int = 0
    sockets: int = 0
    memory: int = 0
    description: str = ""
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class Status:
    """Outcome of running a plugin; a zero code means success."""

    code: int = 0
    err: BaseException | None = None
    failed_plugin: str = ""
    messages: list[str] = field(default_factory=list)

    def reasons(self) -> list[str]:
        """Return the failure reasons, the error's text first when there is one."""
        if self.err is not None:
            return [str(self.err), *self.messages]
        return list(self.messages)

    def is_success(self) -> bool:
        return self.code == 0


@dataclass
class NodeInfo:
    """A node together with the QEMU VMs assigned to it."""

    node: Node
    qemus: list[VirtualMachine] = field(default_factory=list)


@dataclass
class NodeScore:
    """A node name with its score."""

    name: str
    score: int = 0


class _NodeClient(Protocol):
    def nodes(self, ctx: Context) -> list[Node]: ...

    def node_virtual_machines(self, ctx: Context, node: str) -> list[VirtualMachine]: ...


def get_node_info_list(ctx: Context, client: _NodeClient) -> list[NodeInfo]:
    """Collect every node of the cluster with the VMs it hosts."""
    return [
        NodeInfo(node=node, qemus=list(client.node_virtual_machines(ctx, node.node)))
        for node in client.nodes(ctx)
    ]