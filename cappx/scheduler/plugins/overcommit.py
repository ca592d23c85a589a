"""Filter plugins that refuse nodes whose CPU or memory would be overcommitted."""

from __future__ import annotations

import math
from collections.abc import Iterable

from cappx.scheduler.framework.context import Context
from cappx.scheduler.framework.cycle_state import CycleState
from cappx.scheduler.framework.interface import NodeFilterPlugin
from cappx.scheduler.framework.types import (
    NodeInfo,
    ProcessStatus,
    Status,
    VirtualMachine,
    VirtualMachineCreateOptions,
)
from cappx.scheduler.plugins import names

CPU_OVERCOMMIT_NAME = names.CPU_OVERCOMMIT
MEMORY_OVERCOMMIT_NAME = names.MEMORY_OVERCOMMIT

DEFAULT_CPU_OVERCOMMIT_RATIO = 4
DEFAULT_MEMORY_OVERCOMMIT_RATIO = 1

_MIB = 1024 * 1024


def _ratio(numerator: float, denominator: float) -> float:
    """IEEE division: a zero denominator gives an infinity or NaN instead of raising."""
    if denominator:
        return numerator / denominator
    if numerator == 0:
        return math.nan
    return math.copysign(math.inf, numerator)


def _running(qemus: Iterable[VirtualMachine]) -> Iterable[VirtualMachine]:
    return (q for q in qemus if q.status == ProcessStatus.RUNNING)


def sum_cpus(qemus: Iterable[VirtualMachine]) -> int:
    """Sum the CPUs of every running VM."""
    return sum(q.cpus for q in _running(qemus))


def sum_mems(qemus: Iterable[VirtualMachine]) -> int:
    """Sum the maximum memory of every running VM."""
    return sum(q.max_mem for q in _running(qemus))


class CPUOvercommit(NodeFilterPlugin):
    """Refuses a node when its running vCPUs plus the new VM's exceed four per CPU."""

    def name(self) -> str:
        return CPU_OVERCOMMIT_NAME

    def filter(
        self,
        ctx: Context,
        state: CycleState,
        config: VirtualMachineCreateOptions,
        node_info: NodeInfo,
    ) -> Status:
        sockets = config.sockets or 1
        requested = sum_cpus(node_info.qemus) + config.cores * sockets
        if _ratio(requested, node_info.node.max_cpu) > DEFAULT_CPU_OVERCOMMIT_RATIO:
            state.set_message(self.name(), "exceed cpu overcommit ratio")
            return Status(code=1)
        return Status()


class MemoryOvercommit(NodeFilterPlugin):
    """Refuses a node when running VMs plus the new VM would use all of its memory."""

    def name(self) -> str:
        return MEMORY_OVERCOMMIT_NAME

    def filter(
        self,
        ctx: Context,
        state: CycleState,
        config: VirtualMachineCreateOptions,
        node_info: NodeInfo,
    ) -> Status:
        requested = sum_mems(node_info.qemus) + _MIB * config.memory
        if _ratio(requested, node_info.node.max_mem) >= DEFAULT_MEMORY_OVERCOMMIT_RATIO:
            state.set_message(self.name(), "exceed memory overcommit ratio")
            return Status(code=1)
        return Status()