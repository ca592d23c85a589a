"""Filter plugin that keeps only the node a VM explicitly asks for."""

from __future__ import annotations

from cappx.scheduler.framework.context import Context
from cappx.scheduler.framework.cycle_state import CycleState
from cappx.scheduler.framework.interface import NodeFilterPlugin
from cappx.scheduler.framework.types import NodeInfo, Status, VirtualMachineCreateOptions
from cappx.scheduler.plugins import names

NAME = names.NODE_NAME
ERR_REASON = "node didn't match the requested node name"


def fits(config: VirtualMachineCreateOptions, node_info: NodeInfo) -> bool:
    """Return True when no node is requested or the requested one is this node."""
    return config.node == "" or config.node == node_info.node.node


class NodeName(NodeFilterPlugin):
    def name(self) -> str:
        return NAME

    def filter(
        self,
        ctx: Context,
        state: CycleState,
        config: VirtualMachineCreateOptions,
        node_info: NodeInfo,
    ) -> Status:
        if not fits(config, node_info):
            return Status(code=1)
        return Status()