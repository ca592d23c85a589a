"""Score plugin that favours nodes with low resource utilisation."""

from __future__ import annotations

import math

from cappx.scheduler.framework.context import Context
from cappx.scheduler.framework.cycle_state import CycleState
from cappx.scheduler.framework.interface import NodeScorePlugin
from cappx.scheduler.framework.types import NodeInfo, VirtualMachineCreateOptions
from cappx.scheduler.plugins import names

NAME = names.NODE_RESOURCE

_INT64_MIN = -(2**63)
_INT64_LIMIT = 2**63


def _divide(numerator: float, denominator: float) -> float:
    """IEEE division: a zero denominator gives an infinity or NaN instead of raising."""
    if denominator:
        return numerator / denominator
    if numerator == 0 or math.isnan(numerator):
        return math.nan
    return math.copysign(math.inf, numerator)


def _as_int64(value: float) -> int:
    # Scores that do not fit a 64-bit integer (infinite, NaN) collapse to its minimum.
    if math.isfinite(value) and -_INT64_LIMIT <= value < _INT64_LIMIT:
        return int(value)
    return _INT64_MIN


class NodeResource(NodeScorePlugin):
    """Scores a node as 1 / (cpu/maxcpu * mem/maxmem), the memory ratio taken as an integer."""

    def name(self) -> str:
        return NAME

    def score(
        self,
        ctx: Context,
        state: CycleState,
        config: VirtualMachineCreateOptions,
        node_info: NodeInfo,
    ) -> int:
        node = node_info.node
        mem_ratio = node.mem // node.max_mem
        utilization = _divide(node.cpu, node.max_cpu) * mem_ratio
        return _as_int64(_divide(1.0, utilization))