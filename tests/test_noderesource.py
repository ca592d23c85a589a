import pytest

from cappx.scheduler.framework.context import Context
from cappx.scheduler.framework.cycle_state import CycleState
from cappx.scheduler.framework.types import Node, NodeInfo, VirtualMachineCreateOptions
from cappx.scheduler.plugins.noderesource import NodeResource


def _score(**node_fields):
    info = NodeInfo(node=Node(node="pve", **node_fields))
    return NodeResource().score(Context(), CycleState(), VirtualMachineCreateOptions(), info)


def test_name():
    assert NodeResource().name() == "NodeResource"


def test_half_cpu_full_memory():
    assert _score(cpu=0.5, max_cpu=1, mem=8, max_mem=8) == 2


def test_lower_cpu_scores_higher():
    busy = _score(cpu=0.5, max_cpu=1, mem=8, max_mem=8)
    idle = _score(cpu=0.25, max_cpu=1, mem=8, max_mem=8)
    assert idle > busy


def test_partial_memory_is_undefined_like_idle_cpu():
    partial_memory = _score(cpu=0.5, max_cpu=1, mem=4, max_mem=8)
    idle_cpu = _score(cpu=0.0, max_cpu=1, mem=8, max_mem=8)
    assert partial_memory == idle_cpu
    assert partial_memory < _score(cpu=0.5, max_cpu=1, mem=8, max_mem=8)


def test_zero_max_memory_raises():
    with pytest.raises(ZeroDivisionError):
        _score(cpu=0.5, max_cpu=1, mem=8, max_mem=0)