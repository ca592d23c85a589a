from types import SimpleNamespace

from cappx.scheduler.framework.cycle_state import CycleState, SchedulerResult
from cappx.scheduler.framework.types import VirtualMachine


def test_new_state_is_empty():
    state = CycleState()
    assert state.completed is False
    assert state.error is None
    assert state.messages == {}
    assert state.result == SchedulerResult()


def test_states_do_not_share_messages():
    a = CycleState()
    b = CycleState()
    a.set_message("Range", "no idrange is specified, use nextid.")
    assert b.messages == {}


def test_set_message_overwrites_per_plugin():
    state = CycleState()
    state.set_message("Regex", "first")
    state.set_message("Regex", "second")
    state.set_message("Range", "other")
    assert state.messages == {"Regex": "second", "Range": "other"}


def test_update_state_sets_everything():
    state = CycleState()
    err = RuntimeError("no nodes")
    result = SchedulerResult(vmid=100, node="pve1")
    state.update_state(True, err, result)
    assert state.completed is True
    assert state.error is err
    assert state.result.vmid == 100
    assert state.result.node == "pve1"


def test_qemu_returns_instance_vm():
    vm = VirtualMachine(vmid=100, name="qemu")
    instance = SimpleNamespace(vm=vm, node="pve1")
    state = CycleState()
    state.update_state(True, None, SchedulerResult(vmid=100, node="pve1", instance=instance))
    assert state.qemu() is vm
    assert state.result.instance.node == state.result.node


def test_qemu_without_instance_is_none():
    assert CycleState().qemu() is None


def test_scheduler_result_defaults():
    result = SchedulerResult()
    assert result.vmid == 0
    assert result.node == ""
    assert result.instance is None