import pytest

from cappx.scheduler.framework.context import Context, CtxKey
from cappx.scheduler.framework.cycle_state import CycleState
from cappx.scheduler.framework.interface import (
    NodeFilterPlugin,
    NodeScorePlugin,
    Plugin,
    VMIDPlugin,
)
from cappx.scheduler.framework.types import (
    Node,
    NodeInfo,
    Status,
    VirtualMachineCreateOptions,
)


class OnlyNamed(NodeFilterPlugin):
    def name(self):
        return "OnlyNamed"


class Matching(NodeFilterPlugin):
    def name(self):
        return "Matching"

    def filter(self, ctx, state, config, node_info):
        if config.node and config.node != node_info.node.node:
            return Status(code=1)
        return Status()


class FirstFree(VMIDPlugin):
    def name(self):
        return "FirstFree"

    def plugin_key(self):
        return CtxKey("vmid.test/first-free")

    def select(self, ctx, state, config, nextid, used_id):
        candidate = nextid
        while candidate in used_id:
            candidate += 1
        return candidate


@pytest.mark.parametrize("cls", [Plugin, NodeFilterPlugin, NodeScorePlugin, VMIDPlugin])
def test_abstract_bases_cannot_be_instantiated(cls):
    with pytest.raises(TypeError):
        cls()


def test_filter_plugin_contract():
    with pytest.raises(TypeError):
        OnlyNamed()
    plugin = Matching()
    info = NodeInfo(node=Node(node="pve1"))
    state = CycleState()
    ok = plugin.filter(Context(), state, VirtualMachineCreateOptions(node="pve1"), info)
    bad = plugin.filter(Context(), state, VirtualMachineCreateOptions(node="pve2"), info)
    assert isinstance(plugin, Plugin)
    assert ok.is_success() is True
    assert bad.is_success() is False


def test_vmid_plugin_contract():
    plugin = FirstFree()
    assert isinstance(plugin, Plugin)
    assert plugin.plugin_key() == CtxKey("vmid.test/first-free")
    chosen = plugin.select(Context(), None, VirtualMachineCreateOptions(), 100, {100: True})
    assert chosen == 101