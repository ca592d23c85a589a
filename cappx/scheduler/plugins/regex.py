"""Plugins that restrict node names and VM ids with regular expressions."""

from __future__ import annotations

import re
from collections.abc import Mapping

from cappx.scheduler.framework.context import Context, CtxKey
from cappx.scheduler.framework.cycle_state import CycleState
from cappx.scheduler.framework.interface import NodeFilterPlugin, VMIDPlugin
from cappx.scheduler.framework.types import NodeInfo, Status, VirtualMachineCreateOptions
from cappx.scheduler.plugins import names

NODE_REGEX_NAME = names.NODE_REGEX
NODE_REGEX_KEY = "node.qemu-scheduler/regex"

NAME = names.REGEX
VMID_REGEX_KEY = "vmid.qemu-scheduler/regex"

_VMID_LIMIT = 1_000_000_000


def _find_regex(ctx: Context, key: str, missing: str) -> re.Pattern[str]:
    value = ctx.value(CtxKey(key))
    if value is None:
        raise ValueError(missing)
    try:
        return re.compile(str(value))
    except re.error as err:
        raise ValueError(f"invalid regex {value!r}: {err}") from err


def find_node_regex(ctx: Context) -> re.Pattern[str]:
    """Return the node-name pattern bound in ``ctx``, e.g. ``node[0-9]+``."""
    return _find_regex(ctx, NODE_REGEX_KEY, "no node name regex is specified")


def find_vmid_regex(ctx: Context) -> re.Pattern[str]:
    """Return the VM id pattern bound in ``ctx``, e.g. ``(12[0-9]|130)``."""
    return _find_regex(ctx, VMID_REGEX_KEY, "no vmid regex is specified")


class NodeRegex(NodeFilterPlugin):
    """Keeps nodes whose name contains a match of the pattern given in the context."""

    def name(self) -> str:
        return NODE_REGEX_NAME

    def filter(
        self,
        ctx: Context,
        state: CycleState,
        config: VirtualMachineCreateOptions,
        node_info: NodeInfo,
    ) -> Status:
        try:
            pattern = find_node_regex(ctx)
        except ValueError:
            state.set_message(self.name(), "no valid regex is specified, skip")
            return Status()
        if not pattern.search(node_info.node.node):
            return Status(code=1)
        return Status()


class Regex(VMIDPlugin):
    """Selects the smallest unused id from ``nextid`` on that matches the context's pattern."""

    def name(self) -> str:
        return NAME

    def plugin_key(self) -> CtxKey:
        return CtxKey(VMID_REGEX_KEY)

    def select(
        self,
        ctx: Context,
        state: CycleState | None,
        config: VirtualMachineCreateOptions,
        nextid: int,
        used_id: Mapping[int, bool],
    ) -> int:
        try:
            pattern = find_vmid_regex(ctx)
        except ValueError:
            if state is not None:
                state.set_message(self.name(), "no idregex is specified, use nextid.")
            return nextid
        for vmid in range(nextid, _VMID_LIMIT):
            if vmid not in used_id and pattern.search(str(vmid)):
                return vmid
        raise ValueError("no available vmid")