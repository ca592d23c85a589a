"""VMID plugin that picks the lowest free id inside a requested range."""

from __future__ import annotations

import re
from collections.abc import Mapping

from cappx.scheduler.framework.context import Context, CtxKey
from cappx.scheduler.framework.cycle_state import CycleState
from cappx.scheduler.framework.interface import VMIDPlugin
from cappx.scheduler.framework.types import VirtualMachineCreateOptions
from cappx.scheduler.plugins import names

NAME = names.RANGE
VMID_RANGE_KEY = "vmid.qemu-scheduler/range"

_INTEGER = re.compile(r"[+-]?[0-9]+")


def _parse_bound(text: str) -> int:
    if not _INTEGER.fullmatch(text):
        raise ValueError(f"invalid range is specified: invalid syntax {text!r}")
    return int(text)


def find_vmid_range(ctx: Context) -> tuple[int, int]:
    """Return the (start, end) range bound to the range key, e.g. ``"100-200"``.

    Raises ValueError when no range is bound or it cannot be parsed.
    """
    value = ctx.value(CtxKey(VMID_RANGE_KEY))
    if value is None:
        raise ValueError("no vmid range is specified")
    parts = str(value).split("-")
    if len(parts) < 2:
        raise ValueError(f"invalid range is specified: {value!r} has no end")
    return _parse_bound(parts[0]), _parse_bound(parts[1])


class Range(VMIDPlugin):
    """Selects the smallest unused id within the range given in the context."""

    def name(self) -> str:
        return NAME

    def plugin_key(self) -> CtxKey:
        return CtxKey(VMID_RANGE_KEY)

    def select(
        self,
        ctx: Context,
        state: CycleState | None,
        config: VirtualMachineCreateOptions,
        nextid: int,
        used_id: Mapping[int, bool],
    ) -> int:
        try:
            start, end = find_vmid_range(ctx)
        except ValueError:
            if state is not None:
                state.set_message(self.name(), "no idrange is specified, use nextid.")
            return nextid
        for vmid in range(start, end + 1):
            if vmid not in used_id:
                return vmid
        raise ValueError(f"no available vmid in range {start}-{end}")