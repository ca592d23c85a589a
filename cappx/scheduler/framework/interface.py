"""Base classes for scheduler plugins."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping

from cappx.scheduler.framework.context import Context, CtxKey
from cappx.scheduler.framework.cycle_state import CycleState
from cappx.scheduler.framework.types import NodeInfo, Status, VirtualMachineCreateOptions


class Plugin(ABC):
    """A named scheduler plugin."""

    @abstractmethod
    def name(self) -> str:
        """Return the plugin's name."""


class NodeFilterPlugin(Plugin):
    """Decides whether a node may host a VM."""

    @abstractmethod
    def filter(
        self,
        ctx: Context,
        state: CycleState,
        config: VirtualMachineCreateOptions,
        node_info: NodeInfo,
    ) -> Status:
        """Return a successful status when the node fits the VM."""


class NodeScorePlugin(Plugin):
    """Ranks the nodes that passed filtering."""

    @abstractmethod
    def score(
        self,
        ctx: Context,
        state: CycleState,
        config: VirtualMachineCreateOptions,
        node_info: NodeInfo,
    ) -> int:
        """Return the node's score; higher is better. Raises when scoring fails."""


class VMIDPlugin(Plugin):
    """Chooses the id of a new VM when its context carries the plugin's key."""

    @abstractmethod
    def plugin_key(self) -> CtxKey:
        """Return the context key that turns this plugin on."""

    @abstractmethod
    def select(
        self,
        ctx: Context,
        state: CycleState | None,
        config: VirtualMachineCreateOptions,
        nextid: int,
        used_id: Mapping[int, bool],
    ) -> int:
        """Return the chosen VM id. Raises when none is available."""