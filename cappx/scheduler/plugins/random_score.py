"""Sample score plugin that gives each node a random score."""

from __future__ import annotations

import random
import time

from cappx.scheduler.framework.context import Context
from cappx.scheduler.framework.cycle_state import CycleState
from cappx.scheduler.framework.interface import NodeScorePlugin
from cappx.scheduler.framework.types import NodeInfo, VirtualMachineCreateOptions
from cappx.scheduler.plugins import names

NAME = names.RANDOM


class Random(NodeScorePlugin):
    """Returns a score in [0, 100) from a generator seeded with the current second."""

    def name(self) -> str:
        return NAME

    def score(
        self,
        ctx: Context,
        state: CycleState,
        config: VirtualMachineCreateOptions,
        node_info: NodeInfo,
    ) -> int:
        return random.Random(int(time.time())).randrange(100)