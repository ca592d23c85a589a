"""Blocking FIFO queue of VM creation requests awaiting scheduling."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass

from cappx.scheduler.framework.context import Context
from cappx.scheduler.framework.types import VirtualMachineCreateOptions


@dataclass(frozen=True)
class QemuSpec:
    """A VM creation request with the context that carries its scheduling hints."""

    ctx: Context
    config: VirtualMachineCreateOptions


class SchedulingQueue:
    """Thread-safe queue; ``get`` blocks until an item arrives or the queue shuts down."""

    def __init__(self) -> None:
        self._active: deque[QemuSpec] = deque()
        self._cond = threading.Condition()
        self._shutting_down = False

    def add(self, ctx: Context, config: VirtualMachineCreateOptions) -> None:
        """Enqueue a request; ignored once the queue is shutting down."""
        with self._cond:
            if self._shutting_down:
                return
            self._active.append(QemuSpec(ctx=ctx, config=config))
            self._cond.notify()

    def get(self) -> QemuSpec | None:
        """Return the next request, or None once the queue is shut down and drained."""
        with self._cond:
            while not self._active and not self._shutting_down:
                self._cond.wait()
            if not self._active:
                return None
            return self._active.popleft()

    def shut_down(self) -> None:
        """Stop accepting requests and wake every waiting consumer."""
        with self._cond:
            self._shutting_down = True
            self._cond.notify_all()