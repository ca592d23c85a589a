"""State shared across one scheduling cycle and its result."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class SchedulerResult:
    """Where a VM was placed, with which id, and the created instance."""

    vmid: int = 0
    node: str = ""
    instance: Any = None


@dataclass
class CycleState:
    """Progress, error and plugin messages of one scheduling cycle."""

    completed: bool = False
    error: BaseException | None = None
    messages: dict[str, str] = field(default_factory=dict)
    result: SchedulerResult = field(default_factory=SchedulerResult)

    def set_message(self, plugin_name: str, message: str) -> None:
        """Record a plugin's message, replacing an earlier one from the same plugin."""
        self.messages[plugin_name] = message

    def update_state(
        self, completed: bool, err: BaseException | None, result: SchedulerResult
    ) -> None:
        self.completed = completed
        self.error = err
        self.result = result

    def qemu(self) -> Any:
        """Return the VM of the created instance, or None when nothing was created."""
        if self.result.instance is None:
            return None
        return self.result.instance.vm