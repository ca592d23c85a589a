"""Scheduler that places new QEMU VMs on Proxmox nodes and assigns their ids."""

from __future__ import annotations

import logging
import queue
import threading
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any, Protocol

from cappx.scheduler.framework.context import Context
from cappx.scheduler.framework.cycle_state import CycleState, SchedulerResult
from cappx.scheduler.framework.types import (
    Node,
    NodeScore,
    Status,
    VirtualMachine,
    VirtualMachineCreateOptions,
    get_node_info_list,
)
from cappx.scheduler.plugins.registry import (
    PluginConfigs,
    PluginRegistry,
    get_plugin_config_from_file,
    new_registry,
)
from cappx.scheduler.queue import SchedulingQueue

_DEFAULT_LOGGER = logging.getLogger("cappx.scheduler")

UNREGISTERED_SCHEDULER_TIMEOUT = 60.0


class NoNodesAvailableError(RuntimeError):
    """No node is available to host the VM."""

    def __init__(self, message: str = "no nodes available to schedule qemus") -> None:
        super().__init__(message)


class NoVMIDAvailableError(RuntimeError):
    """No VM id is available for the VM."""

    def __init__(self, message: str = "no vmid available to schedule qemus") -> None:
        super().__init__(message)


class ProxmoxClient(Protocol):
    """The Proxmox operations the scheduler relies on."""

    def join_config(self, ctx: Context) -> Any: ...

    def nodes(self, ctx: Context) -> list[Node]: ...

    def node_virtual_machines(self, ctx: Context, node: str) -> list[VirtualMachine]: ...

    def virtual_machines(self, ctx: Context) -> list[VirtualMachine]: ...

    def next_id(self, ctx: Context) -> int: ...

    def create_virtual_machine(
        self, ctx: Context, node: str, vmid: int, config: VirtualMachineCreateOptions
    ) -> Any: ...


SchedulerOption = Callable[["Scheduler"], None]


@dataclass
class SchedulerParams:
    """Settings shared by every scheduler a manager creates."""

    logger: logging.Logger = _DEFAULT_LOGGER
    plugin_config_file: str = ""
    plugin_configs: PluginConfigs = field(default_factory=PluginConfigs)


@dataclass(frozen=True)
class _SchedulerID:
    ip_address: str
    fingerprint: str


def with_timeout(timeout: float) -> SchedulerOption:
    """Return an option that stops the scheduler after ``timeout`` seconds."""

    def apply(sched: Scheduler) -> None:
        timer = threading.Timer(timeout, sched.stop)
        timer.daemon = True
        timer.start()

    return apply


def select_highest_score_node(score_list: list[NodeScore]) -> str:
    """Return the name of the first node with the highest score above -1."""
    if not score_list:
        raise ValueError("empty node score list")
    selected = NodeScore(name="", score=-1)
    for node_score in score_list:
        if selected.score < node_score.score:
            selected = node_score
    return selected.name


def _used_id_map(ctx: Context, client: ProxmoxClient) -> dict[int, bool]:
    return {vm.vmid: True for vm in client.virtual_machines(ctx)}


class Scheduler:
    """Takes VM requests from a queue, picks a node and id, and creates the VM."""

    status_timeout: float = 60.0

    def __init__(
        self,
        client: ProxmoxClient,
        registry: PluginRegistry | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.client = client
        self.registry = registry if registry is not None else new_registry(PluginConfigs())
        self.logger = logger if logger is not None else _DEFAULT_LOGGER.getChild("qemu-scheduler")
        self.scheduling_queue = SchedulingQueue()
        self._results: dict[str, queue.Queue[CycleState]] = {}
        self._results_lock = threading.Lock()
        self._run_lock = threading.Lock()
        self._running = False
        self._stopped = threading.Event()

    def run(self) -> None:
        """Schedule queued requests until stopped; only one run may be active."""
        with self._run_lock:
            if self._running:
                self.logger.info("this scheduler is already running")
                return
            self._running = True
        try:
            self.logger.info("Start Running Scheduler")
            while not self._stopped.is_set():
                self.schedule_one()
            self.logger.info("Stop Running Scheduler")
        finally:
            with self._run_lock:
                self._running = False

    def is_running(self) -> bool:
        return self._running

    def run_async(self) -> threading.Thread:
        """Run the scheduler in a background thread and return that thread."""
        thread = threading.Thread(target=self.run, name="qemu-scheduler", daemon=True)
        thread.start()
        return thread

    def stop(self) -> None:
        """Stop scheduling and shut down the queue."""
        self._stopped.set()
        self.scheduling_queue.shut_down()

    def _result_channel(self, name: str) -> queue.Queue[CycleState]:
        with self._results_lock:
            channel = self._results.get(name)
            if channel is None:
                channel = queue.Queue(maxsize=1)
                self._results[name] = channel
            return channel

    def schedule_one(self) -> None:
        """Take one request from the queue and try to create its VM."""
        self.logger.info("getting next qemu from scheduling queue")
        spec = self.scheduling_queue.get()
        if spec is None:
            return
        config = spec.config
        qemu_ctx = spec.ctx
        self.logger.info("scheduling qemu %s", config.name)

        state = CycleState()
        channel = self._result_channel(config.name)
        try:
            node = self.select_node(qemu_ctx, config)
            vmid = self.select_vmid(qemu_ctx, config)
            instance = self.client.create_virtual_machine(qemu_ctx, node, vmid, config)
        except Exception as err:
            state.update_state(True, err, SchedulerResult())
        else:
            state.update_state(True, None, SchedulerResult(vmid=vmid, node=node, instance=instance))
        finally:
            channel.put(state)

    def wait_status(self, config: VirtualMachineCreateOptions) -> CycleState:
        """Wait for the cycle state of ``config``'s request and return it."""
        channel = self._result_channel(config.name)
        deadline = time.monotonic() + self.status_timeout
        try:
            state = channel.get(timeout=max(0.0, deadline - time.monotonic()))
        except queue.Empty:
            err = TimeoutError("exceed timeout deadline. schedulingQueue might be shutdowned")
            self.logger.error("%s", err)
            raise err from None
        with self._results_lock:
            if self._results.get(config.name) is channel:
                del self._results[config.name]
        return state

    def create_qemu(self, ctx: Context, config: VirtualMachineCreateOptions) -> SchedulerResult:
        """Queue a VM request, wait for the scheduler and return where it was placed."""
        self.logger.info("adding qemu %s to scheduler queue", config.name)
        self.scheduling_queue.add(ctx, config)
        state = self.wait_status(config)
        if state.error is not None:
            self.logger.error(
                "failed to create qemu %s: %s %s", config.name, state.error, state.messages
            )
            raise state.error
        self.logger.info("%s", state.messages)
        return state.result

    def select_node(self, ctx: Context, config: VirtualMachineCreateOptions) -> str:
        """Return the name of the node that should host the VM."""
        self.logger.info("finding proxmox node matching qemu")
        nodes = self.client.nodes(ctx)
        state = CycleState()

        node_list = self.run_filter_plugins(ctx, state, config, nodes)
        if not node_list:
            raise NoNodesAvailableError()
        if len(node_list) == 1:
            return node_list[0].node

        try:
            score_list = self.run_score_plugins(ctx, state, config, node_list)
        except Exception as err:
            self.logger.error("scoring failed: %s", err)
            score_list = []
        selected = select_highest_score_node(score_list)
        self.logger.info("proxmox node %s was selected for vm %s", selected, config.name)
        return selected

    def select_vmid(self, ctx: Context, config: VirtualMachineCreateOptions) -> int:
        """Return the id for the VM: its own when given, otherwise from the plugins."""
        self.logger.info("finding proxmox vmid to be assigned to qemu")
        if config.vmid is not None:
            return config.vmid
        nextid = self.client.next_id(ctx)
        used_id = _used_id_map(ctx, self.client)
        return self.run_vmid_plugins(ctx, None, config, nextid, used_id)

    def run_filter_plugins(
        self,
        ctx: Context,
        state: CycleState,
        config: VirtualMachineCreateOptions,
        nodes: list[Node],
    ) -> list[Node]:
        """Return the nodes that pass every filter plugin."""
        self.logger.info("filtering proxmox node")
        feasible: list[Node] = []
        for node_info in get_node_info_list(ctx, self.client):
            status = Status()
            for plugin in self.registry.filter_plugins:
                status = plugin.filter(ctx, state, config, node_info)
                if not status.is_success():
                    status.failed_plugin = plugin.name()
                    break
            if status.is_success():
                feasible.append(node_info.node)
        return feasible

    def run_score_plugins(
        self,
        ctx: Context,
        state: CycleState,
        config: VirtualMachineCreateOptions,
        nodes: list[Node],
    ) -> list[NodeScore]:
        """Return each of ``nodes`` with the sum of its scores from every score plugin."""
        self.logger.info("scoring proxmox node")
        wanted = {node.node for node in nodes}
        totals: dict[str, int] = {}
        for node_info in get_node_info_list(ctx, self.client):
            name = node_info.node.node
            if name not in wanted:
                continue
            for plugin in self.registry.score_plugins:
                totals[name] = totals.get(name, 0) + plugin.score(ctx, state, config, node_info)
        return [NodeScore(name=node.node, score=totals.get(node.node, 0)) for node in nodes]

    def run_vmid_plugins(
        self,
        ctx: Context,
        state: CycleState | None,
        config: VirtualMachineCreateOptions,
        nextid: int,
        used_id: Mapping[int, bool],
    ) -> int:
        """Let the first VMID plugin whose key is in ``ctx`` choose; otherwise use ``nextid``."""
        for plugin in self.registry.vmid_plugins:
            if ctx.value(plugin.plugin_key()) is not None:
                self.logger.info("selecting vmid with plugin %s", plugin.name())
                return plugin.select(ctx, state, config, nextid, used_id)
        self.logger.info("no vmid key found. using nextid")
        return nextid


class Manager:
    """Creates schedulers and keeps one per Proxmox cluster."""

    def __init__(self, params: SchedulerParams) -> None:
        try:
            configs = get_plugin_config_from_file(params.plugin_config_file)
        except (OSError, ValueError) as err:
            raise ValueError(f"failed to read plugin config: {err}") from err
        self.params = replace(params, plugin_configs=configs)
        self.params.logger.info("load plugin config: %s", configs)
        self._table: dict[_SchedulerID, Scheduler] = {}
        self._lock = threading.Lock()

    def get_or_create_scheduler(self, client: ProxmoxClient) -> Scheduler:
        """Return the cluster's scheduler, creating and registering it when needed.

        When the cluster cannot be identified, an unregistered scheduler that
        stops itself after a minute is returned.
        """
        try:
            sched_id = self._scheduler_id(client)
        except Exception:
            return self.new_scheduler(client, with_timeout(UNREGISTERED_SCHEDULER_TIMEOUT))
        with self._lock:
            sched = self._table.get(sched_id)
            if sched is None:
                self.params.logger.debug("registering new scheduler")
                sched = self.new_scheduler(client)
                self._table[sched_id] = sched
                return sched
        sched.logger.debug("using existing scheduler")
        return sched

    def new_scheduler(self, client: ProxmoxClient, *args: SchedulerOption) -> Scheduler:
        """Return a new scheduler with the manager's plugins; options are applied in order."""
        sched = Scheduler(
            client,
            registry=new_registry(self.params.plugin_configs),
            logger=self.params.logger.getChild("qemu-scheduler"),
        )
        for option in args:
            option(sched)
        return sched

    @staticmethod
    def _scheduler_id(client: ProxmoxClient) -> _SchedulerID:
        # The address and fingerprint of the node with id 1 identify the cluster.
        join_config = client.join_config(Context())
        for node in join_config.node_list:
            if str(node.node_id) == "1":
                return _SchedulerID(ip_address=node.pve_addr, fingerprint=node.pve_fp)
        raise LookupError("no nodes with id=1")