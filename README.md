# cappx

`cappx` models the resources used to provision Proxmox VE virtual machines as
cluster nodes. It also provides a small, pluggable scheduler. The scheduler
decides which Proxmox node a new QEMU instance runs on and which VMID it gets.

It is a library only. It has no command-line entry point.

## Resource types — `cappx.api`

- `cappx.api.types` holds the building blocks of a machine spec:
  - `Image`, `Hardware`, `NetworkDevice`, `NetworkDeviceModel`, `Network`,
    `IPConfig`, `Storage`, `ServerRef` and `ObjectReference`;
  - the `InstanceStatus` values `paused`, `running` and `stopped`.

  `str()` of a `NetworkDevice` gives the option string the Proxmox API takes,
  for example `model=virtio,bridge=vmbr0,firewall=1`. `str()` of an
  `IPConfig` works the same way, for example `ip=10.0.0.2/24,gw=10.0.0.1`.
  An `IPConfig` with neither `ip` nor `ip6` renders as `ip=dhcp`.
  `Hardware` and `NetworkDevice` default to 2 CPUs, 4096 MiB of memory, a 50G
  disk and a `virtio` device on `vmbr0` with the firewall on.
- `cappx.api.options_types` holds the QEMU instance `Options` and their
  enumerations `Arch`, `BIOS`, `HugePages`, `Lock` and `OSType`.
  - `Tags` is a list whose `str()` puts `;` after each tag (`a;b;`).
  - `format_hugepages(value)` gives `""` for `None`, `"any"` for `0`, and
    the number otherwise.
- `cappx.api.cloudinit_types` holds the cloud-init user data types:
  - `UserData`, `User`, `WriteFiles`, `SSH`, `SSHKeys`, `CACert`,
    `ChPasswd` and `CloudInit`.
  - `UserData.to_dict()` gives a mapping keyed by cloud-config names
    (`runcmd`, `bootcmd`, `write_files`, ...). It leaves out empty fields.
  - `UserData.from_dict(data)` builds user data from such a mapping. It
    ignores unknown keys and raises `ValueError` on values of the wrong type.
- `cappx.api.resources` holds the top-level resources `ProxmoxCluster`,
  `ProxmoxMachine` and `ProxmoxMachineTemplate`.
  - It also has their specs, statuses and `...List` types, plus
    `ObjectMeta` and `APIEndpoint`.
  - Each resource has a `kind` and an `api_version`
    (`infrastructure.cluster.x-k8s.io/v1beta1`, from `GROUP_VERSION`).
  - `registered_kinds()` maps every kind name to its class.
  - `CLUSTER_FINALIZER` and `MACHINE_FINALIZER` hold the finalizer names.

## Cloud-init — `cappx.cloudinit`

- `parse_user_data(content)` reads a cloud-config YAML document into a
  `UserData`. An empty document gives `None`. Malformed YAML raises
  `ValueError`.
- `generate_user_data_yaml(config)` writes a `UserData` back out with a
  `#cloud-config` header line.
- `merge_user_datas(a, b)` updates `a` in place and returns it:
  - empty fields of `a` are filled from `b`;
  - `b`'s lists are appended to `a`'s, so `a`'s commands come first.

```python
from cappx.api.cloudinit_types import UserData
from cappx.cloudinit import merge_user_datas

a = UserData(user="override-user", run_cmd=["command A", "command B"])
b = UserData(user="test-user", run_cmd=["command C"])
merged = merge_user_datas(a, b)
# merged.user == "override-user"
# merged.run_cmd == ["command A", "command B", "command C"]
```

## Provider IDs — `cappx.providerid`

`ProviderID(uuid)` wraps a machine's BIOS UUID. `str()` gives
`proxmox://<uuid>`. An empty UUID raises `ValueError`. The UUID's format is
not checked.

## Scheduler — `cappx.scheduler`

### Handling one request

`cappx.scheduler.scheduler.Scheduler` takes `VirtualMachineCreateOptions`
requests from a `SchedulingQueue` (`cappx.scheduler.queue`). For each request
it does the following:

1. It runs the filter plugins over every node the client reports.
2. If one node is left, it uses that node. If several are left, it adds up
   their scores from the score plugins and picks the first node with the
   highest score. `select_highest_score_node` does this choice.
   - No node left raises `NoNodesAvailableError`.
3. It uses the request's own `vmid` if it has one. Otherwise the VMID plugins
   choose, with the client's next free ID as the fallback.
4. It creates the VM through the client. The outcome is recorded in a
   `CycleState`: `completed`, `error`, `messages` and a `SchedulerResult`
   with `vmid`, `node` and `instance`.

### Running a scheduler

- `run()` schedules requests until `stop()` is called. `run_async()` does the
  same in a daemon thread and returns that thread.
- `is_running()` reports whether a run is active. Only one run can be active
  at a time.
- `create_qemu(ctx, config)` queues a request and waits for its result. It
  raises the error that scheduling raised. If no result arrives within
  `status_timeout` seconds (60 by default), it raises `TimeoutError`.

### The client

The scheduler talks to Proxmox through a client object that you supply. The
client has the methods of the `ProxmoxClient` protocol:

| Method | Returns |
|--------|---------|
| `nodes(ctx)` | a list of `Node` |
| `node_virtual_machines(ctx, node)` | the `VirtualMachine`s of one node |
| `virtual_machines(ctx)` | all VMs, used to find the VMIDs in use |
| `next_id(ctx)` | the next free VMID |
| `create_virtual_machine(ctx, node, vmid, config)` | the created instance |
| `join_config(ctx)` | an object with a `node_list` of entries that have `node_id`, `pve_addr` and `pve_fp` |

### Managers

`Manager(SchedulerParams(...))` loads the plugin configuration file named in
`plugin_config_file`. If the file cannot be read or parsed, it raises
`ValueError`. The manager then hands out schedulers:

- `new_scheduler(client, *options)` builds a fresh scheduler. For example,
  `with_timeout(seconds)` is an option that stops the scheduler after that
  many seconds.
- `get_or_create_scheduler(client)` keeps one scheduler per Proxmox cluster.
  - It identifies the cluster by the address and fingerprint of the node
    whose id is `1` in the join config.
  - If the cluster cannot be identified, it returns an unregistered
    scheduler that stops itself after 60 seconds.

### Plugins

| Kind   | Class (module)                      | Effect |
|--------|-------------------------------------|--------|
| filter | `NodeName` (`nodename`)             | Keeps only the node named in `config.node`, if one is named. |
| filter | `CPUOvercommit` (`overcommit`)      | Rejects a node when the CPUs of its running VMs plus `cores × sockets` exceed 4 × the node's `max_cpu`. |
| filter | `MemoryOvercommit` (`overcommit`)   | Rejects a node when the `max_mem` of its running VMs plus `memory` MiB reach the node's `max_mem`. |
| filter | `NodeRegex` (`regex`)               | Keeps nodes whose name contains a match of the regex in the context. |
| score  | `NodeResource` (`noderesource`)     | Scores `1 / (cpu / max_cpu × (mem // max_mem))`. Infinite or NaN results become the smallest 64-bit integer. |
| score  | `Random` (`random_score`)           | Gives a random score in `[0, 100)`. |
| vmid   | `Range` (`idrange`)                 | Picks the lowest unused VMID in the context's `start-end` range. Raises `ValueError` when the range is full. |
| vmid   | `Regex` (`regex`)                   | Picks the lowest unused VMID from the next ID upwards that contains a match of the context's regex. |

All of these classes live under `cappx.scheduler.plugins`. The registry sets
up every plugin above except `Random`. To use `Random`, you must add it to a
`PluginRegistry` yourself.

The regex and range plugins read their settings from the request's `Context`
(`cappx.scheduler.framework.context`). The keys are:

- `node.qemu-scheduler/regex`
- `vmid.qemu-scheduler/range`
- `vmid.qemu-scheduler/regex`

`context_with_map(ctx, mapping)` binds a plain mapping, such as a machine's
annotations, into a context under `CtxKey` keys. A `CtxKey` does not match a
plain string key.

The first VMID plugin whose key is bound in the context chooses the ID.
`Range` is tried before `Regex`.

### Plugin configuration

`cappx.scheduler.plugins.registry.get_plugin_config_from_file(path)` reads a
YAML file into `PluginConfigs`. `new_registry(configs)` builds the
`PluginRegistry` from it.

A registered plugin runs unless its name appears in its section without
`enable: true`:

```yaml
filters:
  CPUOvercommit:
    enable: false
scores:
  NodeResource:
    enable: true
vmids:
  Regex:
    enable: false
```

An empty path gives an empty configuration, in which every registered plugin
runs. A missing file raises `OSError`. A malformed file raises `ValueError`.

### Writing a plugin

Subclass one of the base classes in `cappx.scheduler.framework.interface`:

- `NodeFilterPlugin`: implement `name()` and `filter()`. Return a `Status`;
  a `code` of `0` means the node may be used.
- `NodeScorePlugin`: implement `name()` and `score()`, which returns an
  integer.
- `VMIDPlugin`: implement `name()`, `plugin_key()` and `select()`, which
  returns an integer VMID.

Add your plugin to the lists of a `PluginRegistry`.

## What the package does not do

- It has no Proxmox API client. You must supply an object that implements
  `ProxmoxClient`.
- It has no controller that watches or reconciles cluster and machine
  resources. The resource classes are plain dataclasses. They do not read or
  write Kubernetes manifests.
- It has no command-line tool.