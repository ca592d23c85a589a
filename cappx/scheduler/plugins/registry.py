"""Plugin configuration and the registry of enabled scheduler plugins."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import yaml

from cappx.scheduler.framework.interface import NodeFilterPlugin, NodeScorePlugin, VMIDPlugin
from cappx.scheduler.plugins.idrange import Range
from cappx.scheduler.plugins.nodename import NodeName
from cappx.scheduler.plugins.noderesource import NodeResource
from cappx.scheduler.plugins.overcommit import CPUOvercommit, MemoryOvercommit
from cappx.scheduler.plugins.regex import NodeRegex, Regex


@dataclass
class PluginConfig:
    """Whether a plugin is enabled, and its settings."""

    enable: bool = False
    config: dict[str, Any] = field(default_factory=dict)


@dataclass
class PluginConfigs:
    """Plugin settings per plugin kind, keyed by plugin name."""

    filter_plugins: dict[str, PluginConfig] = field(default_factory=dict)
    score_plugins: dict[str, PluginConfig] = field(default_factory=dict)
    vmid_plugins: dict[str, PluginConfig] = field(default_factory=dict)


@dataclass
class PluginRegistry:
    """The enabled plugins of each kind, in the order they run."""

    filter_plugins: list[NodeFilterPlugin] = field(default_factory=list)
    score_plugins: list[NodeScorePlugin] = field(default_factory=list)
    vmid_plugins: list[VMIDPlugin] = field(default_factory=list)


def _enabled(plugins: list[Any], config: Mapping[str, PluginConfig] | None) -> list[Any]:
    # A plugin runs unless its config is present and disables it.
    config = config or {}
    return [pl for pl in plugins if pl.name() not in config or config[pl.name()].enable]


def new_node_filter_plugins(config: Mapping[str, PluginConfig] | None) -> list[NodeFilterPlugin]:
    return _enabled([NodeName(), CPUOvercommit(), MemoryOvercommit(), NodeRegex()], config)


def new_node_score_plugins(config: Mapping[str, PluginConfig] | None) -> list[NodeScorePlugin]:
    return _enabled([NodeResource()], config)


def new_vmid_plugins(config: Mapping[str, PluginConfig] | None) -> list[VMIDPlugin]:
    return _enabled([Range(), Regex()], config)


def new_registry(configs: PluginConfigs) -> PluginRegistry:
    return PluginRegistry(
        filter_plugins=new_node_filter_plugins(configs.filter_plugins),
        score_plugins=new_node_score_plugins(configs.score_plugins),
        vmid_plugins=new_vmid_plugins(configs.vmid_plugins),
    )


_SECTIONS = {
    "filters": "filter_plugins",
    "scores": "score_plugins",
    "vmids": "vmid_plugins",
}


def _load_plugin_config(name: str, entry: Any) -> PluginConfig:
    if entry is None:
        return PluginConfig()
    if not isinstance(entry, Mapping):
        raise ValueError(f"plugin {name}: expected a mapping, got {type(entry).__name__}")
    enable = entry.get("enable")
    if enable is None:
        enable = False
    elif not isinstance(enable, bool):
        raise ValueError(f"plugin {name}: enable must be a boolean, got {enable!r}")
    settings = entry.get("config")
    if settings is None:
        settings = {}
    elif not isinstance(settings, Mapping):
        raise ValueError(f"plugin {name}: config must be a mapping")
    return PluginConfig(enable=enable, config={str(k): v for k, v in settings.items()})


def _load_configs(data: Any) -> PluginConfigs:
    if data is None:
        return PluginConfigs()
    if not isinstance(data, Mapping):
        raise ValueError(f"plugin config must be a mapping, got {type(data).__name__}")
    kwargs: dict[str, dict[str, PluginConfig]] = {}
    for key, attr in _SECTIONS.items():
        section = data.get(key)
        if section is None:
            continue
        if not isinstance(section, Mapping):
            raise ValueError(f"{key}: expected a mapping, got {type(section).__name__}")
        kwargs[attr] = {
            str(name): _load_plugin_config(str(name), entry) for name, entry in section.items()
        }
    return PluginConfigs(**kwargs)


def get_plugin_config_from_file(path: str | os.PathLike[str] | None) -> PluginConfigs:
    """Read plugin settings from a YAML file; an empty path gives the defaults.

    Raises OSError when the file cannot be read and ValueError when it is malformed.
    """
    if not path:
        return PluginConfigs()
    with open(path, encoding="utf-8") as fh:
        text = fh.read()
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as err:
        raise ValueError(f"invalid plugin config: {err}") from err
    return _load_configs(data)