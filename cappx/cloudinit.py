"""Reading, writing and merging cloud-config user data."""

from __future__ import annotations

import copy
from dataclasses import fields, is_dataclass
from typing import Any

import yaml

from cappx.api.cloudinit_types import UserData

CLOUD_CONFIG_HEADER = "#cloud-config\n"


def parse_user_data(content: str) -> UserData | None:
    """Parse a cloud-config YAML document; an empty document gives None."""
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as err:
        raise ValueError(f"invalid user data: {err}") from err
    if data is None:
        return None
    return UserData.from_dict(data)


def generate_user_data_yaml(config: UserData) -> str:
    """Render user data as a cloud-config document."""
    body = yaml.safe_dump(
        config.to_dict(), sort_keys=False, default_flow_style=False, allow_unicode=True
    )
    return CLOUD_CONFIG_HEADER + body


def merge_user_datas(a: UserData, b: UserData) -> UserData:
    """Fill the empty fields of ``a`` from ``b`` and append ``b``'s lists to ``a``'s.

    ``a`` is updated in place and returned.
    """
    if a is None or b is None:
        raise ValueError("user data to merge must not be None")
    if type(a) is not type(b):
        raise TypeError(f"cannot merge {type(b).__name__} into {type(a).__name__}")
    _merge(a, b)
    return a


def _merge(dst: Any, src: Any) -> None:
    for f in fields(dst):
        current = getattr(dst, f.name)
        incoming = getattr(src, f.name)
        if is_dataclass(current) and is_dataclass(incoming):
            _merge(current, incoming)
        elif isinstance(current, list):
            setattr(dst, f.name, [*current, *copy.deepcopy(incoming or [])])
        elif not current and (incoming or current is None):
            setattr(dst, f.name, copy.deepcopy(incoming))