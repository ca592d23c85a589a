"""Cloud-init user-data types written to the VM disk as a raw cloud-config file."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import Field, dataclass, field, fields
from typing import Any


def _spec(
    key: str | None,
    kind: str,
    *,
    items: Any = None,
    omitempty: bool = True,
    **kwargs: Any,
) -> Any:
    """Describe how a field maps onto a cloud-config key.

    A key of None means the cloud-config key is the field's own name.
    """
    metadata = {"key": key, "kind": kind, "items": items, "omitempty": omitempty}
    return field(metadata=metadata, **kwargs)


def _str(key: str | None = None, **kwargs: Any) -> Any:
    return _spec(key, "str", default="", **kwargs)


def _bool(key: str | None = None) -> Any:
    return _spec(key, "bool", default=False)


def _optbool(key: str | None = None) -> Any:
    return _spec(key, "optbool", default=None)


def _int(key: str | None = None) -> Any:
    return _spec(key, "int", default=0)


def _strlist(key: str | None = None) -> Any:
    return _spec(key, "list", items=str, default_factory=list)


def _struct(cls: type, key: str | None = None) -> Any:
    return _spec(key, "struct", items=cls, default_factory=cls)


def _structlist(cls: type, key: str | None = None) -> Any:
    return _spec(key, "list", items=cls, default_factory=list)


def _key(f: Field) -> str:
    return f.metadata["key"] or f.name


@dataclass
class CACert:
    remove_defaults: bool = _bool()
    trusted: list[str] = _strlist()


@dataclass
class ChPasswd:
    expire: str = _str()


@dataclass
class SSH:
    emit_keys_to_console: bool = _bool()


@dataclass
class SSHKeys:
    rsa_private: str = _str()
    rsa_public: str = _str()
    dsa_private: str = _str()
    dsa_public: str = _str()
    ecdsa_private: str = _str()
    ecdsa_public: str = _str()


@dataclass
class User:
    name: str = _str(omitempty=False)
    expire_date: str = _str("expiredate")
    gecos: str = _str()
    home_dir: str = _str("homedir")
    primary_group: str = _str()
    groups: list[str] = _strlist()
    selinux_user: str = _str()
    lock_passwd: bool | None = _optbool()
    inactive: int = _int()
    passwd: str = _str()
    no_create_home: bool = _bool()
    no_user_group: bool = _bool()
    no_log_init: bool = _bool()
    ssh_import_id: list[str] = _strlist()
    ssh_authorized_keys: list[str] = _strlist()
    ssh_redirect_user: bool = _bool()
    sudo: list[str] = _strlist()
    system: bool = _bool()
    snap_user: str = _str("snapuser")
    shell: str = _str()


@dataclass
class WriteFiles:
    encoding: str = _str()
    path: str = _str()
    owner: str = _str()
    permissions: str = _str()
    defer: bool = _bool()
    content: str = _str()


@dataclass
class UserData:
    """The cloud-config document handed to cloud-init."""

    boot_cmd: list[str] = _strlist("bootcmd")
    ca_certs: CACert = _struct(CACert)
    chpasswd: ChPasswd = _struct(ChPasswd)
    hostname: str = _str()
    manage_etc_hosts: bool = _bool()
    no_ssh_fingerprints: bool = _bool()
    packages: list[str] = _strlist()
    package_update: bool = _bool()
    package_upgrade: bool = _bool()
    password: str = _str()
    run_cmd: list[str] = _strlist("runcmd")
    ssh: SSH = _struct(SSH)
    ssh_authorized_keys: list[str] = _strlist()
    ssh_keys: SSHKeys = _struct(SSHKeys)
    ssh_pwauth: bool = _bool()
    user: str = _str()
    users: list[User] = _structlist(User)
    write_files: list[WriteFiles] = _structlist(WriteFiles)

    def to_dict(self) -> dict[str, Any]:
        """Return the cloud-config mapping, leaving out empty fields."""
        return _dump(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> UserData:
        """Build user data from a cloud-config mapping; unknown keys are ignored."""
        return _load(cls, data)


@dataclass
class CloudInit:
    """Cloud-init settings of a machine."""

    user_data: UserData | None = None


def _is_zero(value: Any, kind: str) -> bool:
    if kind == "struct":
        return value == type(value)()
    if kind == "optbool":
        return value is None
    return not value


def _dump(obj: Any) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for f in fields(obj):
        meta = f.metadata
        value = getattr(obj, f.name)
        kind = meta["kind"]
        if meta["omitempty"] and _is_zero(value, kind):
            continue
        key = _key(f)
        if kind == "struct":
            out[key] = _dump(value)
        elif kind == "list":
            if meta["items"] is str:
                out[key] = [str(item) for item in value]
            else:
                out[key] = [_dump(item) for item in value]
        else:
            out[key] = value
    return out


def _load(cls: type, data: Any) -> Any:
    if data is None:
        return cls()
    if not isinstance(data, Mapping):
        raise ValueError(f"cannot decode {type(data).__name__} into {cls.__name__}")
    by_key = {_key(f): f for f in fields(cls)}
    kwargs: dict[str, Any] = {}
    for key, raw in data.items():
        f = by_key.get(key)
        if f is None or raw is None:
            continue
        kwargs[f.name] = _decode(raw, f.metadata, f"{cls.__name__}.{key}")
    return cls(**kwargs)


def _decode_str(raw: Any, where: str) -> str:
    if isinstance(raw, bool):
        return "true" if raw else "false"
    if isinstance(raw, (Mapping, list, tuple)):
        raise ValueError(f"{where}: expected a scalar, got {type(raw).__name__}")
    return str(raw)


def _decode(raw: Any, meta: Mapping[str, Any], where: str) -> Any:
    kind = meta["kind"]
    if kind == "str":
        return _decode_str(raw, where)
    if kind in ("bool", "optbool"):
        if not isinstance(raw, bool):
            raise ValueError(f"{where}: expected a boolean, got {raw!r}")
        return raw
    if kind == "int":
        if isinstance(raw, bool) or not isinstance(raw, int):
            raise ValueError(f"{where}: expected an integer, got {raw!r}")
        return raw
    if kind == "struct":
        return _load(meta["items"], raw)
    if not isinstance(raw, list):
        raise ValueError(f"{where}: expected a sequence, got {type(raw).__name__}")
    if meta["items"] is str:
        return [_decode_str(item, where) for item in raw]
    return [_load(meta["items"], item) for item in raw]