import pytest

from cappx.api.cloudinit_types import CloudInit
from cappx.api.resources import (
    CLUSTER_FINALIZER,
    GROUP_VERSION,
    MACHINE_FINALIZER,
    APIEndpoint,
    GroupVersion,
    ObjectMeta,
    ProxmoxCluster,
    ProxmoxClusterList,
    ProxmoxClusterSpec,
    ProxmoxClusterStatus,
    ProxmoxMachine,
    ProxmoxMachineList,
    ProxmoxMachineSpec,
    ProxmoxMachineStatus,
    ProxmoxMachineTemplate,
    ProxmoxMachineTemplateList,
    ProxmoxMachineTemplateResource,
    ProxmoxMachineTemplateSpec,
    registered_kinds,
)
from cappx.api.types import Hardware, Image, ServerRef, Storage

ALL_KINDS = (
    ProxmoxCluster,
    ProxmoxClusterList,
    ProxmoxMachine,
    ProxmoxMachineList,
    ProxmoxMachineTemplate,
    ProxmoxMachineTemplateList,
)


def _machine_spec(url="http://images.example.com/disk.qcow2"):
    return ProxmoxMachineSpec(image=Image(url=url))


def test_group_version_str():
    gv = GroupVersion(group="infrastructure.cluster.x-k8s.io", version="v1beta1")
    text = str(gv)
    assert text == "infrastructure.cluster.x-k8s.io/v1beta1"
    assert text == str(GROUP_VERSION)


def test_group_version_without_group_is_version():
    assert str(GroupVersion(group="", version="v1")) == "v1"


@pytest.mark.parametrize("cls", ALL_KINDS)
def test_registered_kinds_map_to_classes(cls):
    kinds = registered_kinds()
    assert cls.kind == cls.__name__
    assert kinds[cls.kind] is cls


def test_registered_kinds_is_a_copy():
    kinds = registered_kinds()
    kinds.clear()
    assert len(registered_kinds()) == len(ALL_KINDS)


def test_api_version_matches_group_version():
    machine = ProxmoxMachine(spec=_machine_spec())
    cluster = ProxmoxCluster(spec=ProxmoxClusterSpec(server_ref=ServerRef(endpoint="https://pve.example.com")))
    assert machine.api_version == str(GROUP_VERSION)
    assert cluster.api_version == str(GROUP_VERSION)


def test_finalizers_belong_to_group():
    assert CLUSTER_FINALIZER.endswith(GROUP_VERSION.group)
    assert MACHINE_FINALIZER.endswith(GROUP_VERSION.group)


def test_machine_spec_defaults():
    spec = _machine_spec()
    assert spec.hardware == Hardware()
    assert spec.vmid is None
    assert spec.provider_id is None
    assert spec.cloud_init == CloudInit()
    assert spec.node == ""


def test_cluster_spec_defaults():
    spec = ProxmoxClusterSpec(server_ref=ServerRef(endpoint="https://pve.example.com"))
    assert spec.control_plane_endpoint == APIEndpoint()
    assert spec.storage == Storage()
    assert spec.server_ref.endpoint == "https://pve.example.com"


def test_status_defaults_are_independent():
    first = ProxmoxMachineStatus()
    second = ProxmoxMachineStatus()
    first.addresses.append({"type": "InternalIP", "address": "10.0.0.1"})
    assert second.addresses == []
    assert first.ready is False
    assert ProxmoxClusterStatus().failure_domains == {}


def test_template_wraps_machine_spec():
    url = "http://images.example.com/jammy.img"
    template = ProxmoxMachineTemplate(
        spec=ProxmoxMachineTemplateSpec(
            template=ProxmoxMachineTemplateResource(spec=_machine_spec(url))
        ),
        metadata=ObjectMeta(name="workers", namespace="default"),
    )
    assert template.spec.template.spec.image.url == url
    assert template.metadata.name == "workers"


def test_lists_hold_items():
    machines = [ProxmoxMachine(spec=_machine_spec(), metadata=ObjectMeta(name=n)) for n in ("a", "b")]
    listing = ProxmoxMachineList(items=machines)
    assert [m.metadata.name for m in listing.items] == ["a", "b"]
    assert ProxmoxClusterList().items == []
    assert ProxmoxMachineTemplateList().items == []