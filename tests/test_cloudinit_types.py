import pytest

from cappx.api.cloudinit_types import (
    SSH,
    CACert,
    CloudInit,
    User,
    UserData,
    WriteFiles,
)


def test_empty_user_data_has_no_keys():
    assert UserData().to_dict() == {}


def test_run_cmd_uses_cloud_config_key():
    data = UserData(run_cmd=["echo", "pwd"])
    assert data.to_dict() == {"runcmd": ["echo", "pwd"]}


def test_zero_nested_struct_is_omitted_non_zero_kept():
    data = UserData(ssh=SSH(emit_keys_to_console=True), ca_certs=CACert())
    assert data.to_dict() == {"ssh": {"emit_keys_to_console": True}}


def test_user_name_is_always_written():
    data = UserData(users=[User()])
    assert data.to_dict() == {"users": [{"name": ""}]}


def test_lock_passwd_false_is_written_none_is_not():
    locked = UserData(users=[User(name="alice", lock_passwd=False)]).to_dict()
    assert locked["users"][0]["lock_passwd"] is False
    unset = UserData(users=[User(name="alice")]).to_dict()
    assert "lock_passwd" not in unset["users"][0]


def test_round_trip_full_document():
    data = UserData(
        boot_cmd=["true"],
        hostname="node-a",
        manage_etc_hosts=True,
        packages=["curl"],
        run_cmd=["kubeadm init"],
        ssh_authorized_keys=["ssh-ed25519 placeholder"],
        users=[User(name="ops", groups=["wheel"], inactive=3, lock_passwd=True)],
        write_files=[
            WriteFiles(path="/run/kubeadm/kubeadm.yaml", owner="root:root", permissions="0640", content="x\n")
        ],
    )
    assert UserData.from_dict(data.to_dict()) == data


def test_from_dict_none_gives_empty():
    assert UserData.from_dict(None) == UserData()


def test_from_dict_ignores_unknown_keys():
    data = UserData.from_dict({"unknown": 1, "user": "ubuntu"})
    assert data == UserData(user="ubuntu")


def test_hostname_key():
    data = UserData.from_dict({"hostname": "node-a"})
    assert data.hostname == "node-a"
    assert data.to_dict() == {"hostname": "node-a"}


def test_scalar_is_read_as_string():
    data = UserData.from_dict({"write_files": [{"permissions": 640}]})
    assert data.write_files[0].permissions == "640"


def test_bool_field_rejects_string():
    with pytest.raises(ValueError):
        UserData.from_dict({"manage_etc_hosts": "sometimes"})


def test_list_field_rejects_scalar():
    with pytest.raises(ValueError):
        UserData.from_dict({"runcmd": "echo"})


def test_nested_field_rejects_sequence():
    with pytest.raises(ValueError):
        UserData.from_dict({"ssh": ["a"]})


def test_cloud_init_holds_user_data():
    user_data = UserData(user="ubuntu")
    assert CloudInit(user_data=user_data).user_data.to_dict() == {"user": "ubuntu"}
    assert CloudInit().user_data is None