import pytest

from cappx.api.cloudinit_types import CACert, User, UserData, WriteFiles
from cappx.cloudinit import generate_user_data_yaml, merge_user_datas, parse_user_data

VALID_YAML = """
write_files:
  - path: /run/kubeadm/kubeadm.yaml
    owner: root:root
    permissions: '0640'
    content: |
      asdfasdfasdf
runcmd:
  - 'kubeadm init --config /run/kubeadm/kubeadm.yaml  && echo success > /run/cluster-api/bootstrap-success.complete'
  - "curl -L https://dl.k8s.io/release/v1.27.3/bin/linux/amd64/kubectl -o /usr/local/bin/kubectl"
  - "chmod +x /usr/local/bin/kubectl"
  - "reboot now"
  """

INVALID_YAML = """
write_files:
  - path: /run/kubeadm/kubeadm.yaml
owner: root:root
    permissions: '0640'
    content: |
      asdfasdfasdf
  """


def test_parse_correct_format():
    user_data = parse_user_data(VALID_YAML)
    assert user_data is not None
    assert user_data.write_files[0].path == "/run/kubeadm/kubeadm.yaml"
    assert user_data.write_files[0].owner == "root:root"
    assert user_data.write_files[0].permissions == "0640"
    assert user_data.run_cmd[-1] == "reboot now"
    assert len(user_data.run_cmd) == 4


def test_parse_incorrect_format_raises():
    with pytest.raises(ValueError):
        parse_user_data(INVALID_YAML)


def test_parse_empty_document_gives_none():
    assert parse_user_data("") is None


def test_parse_non_mapping_raises():
    with pytest.raises(ValueError):
        parse_user_data("- just\n- a list\n")


def test_generate_user_data_yaml():
    user_data = UserData(run_cmd=["echo", "pwd"])
    text = generate_user_data_yaml(user_data)
    assert text.startswith("#cloud-config\n")
    assert "runcmd" in text


def test_generate_round_trip():
    user_data = UserData(
        hostname="node-1",
        run_cmd=["echo", "pwd"],
        ca_certs=CACert(trusted=["cert"]),
        users=[User(name="admin", groups=["wheel"], lock_passwd=False)],
        write_files=[WriteFiles(path="/etc/motd", content="hello\n")],
    )
    text = generate_user_data_yaml(user_data)
    assert parse_user_data(text) == user_data


def test_merge_user_datas():
    a = UserData(user="override-user", run_cmd=["command A", "command B"])
    b = UserData(user="test-user", run_cmd=["command C"])
    expected = UserData(user="override-user", run_cmd=["command A", "command B", "command C"])
    merged = merge_user_datas(a, b)
    assert merged == expected
    assert merged is a


def test_merge_fills_empty_fields_and_nested():
    a = UserData(ca_certs=CACert(trusted=["one"]))
    b = UserData(hostname="node-2", package_update=True, ca_certs=CACert(remove_defaults=True, trusted=["two"]))
    merged = merge_user_datas(a, b)
    assert merged.hostname == "node-2"
    assert merged.package_update is True
    assert merged.ca_certs == CACert(remove_defaults=True, trusted=["one", "two"])
    assert b.ca_certs.trusted == ["two"]


def test_merge_none_raises():
    with pytest.raises(ValueError):
        merge_user_datas(UserData(), None)