import pytest

from cappx.providerid import ProviderID


def test_empty_uuid_raises():
    with pytest.raises(ValueError):
        ProviderID("")


def test_non_empty_uuid():
    provider_id = ProviderID("asdf")
    assert provider_id.uuid == "asdf"
    assert str(provider_id) == "proxmox://asdf"


def test_uuid_method():
    assert ProviderID("asdf").uuid == "asdf"


def test_string_method():
    assert str(ProviderID("asdf")) == "proxmox://asdf"


def test_provider_ids_compare_by_uuid():
    assert ProviderID("asdf") == ProviderID("asdf")
    assert len({ProviderID("asdf"), ProviderID("asdf")}) == 1