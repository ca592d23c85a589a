import pytest

from cappx.api.options_types import (
    Arch,
    HugePages,
    Lock,
    Options,
    Tags,
    format_hugepages,
)


def test_hugepages_unset_is_empty():
    assert format_hugepages(None) == ""


@pytest.mark.parametrize("value", [0, HugePages.ANY])
def test_hugepages_zero_is_any(value):
    assert format_hugepages(value) == "any"


@pytest.mark.parametrize("value", [2, 1024, HugePages.SIZE_1G])
def test_hugepages_number(value):
    assert format_hugepages(value) == str(int(value))


def test_tags_each_followed_by_semicolon():
    tags = Tags(["a", "b"])
    rendered = str(tags)
    assert rendered.endswith(";")
    assert rendered.split(";") == ["a", "b", ""]


def test_empty_tags_render_empty():
    assert str(Tags()) == ""


def test_options_defaults():
    options = Options()
    assert options.hugepages is None
    assert str(options.tags) == ""
    assert format_hugepages(options.hugepages) == ""


def test_lock_values():
    assert Lock("snapshot-delete") is Lock.SNAPSHOT_DELETE
    with pytest.raises(ValueError):
        Lock("frozen")


def test_arch_rejects_unknown():
    assert Arch("aarch64") is Arch.AARCH64
    with pytest.raises(ValueError):
        Arch("riscv")