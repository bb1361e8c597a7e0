import os

import pytest

from siomon.collectors.base import (
    Collector,
    SystemInfo,
    glob_paths,
    read_link_basename,
    read_string_optional,
    read_u32_optional,
    read_u64_optional,
)


def test_read_string_strips(tmp_path):
    attr = tmp_path / "attr"
    attr.write_text("  hello world \n")
    assert read_string_optional(attr) == "hello world"


def test_read_string_missing_or_empty(tmp_path):
    assert read_string_optional(tmp_path / "missing") is None
    empty = tmp_path / "empty"
    empty.write_text("\n")
    assert read_string_optional(empty) is None


def test_read_string_directory(tmp_path):
    assert read_string_optional(tmp_path) is None


@pytest.mark.parametrize(
    ("content", "expected"),
    [("42\n", 42), ("0x10de\n", 0x10DE), ("0X1A", 0x1A), ("abc", None), ("-1", None), ("", None)],
)
def test_read_u64(tmp_path, content, expected):
    attr = tmp_path / "value"
    attr.write_text(content)
    assert read_u64_optional(attr) == expected


def test_read_u32_range(tmp_path):
    attr = tmp_path / "value"
    attr.write_text("4294967296")
    assert read_u32_optional(attr) is None
    assert read_u64_optional(attr) == 4294967296
    attr.write_text("4294967295")
    assert read_u32_optional(attr) == 4294967295


def test_read_link_basename(tmp_path):
    target = tmp_path / "drivers" / "e1000e"
    target.mkdir(parents=True)
    link = tmp_path / "driver"
    os.symlink(target, link)
    assert read_link_basename(link) == "e1000e"
    assert read_link_basename(tmp_path / "nothing") is None


def test_glob_paths_sorted(tmp_path):
    for name in ("card2", "card0", "card1", "other"):
        (tmp_path / name).mkdir()
    found = glob_paths(f"{tmp_path}/card*")
    assert [p.name for p in found] == ["card0", "card1", "card2"]


def test_system_info_defaults():
    info = SystemInfo()
    assert info.cpus == [] and info.audio == [] and info.usb_devices == []
    assert info.memory is None


def test_collector_is_abstract():
    with pytest.raises(TypeError):
        Collector()


def test_collector_subclass_writes_into_info():
    class Fake(Collector):
        name = "fake"

        def collect_into(self, info):
            info.audio = ["device"]

    info = SystemInfo()
    Fake().collect_into(info)
    assert info.audio == ["device"]