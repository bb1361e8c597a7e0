import pytest

from siomon.collectors.base import SystemInfo
from siomon.collectors.motherboard import (
    MotherboardCollector,
    chassis_type_name,
    collect,
    detect_chipset,
    detect_secure_boot,
)


def _write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)


@pytest.fixture
def fake_root(tmp_path):
    dmi = tmp_path / "sys/class/dmi/id"
    _write(dmi / "board_vendor", "ASUSTeK COMPUTER INC.\n")
    _write(dmi / "board_name", "ROG CROSSHAIR X670E HERO\n")
    _write(dmi / "board_serial", "EXAMPLE0001\n")
    _write(dmi / "sys_vendor", "Example Vendor\n")
    _write(dmi / "chassis_type", "3\n")
    _write(dmi / "bios_vendor", "American Megatrends Inc.\n")
    _write(dmi / "bios_version", "1234\n")
    _write(dmi / "bios_release", "5.27\n")
    (tmp_path / "sys/firmware/efi/efivars").mkdir(parents=True)
    (tmp_path / "sys/firmware/efi/efivars/SecureBoot-0000").write_bytes(b"\x06\x00\x00\x00\x01")
    _write(tmp_path / "sys/class/mei/mei0/fw_ver", "0:16.1.25.1885\n")
    return tmp_path


@pytest.mark.parametrize(
    ("code", "name"),
    [(1, "Other"), (3, "Desktop"), (9, "Laptop"), (35, "Mini PC"), (36, "Stick PC"), (0, "Unknown"), (200, "Unknown")],
)
def test_chassis_type_name(code, name):
    assert chassis_type_name(code) == name


def test_secure_boot_enabled(fake_root):
    assert detect_secure_boot(fake_root) is True


def test_secure_boot_disabled(tmp_path):
    var = tmp_path / "sys/firmware/efi/efivars/SecureBoot-0000"
    var.parent.mkdir(parents=True)
    var.write_bytes(b"\x06\x00\x00\x00\x00")
    assert detect_secure_boot(tmp_path) is False


def test_secure_boot_short_variable(tmp_path):
    var = tmp_path / "sys/firmware/efi/efivars/SecureBoot-0000"
    var.parent.mkdir(parents=True)
    var.write_bytes(b"\x06\x00")
    assert detect_secure_boot(tmp_path) is None


def test_secure_boot_missing(tmp_path):
    assert detect_secure_boot(tmp_path) is None


def test_detect_chipset_formats_ids(tmp_path):
    bridge = tmp_path / "sys/bus/pci/devices/0000:00:00.0"
    _write(bridge / "vendor", "0x1022\n")
    _write(bridge / "device", "0x14d8\n")
    assert detect_chipset(tmp_path) == "1022:14d8"


def test_detect_chipset_missing_device(tmp_path):
    _write(tmp_path / "sys/bus/pci/devices/0000:00:00.0/vendor", "0x1022\n")
    assert detect_chipset(tmp_path) is None


def test_collect_reads_dmi(fake_root):
    info = collect(fake_root)
    assert info.manufacturer == "ASUSTeK COMPUTER INC."
    assert info.product_name == "ROG CROSSHAIR X670E HERO"
    assert info.serial_number == "EXAMPLE0001"
    assert info.system_vendor == "Example Vendor"
    assert info.version is None
    assert info.chassis_type == "Desktop"
    assert info.bios.vendor == "American Megatrends Inc."
    assert info.bios.version == "1234"
    assert info.bios.release == "5.27"
    assert info.bios.uefi_boot is True
    assert info.bios.secure_boot is True
    assert info.me_version == "0:16.1.25.1885"
    assert info.chipset is None


def test_collect_empty_root(tmp_path):
    info = collect(tmp_path)
    assert info.manufacturer is None
    assert info.chassis_type is None
    assert info.bios.uefi_boot is False
    assert info.bios.secure_boot is None
    assert info.me_version is None


def test_collector_fills_system_info(fake_root):
    info = SystemInfo()
    MotherboardCollector(root=fake_root).collect_into(info)
    assert info.motherboard.product_name == "ROG CROSSHAIR X670E HERO"
    assert MotherboardCollector.name == "motherboard"