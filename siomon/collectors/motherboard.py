"""Motherboard, system and BIOS information from DMI sysfs."""

from __future__ import annotations

import glob
import os
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar

from siomon.collectors import me
from siomon.collectors.base import (
    Collector,
    SystemInfo,
    glob_paths,
    read_string_optional,
    read_u64_optional,
)


@dataclass
class BiosInfo:
    vendor: str | None = None
    version: str | None = None
    date: str | None = None
    release: str | None = None
    uefi_boot: bool = False
    secure_boot: bool | None = None


@dataclass
class MotherboardInfo:
    manufacturer: str | None = None
    product_name: str | None = None
    version: str | None = None
    serial_number: str | None = None
    system_vendor: str | None = None
    system_product: str | None = None
    system_family: str | None = None
    system_sku: str | None = None
    system_uuid: str | None = None
    chassis_type: str | None = None
    bios: BiosInfo | None = None
    chipset: str | None = None
    me_version: str | None = None


_CHASSIS_TYPES = (
    "Other",
    "Unknown",
    "Desktop",
    "Low Profile Desktop",
    "Pizza Box",
    "Mini Tower",
    "Tower",
    "Portable",
    "Laptop",
    "Notebook",
    "Hand Held",
    "Docking Station",
    "All in One",
    "Sub Notebook",
    "Space-Saving",
    "Lunch Box",
    "Main Server Chassis",
    "Expansion Chassis",
    "Sub Chassis",
    "Bus Expansion Chassis",
    "Peripheral Chassis",
    "RAID Chassis",
    "Rack Mount Chassis",
    "Sealed-case PC",
    "Multi-system Chassis",
    "Compact PCI",
    "Advanced TCA",
    "Blade",
    "Blade Enclosure",
    "Tablet",
    "Convertible",
    "Detachable",
    "IoT Gateway",
    "Embedded PC",
    "Mini PC",
    "Stick PC",
)


def chassis_type_name(code: int) -> str:
    """Name of an SMBIOS chassis type code (codes start at 1)."""
    if 1 <= code <= len(_CHASSIS_TYPES):
        return _CHASSIS_TYPES[code - 1]
    return "Unknown"


def detect_secure_boot(root: str | os.PathLike[str] = "/") -> bool | None:
    """Read the SecureBoot EFI variable; None if it cannot be read."""
    base = glob.escape(os.fspath(root))
    for entry in glob_paths(os.path.join(base, "sys/firmware/efi/efivars/SecureBoot-*")):
        try:
            data = entry.read_bytes()
        except OSError:
            continue
        # The first 4 bytes are attributes; the 5th is the value.
        if len(data) >= 5:
            return data[4] == 1
    return None


def detect_chipset(root: str | os.PathLike[str] = "/") -> str | None:
    """Identify the chipset by the vendor:device ID of the host bridge at 00:00.0."""
    bridge = Path(root) / "sys/bus/pci/devices/0000:00:00.0"
    vid = read_u64_optional(bridge / "vendor")
    if vid is None:
        return None
    did = read_u64_optional(bridge / "device")
    if did is None:
        return None
    return f"{vid & 0xFFFF:04x}:{did & 0xFFFF:04x}"


def collect(root: str | os.PathLike[str] = "/") -> MotherboardInfo:
    """Read board, system and BIOS details (some fields need root)."""
    root = Path(root)
    dmi = root / "sys/class/dmi/id"

    def read(attr: str) -> str | None:
        return read_string_optional(dmi / attr)

    chassis_code = read_u64_optional(dmi / "chassis_type")
    engine = me.collect(root)

    return MotherboardInfo(
        manufacturer=read("board_vendor"),
        product_name=read("board_name"),
        version=read("board_version"),
        serial_number=read("board_serial"),
        system_vendor=read("sys_vendor"),
        system_product=read("product_name"),
        system_family=read("product_family"),
        system_sku=read("product_sku"),
        system_uuid=read("product_uuid"),
        chassis_type=(
            chassis_type_name(chassis_code & 0xFF) if chassis_code is not None else None
        ),
        bios=BiosInfo(
            vendor=read("bios_vendor"),
            version=read("bios_version"),
            date=read("bios_date"),
            release=read("bios_release"),
            uefi_boot=(root / "sys/firmware/efi").exists(),
            secure_boot=detect_secure_boot(root),
        ),
        chipset=detect_chipset(root),
        me_version=engine.firmware_version if engine is not None else None,
    )


@dataclass
class MotherboardCollector(Collector):
    name: ClassVar[str] = "motherboard"
    root: Path = Path("/")

    def collect_into(self, info: SystemInfo) -> None:
        info.motherboard = collect(self.root)