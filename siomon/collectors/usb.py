"""USB devices from /sys/bus/usb/devices."""

from __future__ import annotations

import glob
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar

from siomon.collectors.base import (
    Collector,
    SystemInfo,
    glob_paths,
    read_string_optional,
    read_u64_optional,
)

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]+")


@dataclass(frozen=True)
class UsbSpeed:
    """Negotiated USB speed; unknown speeds keep the reported string."""

    name: str
    known: bool = True

    LOW: ClassVar[UsbSpeed]
    FULL: ClassVar[UsbSpeed]
    HIGH: ClassVar[UsbSpeed]
    SUPER: ClassVar[UsbSpeed]
    SUPER_PLUS: ClassVar[UsbSpeed]
    SUPER_PLUS_2X2: ClassVar[UsbSpeed]

    @classmethod
    def unknown(cls, name: str) -> UsbSpeed:
        return cls(name, False)

    def __str__(self) -> str:
        return self.name


UsbSpeed.LOW = UsbSpeed("Low")
UsbSpeed.FULL = UsbSpeed("Full")
UsbSpeed.HIGH = UsbSpeed("High")
UsbSpeed.SUPER = UsbSpeed("Super")
UsbSpeed.SUPER_PLUS = UsbSpeed("SuperPlus")
UsbSpeed.SUPER_PLUS_2X2 = UsbSpeed("SuperPlus2x2")

_SPEEDS = {
    "1.5": UsbSpeed.LOW,
    "12": UsbSpeed.FULL,
    "480": UsbSpeed.HIGH,
    "5000": UsbSpeed.SUPER,
    "10000": UsbSpeed.SUPER_PLUS,
    "20000": UsbSpeed.SUPER_PLUS_2X2,
}


@dataclass
class UsbDevice:
    bus: int
    port_path: str
    devnum: int
    vendor_id: int
    product_id: int
    manufacturer: str | None
    product: str | None
    serial_number: str | None
    usb_version: str | None
    device_class: int
    speed: UsbSpeed
    max_power_ma: int | None
    sysfs_id: str


def classify_speed(speed: str) -> UsbSpeed:
    """Map the sysfs speed value (in Mbit/s) to a USB speed."""
    return _SPEEDS.get(speed) or UsbSpeed.unknown(speed)


def parse_max_power(s: str) -> int | None:
    """Parse a bMaxPower value such as "500mA"."""
    if not s.endswith("mA"):
        return None
    value = s[:-2].strip()
    if not (value.isascii() and value.isdigit()):
        return None
    return int(value)


def _parse_hex(text: str | None, bits: int) -> int | None:
    if text is None or not _HEX_DIGITS.fullmatch(text):
        return None
    value = int(text, 16)
    return value if value < (1 << bits) else None


def collect(root: str | os.PathLike[str] = "/") -> list[UsbDevice]:
    """List USB devices (not interfaces), ordered by bus and port path."""
    base = glob.escape(os.fspath(root))
    devices = []
    for entry in glob_paths(os.path.join(base, "sys/bus/usb/devices/*")):
        if ":" in entry.name:
            continue
        device = _collect_device(entry.name, entry)
        if device is not None:
            devices.append(device)
    devices.sort(key=lambda d: (d.bus, d.port_path))
    return devices


def _collect_device(name: str, path: Path) -> UsbDevice | None:
    vendor_id = _parse_hex(read_string_optional(path / "idVendor"), 16)
    product_id = _parse_hex(read_string_optional(path / "idProduct"), 16)
    bus = read_u64_optional(path / "busnum")
    devnum = read_u64_optional(path / "devnum")
    if vendor_id is None or product_id is None or bus is None or devnum is None:
        return None

    device_class = _parse_hex(read_string_optional(path / "bDeviceClass"), 8)
    speed = read_string_optional(path / "speed")
    max_power = read_string_optional(path / "bMaxPower")

    return UsbDevice(
        bus=bus & 0xFF,
        port_path=read_string_optional(path / "devpath") or "0",
        devnum=devnum & 0xFFFF,
        vendor_id=vendor_id,
        product_id=product_id,
        manufacturer=read_string_optional(path / "manufacturer"),
        product=read_string_optional(path / "product"),
        serial_number=read_string_optional(path / "serial"),
        usb_version=read_string_optional(path / "version"),
        device_class=device_class if device_class is not None else 0,
        speed=classify_speed(speed) if speed is not None else UsbSpeed.unknown("unknown"),
        max_power_ma=parse_max_power(max_power) if max_power is not None else None,
        sysfs_id=name,
    )


@dataclass
class UsbCollector(Collector):
    name: ClassVar[str] = "usb"
    root: Path = Path("/")

    def collect_into(self, info: SystemInfo) -> None:
        info.usb_devices = collect(self.root)