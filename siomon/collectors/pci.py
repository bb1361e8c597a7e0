"""PCI devices from /sys/bus/pci/devices."""

from __future__ import annotations

import glob
import os
import re
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import ClassVar

from siomon.collectors.base import (
    Collector,
    SystemInfo,
    glob_paths,
    read_link_basename,
    read_string_optional,
    read_u32_optional,
    read_u64_optional,
)

_HEX = re.compile(r"\+?[0-9a-fA-F]+")
_UINT = re.compile(r"\+?[0-9]+")
_INT = re.compile(r"[+-]?[0-9]+")

_PCI_IDS_LOCATIONS = (
    "usr/share/hwdata/pci.ids",
    "usr/share/misc/pci.ids",
    "usr/share/pci.ids",
)


@dataclass
class PcieLinkInfo:
    current_gen: int | None = None
    current_width: int | None = None
    max_gen: int | None = None
    max_width: int | None = None
    current_speed: str | None = None
    max_speed: str | None = None


@dataclass
class AerCounters:
    """Advanced Error Reporting totals."""

    correctable: int = 0
    nonfatal: int = 0
    fatal: int = 0


@dataclass
class PciDevice:
    address: str
    domain: int
    bus: int
    device: int
    function: int
    vendor_id: int
    device_id: int
    subsystem_vendor_id: int | None
    subsystem_device_id: int | None
    revision: int
    class_code: int
    vendor_name: str | None
    device_name: str | None
    class_name: str | None
    subclass_name: str | None
    driver: str | None
    irq: int | None
    numa_node: int | None
    pcie_link: PcieLinkInfo | None
    enabled: bool
    aer: AerCounters | None


@dataclass(frozen=True)
class _PciIds:
    vendors: dict[int, str] = field(default_factory=dict)
    devices: dict[tuple[int, int], str] = field(default_factory=dict)
    classes: dict[int, str] = field(default_factory=dict)
    subclasses: dict[tuple[int, int], str] = field(default_factory=dict)


def _split_entry(text: str) -> tuple[int, str] | None:
    code, _, name = text.partition(" ")
    try:
        return int(code, 16), name.strip()
    except ValueError:
        return None


@lru_cache(maxsize=8)
def _load_pci_ids(path: str) -> _PciIds:
    ids = _PciIds()
    try:
        text = Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError:
        return ids
    vendor: int | None = None
    cls: int | None = None
    for line in text.splitlines():
        if not line.strip() or line.startswith("#") or line.startswith("\t\t"):
            continue
        if line.startswith("C "):
            entry = _split_entry(line[2:])
            vendor, cls = None, entry[0] if entry else None
            if entry:
                ids.classes[entry[0]] = entry[1]
        elif line.startswith("\t"):
            entry = _split_entry(line[1:])
            if entry is None:
                continue
            if cls is not None:
                ids.subclasses[(cls, entry[0])] = entry[1]
            elif vendor is not None:
                ids.devices[(vendor, entry[0])] = entry[1]
        else:
            entry = _split_entry(line)
            vendor, cls = (entry[0] if entry else None), None
            if entry:
                ids.vendors[entry[0]] = entry[1]
    return ids


def _pci_ids(root: Path) -> _PciIds:
    for location in _PCI_IDS_LOCATIONS:
        candidate = root / location
        if candidate.is_file():
            return _load_pci_ids(str(candidate))
    return _PciIds()


def _parse_hex(text: str, bits: int) -> int | None:
    if not _HEX.fullmatch(text):
        return None
    value = int(text, 16)
    return value if value < (1 << bits) else None


def parse_bdf(address: str) -> tuple[int, int, int, int] | None:
    """Split "0000:00:1f.3" into (domain, bus, device, function)."""
    parts = address.split(":")
    if len(parts) != 3:
        return None
    df = parts[2].split(".")
    if len(df) != 2:
        return None
    values = (
        _parse_hex(parts[0], 16),
        _parse_hex(parts[1], 8),
        _parse_hex(df[0], 8),
        _parse_hex(df[1], 8),
    )
    if any(v is None for v in values):
        return None
    return values  # type: ignore[return-value]


def pcie_speed_to_gen(speed: str) -> int:
    """Map a link speed such as "16.0 GT/s PCIe" to its PCIe generation (0 if unknown)."""
    for marker, gen in (("64", 6), ("32", 5), ("16", 4), ("8", 3), ("5", 2), ("2.5", 1)):
        if marker in speed:
            return gen
    return 0


def parse_aer_total(path: str | os.PathLike[str]) -> int | None:
    """Read the TOTAL_ counter from an aer_dev_* file."""
    try:
        content = Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None
    for line in content.splitlines():
        if line.startswith("TOTAL_"):
            tokens = line.split()
            last = tokens[-1]
            if not _UINT.fullmatch(last):
                return None
            value = int(last)
            return value if value < (1 << 64) else None
    return None


def _parse_u8(text: str | None) -> int | None:
    if text is None or not _UINT.fullmatch(text):
        return None
    value = int(text)
    return value if value < 256 else None


def _parse_i32(text: str | None) -> int | None:
    if text is None or not _INT.fullmatch(text):
        return None
    value = int(text)
    return value if -(1 << 31) <= value < (1 << 31) else None


def _collect_pcie_link(path: Path) -> PcieLinkInfo | None:
    current_speed = read_string_optional(path / "current_link_speed")
    max_speed = read_string_optional(path / "max_link_speed")
    if current_speed is None and max_speed is None:
        return None
    return PcieLinkInfo(
        current_gen=pcie_speed_to_gen(current_speed) if current_speed is not None else None,
        current_width=_parse_u8(read_string_optional(path / "current_link_width")),
        max_gen=pcie_speed_to_gen(max_speed) if max_speed is not None else None,
        max_width=_parse_u8(read_string_optional(path / "max_link_width")),
        current_speed=current_speed,
        max_speed=max_speed,
    )


def _collect_aer(path: Path) -> AerCounters | None:
    correctable = parse_aer_total(path / "aer_dev_correctable")
    nonfatal = parse_aer_total(path / "aer_dev_nonfatal")
    fatal = parse_aer_total(path / "aer_dev_fatal")
    if correctable is None and nonfatal is None and fatal is None:
        return None
    return AerCounters(
        correctable=correctable or 0,
        nonfatal=nonfatal or 0,
        fatal=fatal or 0,
    )


def _collect_device(path: Path, ids: _PciIds) -> PciDevice | None:
    address = path.name
    bdf = parse_bdf(address)
    if bdf is None:
        return None
    domain, bus, device, function = bdf

    vendor_id = read_u64_optional(path / "vendor")
    device_id = read_u64_optional(path / "device")
    if vendor_id is None or device_id is None:
        return None
    vendor_id &= 0xFFFF
    device_id &= 0xFFFF

    subsystem_vendor = read_u64_optional(path / "subsystem_vendor")
    subsystem_device = read_u64_optional(path / "subsystem_device")
    class_code = (read_u64_optional(path / "class") or 0) & 0xFFFFFFFF
    revision = (read_u64_optional(path / "revision") or 0) & 0xFF
    enable = read_u64_optional(path / "enable")

    class_id = (class_code >> 16) & 0xFF
    subclass_id = (class_code >> 8) & 0xFF

    return PciDevice(
        address=address,
        domain=domain,
        bus=bus,
        device=device,
        function=function,
        vendor_id=vendor_id,
        device_id=device_id,
        subsystem_vendor_id=subsystem_vendor & 0xFFFF if subsystem_vendor is not None else None,
        subsystem_device_id=subsystem_device & 0xFFFF if subsystem_device is not None else None,
        revision=revision,
        class_code=class_code,
        vendor_name=ids.vendors.get(vendor_id),
        device_name=ids.devices.get((vendor_id, device_id)),
        class_name=ids.classes.get(class_id),
        subclass_name=ids.subclasses.get((class_id, subclass_id)),
        driver=read_link_basename(path / "driver"),
        irq=read_u32_optional(path / "irq"),
        numa_node=_parse_i32(read_string_optional(path / "numa_node")),
        pcie_link=_collect_pcie_link(path),
        enabled=enable == 1 if enable is not None else True,
        aer=_collect_aer(path),
    )


def collect(root: str | os.PathLike[str] = "/") -> list[PciDevice]:
    """List PCI devices ordered by address."""
    root = Path(root)
    ids = _pci_ids(root)
    base = glob.escape(os.fspath(root))
    devices = [
        device
        for entry in glob_paths(os.path.join(base, "sys/bus/pci/devices/*"))
        if (device := _collect_device(entry, ids)) is not None
    ]
    devices.sort(key=lambda d: d.address)
    return devices


@dataclass
class PciCollector(Collector):
    name: ClassVar[str] = "pci"
    root: Path = Path("/")

    def collect_into(self, info: SystemInfo) -> None:
        info.pci_devices = collect(self.root)