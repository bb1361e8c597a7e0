"""System memory totals from /proc/meminfo and DIMM details from dmidecode."""

from __future__ import annotations

import logging
import math
import os
import re
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar

from siomon.collectors.base import Collector, SystemInfo

log = logging.getLogger(__name__)

_UINT = re.compile(r"\+?[0-9]+")
_FLOAT = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)
_SKIPPED_VALUES = frozenset({"Not Provided", "Unknown", "No Module Installed", "Not Specified"})


@dataclass(frozen=True)
class MemoryType:
    """DRAM generation; unknown types keep the reported name."""

    name: str
    known: bool = True

    DDR3: ClassVar[MemoryType]
    DDR4: ClassVar[MemoryType]
    DDR5: ClassVar[MemoryType]
    LPDDR4: ClassVar[MemoryType]
    LPDDR5: ClassVar[MemoryType]
    LPDDR5X: ClassVar[MemoryType]

    @classmethod
    def unknown(cls, name: str) -> MemoryType:
        return cls(name, False)

    def __str__(self) -> str:
        return self.name


MemoryType.DDR3 = MemoryType("DDR3")
MemoryType.DDR4 = MemoryType("DDR4")
MemoryType.DDR5 = MemoryType("DDR5")
MemoryType.LPDDR4 = MemoryType("LPDDR4")
MemoryType.LPDDR5 = MemoryType("LPDDR5")
MemoryType.LPDDR5X = MemoryType("LPDDR5X")

_MEMORY_TYPES = {
    t.name: t
    for t in (
        MemoryType.DDR3,
        MemoryType.DDR4,
        MemoryType.DDR5,
        MemoryType.LPDDR4,
        MemoryType.LPDDR5,
        MemoryType.LPDDR5X,
    )
}


@dataclass
class DimmInfo:
    locator: str
    bank_locator: str | None
    manufacturer: str | None
    part_number: str | None
    serial_number: str | None
    size_bytes: int
    memory_type: MemoryType
    form_factor: str
    type_detail: str | None
    configured_speed_mts: int | None
    max_speed_mts: int | None
    configured_voltage_mv: int | None
    data_width_bits: int | None
    total_width_bits: int | None
    ecc: bool
    rank: int | None


@dataclass
class MemoryInfo:
    total_bytes: int = 0
    available_bytes: int = 0
    swap_total_bytes: int = 0
    swap_free_bytes: int = 0
    max_capacity_bytes: int | None = None
    total_slots: int | None = None
    populated_slots: int | None = None
    dimms: list[DimmInfo] = field(default_factory=list)


def parse_memory_type(s: str) -> MemoryType:
    """Map a dmidecode memory type string to a MemoryType."""
    return _MEMORY_TYPES.get(s) or MemoryType.unknown(s)


def filter_placeholder(val: str) -> str | None:
    """Drop empty, all-zero and "Not Specified"/"Unknown" placeholder values."""
    v = val.strip()
    if not v or all(c in "0 " for c in v) or v in ("Not Specified", "Unknown"):
        return None
    return v


def parse_meminfo(text: str) -> dict[str, int]:
    """Parse /proc/meminfo into byte counts (kB values are scaled to bytes)."""
    values: dict[str, int] = {}
    for line in text.splitlines():
        key, sep, rest = line.partition(":")
        if not sep:
            continue
        parts = rest.split()
        if not parts or not parts[0].isdigit():
            continue
        value = int(parts[0])
        if len(parts) > 1 and parts[1] == "kB":
            value *= 1024
        values[key.strip()] = value
    return values


def _parse_uint(text: str, bits: int) -> int | None:
    if not _UINT.fullmatch(text):
        return None
    value = int(text)
    return value if value < (1 << bits) else None


def _parse_float(text: str) -> float | None:
    return float(text) if _FLOAT.fullmatch(text) else None


def _volts_to_millivolts(volts: float) -> int:
    # Saturating float-to-unsigned conversion.
    if math.isnan(volts):
        return 0
    millivolts = volts * 1000.0
    if millivolts <= 0:
        return 0
    if math.isinf(millivolts) or millivolts >= 0xFFFFFFFF:
        return 0xFFFFFFFF
    return int(millivolts)


def _first_uint(val: str, bits: int) -> int | None:
    parts = val.split()
    return _parse_uint(parts[0], bits) if parts else None


@dataclass
class _DimmBuilder:
    locator: str | None = None
    bank_locator: str | None = None
    manufacturer: str | None = None
    part_number: str | None = None
    serial_number: str | None = None
    size_bytes: int | None = None
    memory_type: MemoryType | None = None
    form_factor: str | None = None
    type_detail: str | None = None
    configured_speed_mts: int | None = None
    max_speed_mts: int | None = None
    configured_voltage_mv: int | None = None
    data_width_bits: int | None = None
    total_width_bits: int | None = None
    rank: int | None = None

    def apply(self, key: str, val: str) -> None:
        match key:
            case "Locator":
                self.locator = val
            case "Bank Locator":
                self.bank_locator = val
            case "Manufacturer":
                self.manufacturer = filter_placeholder(val)
            case "Part Number":
                self.part_number = filter_placeholder(val)
            case "Serial Number":
                self.serial_number = filter_placeholder(val)
            case "Size":
                if val.endswith(" MB"):
                    mb = _parse_uint(val[:-3].strip(), 64)
                    self.size_bytes = mb * 1024 * 1024 if mb is not None else None
                elif val.endswith(" GB"):
                    gb = _parse_uint(val[:-3].strip(), 64)
                    self.size_bytes = gb * 1024 * 1024 * 1024 if gb is not None else None
            case "Type":
                self.memory_type = parse_memory_type(val)
            case "Form Factor":
                self.form_factor = val
            case "Type Detail":
                self.type_detail = val
            case "Speed":
                self.max_speed_mts = _first_uint(val, 32)
            case "Configured Memory Speed" | "Configured Clock Speed":
                self.configured_speed_mts = _first_uint(val, 32)
            case "Configured Voltage":
                if val.endswith(" V"):
                    volts = _parse_float(val[:-2].strip())
                    self.configured_voltage_mv = (
                        _volts_to_millivolts(volts) if volts is not None else None
                    )
            case "Data Width":
                self.data_width_bits = (
                    _parse_uint(val[:-5].strip(), 16) if val.endswith(" bits") else None
                )
            case "Total Width":
                self.total_width_bits = (
                    _parse_uint(val[:-5].strip(), 16) if val.endswith(" bits") else None
                )
            case "Rank":
                self.rank = _parse_uint(val, 8)

    def build(self) -> DimmInfo | None:
        if not self.size_bytes:
            return None
        ecc = (
            self.total_width_bits is not None
            and self.data_width_bits is not None
            and self.total_width_bits > self.data_width_bits
        )
        return DimmInfo(
            locator=self.locator or "",
            bank_locator=self.bank_locator,
            manufacturer=self.manufacturer,
            part_number=self.part_number,
            serial_number=self.serial_number,
            size_bytes=self.size_bytes,
            memory_type=self.memory_type or MemoryType.unknown("Unknown"),
            form_factor=self.form_factor or "Unknown",
            type_detail=self.type_detail,
            configured_speed_mts=self.configured_speed_mts,
            max_speed_mts=self.max_speed_mts,
            configured_voltage_mv=self.configured_voltage_mv,
            data_width_bits=self.data_width_bits,
            total_width_bits=self.total_width_bits,
            ecc=ecc,
            rank=self.rank,
        )


def parse_dmi_type17(text: str) -> list[DimmInfo]:
    """Parse `dmidecode -t 17` output into populated DIMMs."""
    builders: list[_DimmBuilder] = []
    for line in text.splitlines():
        trimmed = line.strip()
        if trimmed.startswith("Memory Device"):
            builders.append(_DimmBuilder())
        if not builders:
            continue
        key, sep, val = trimmed.partition(":")
        if not sep:
            continue
        val = val.strip()
        if val in _SKIPPED_VALUES:
            continue
        builders[-1].apply(key.strip(), val)
    return [dimm for dimm in (b.build() for b in builders) if dimm is not None]


def _collect_dimms_dmidecode() -> list[DimmInfo]:
    try:
        result = subprocess.run(
            ["dmidecode", "-t", "17"], capture_output=True, check=False
        )
    except OSError as exc:
        log.debug("dmidecode unavailable: %s", exc)
        return []
    if result.returncode != 0:
        return []
    return parse_dmi_type17(result.stdout.decode("utf-8", errors="replace"))


def collect(root: str | os.PathLike[str] = "/") -> MemoryInfo:
    """Collect memory totals, and DIMM details when inspecting the live system."""
    root = Path(root)
    try:
        meminfo = parse_meminfo(
            (root / "proc/meminfo").read_text(encoding="utf-8", errors="replace")
        )
    except OSError:
        meminfo = {}

    # dmidecode reads the running machine, so it only applies to the real root.
    dimms = _collect_dimms_dmidecode() if root.resolve() == Path("/") else []

    return MemoryInfo(
        total_bytes=meminfo.get("MemTotal", 0),
        available_bytes=meminfo.get("MemAvailable", 0),
        swap_total_bytes=meminfo.get("SwapTotal", 0),
        swap_free_bytes=meminfo.get("SwapFree", 0),
        populated_slots=len(dimms) or None,
        dimms=dimms,
    )


@dataclass
class MemoryCollector(Collector):
    name: ClassVar[str] = "memory"
    root: Path = Path("/")

    def collect_into(self, info: SystemInfo) -> None:
        info.memory = collect(self.root)