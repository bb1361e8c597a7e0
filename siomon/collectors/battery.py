"""Batteries from /sys/class/power_supply."""

from __future__ import annotations

import glob
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import ClassVar

from siomon.collectors.base import (
    Collector,
    SystemInfo,
    glob_paths,
    read_string_optional,
    read_u32_optional,
    read_u64_optional,
)


@dataclass(frozen=True)
class BatteryChemistry:
    """Battery technology; unknown technologies keep their reported name."""

    name: str
    known: bool = True

    LITHIUM_ION: ClassVar[BatteryChemistry]
    LITHIUM_POLYMER: ClassVar[BatteryChemistry]
    NICKEL_METAL_HYDRIDE: ClassVar[BatteryChemistry]
    NICKEL_CADMIUM: ClassVar[BatteryChemistry]

    @classmethod
    def unknown(cls, name: str) -> BatteryChemistry:
        return cls(name, False)

    def __str__(self) -> str:
        return self.name


BatteryChemistry.LITHIUM_ION = BatteryChemistry("Li-ion")
BatteryChemistry.LITHIUM_POLYMER = BatteryChemistry("Li-poly")
BatteryChemistry.NICKEL_METAL_HYDRIDE = BatteryChemistry("NiMH")
BatteryChemistry.NICKEL_CADMIUM = BatteryChemistry("NiCd")

_CHEMISTRIES = {
    c.name: c
    for c in (
        BatteryChemistry.LITHIUM_ION,
        BatteryChemistry.LITHIUM_POLYMER,
        BatteryChemistry.NICKEL_METAL_HYDRIDE,
        BatteryChemistry.NICKEL_CADMIUM,
    )
}


class BatteryStatus(Enum):
    CHARGING = "Charging"
    DISCHARGING = "Discharging"
    FULL = "Full"
    NOT_CHARGING = "Not charging"
    UNKNOWN = "Unknown"


@dataclass
class BatteryInfo:
    name: str
    manufacturer: str | None
    model_name: str | None
    chemistry: BatteryChemistry
    status: BatteryStatus
    design_capacity_uwh: int | None
    full_charge_capacity_uwh: int | None
    remaining_capacity_uwh: int | None
    voltage_now_uv: int | None
    power_now_uw: int | None
    capacity_percent: int | None
    cycle_count: int | None
    wear_percent: float | None


def classify_chemistry(technology: str) -> BatteryChemistry:
    """Map the sysfs technology string to a chemistry."""
    return _CHEMISTRIES.get(technology) or BatteryChemistry.unknown(technology)


def classify_status(status: str) -> BatteryStatus:
    """Map the sysfs status string to a battery status."""
    try:
        return BatteryStatus(status)
    except ValueError:
        return BatteryStatus.UNKNOWN


def collect(root: str | os.PathLike[str] = "/") -> list[BatteryInfo]:
    """List Battery-type power supplies, ordered by name."""
    base = glob.escape(os.fspath(root))
    batteries = [
        collect_battery(entry.name, entry)
        for entry in glob_paths(os.path.join(base, "sys/class/power_supply/*"))
        if read_string_optional(entry / "type") == "Battery"
    ]
    batteries.sort(key=lambda b: b.name)
    return batteries


def collect_battery(name: str, path: str | os.PathLike[str]) -> BatteryInfo:
    """Read one battery's attributes from its sysfs directory."""
    path = Path(path)
    technology = read_string_optional(path / "technology")
    status = read_string_optional(path / "status")
    design = read_u64_optional(path / "energy_full_design")
    full = read_u64_optional(path / "energy_full")
    power = read_u64_optional(path / "power_now")
    if power is None:
        power = _power_from_current(path)
    capacity = read_u64_optional(path / "capacity")

    wear = None
    if full is not None and design:
        wear = 1.0 - full / design

    return BatteryInfo(
        name=name,
        manufacturer=read_string_optional(path / "manufacturer"),
        model_name=read_string_optional(path / "model_name"),
        chemistry=(
            classify_chemistry(technology)
            if technology is not None
            else BatteryChemistry.unknown("unknown")
        ),
        status=classify_status(status) if status is not None else BatteryStatus.UNKNOWN,
        design_capacity_uwh=design,
        full_charge_capacity_uwh=full,
        remaining_capacity_uwh=read_u64_optional(path / "energy_now"),
        voltage_now_uv=read_u64_optional(path / "voltage_now"),
        power_now_uw=power,
        capacity_percent=capacity & 0xFF if capacity is not None else None,
        cycle_count=read_u32_optional(path / "cycle_count"),
        wear_percent=wear,
    )


def _power_from_current(path: Path) -> int | None:
    current_ua = read_u64_optional(path / "current_now")
    voltage_uv = read_u64_optional(path / "voltage_now")
    if current_ua is None or voltage_uv is None:
        return None
    # uA * uV = pW; divide down to uW.
    return current_ua * voltage_uv // 1_000_000


@dataclass
class BatteryCollector(Collector):
    name: ClassVar[str] = "battery"
    root: Path = Path("/")

    def collect_into(self, info: SystemInfo) -> None:
        info.batteries = collect(self.root)