"""Network adapters from /sys/class/net, with addresses from the live system."""

from __future__ import annotations

import glob
import ipaddress
import os
import re
import socket
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar

import psutil

from siomon.collectors.base import (
    Collector,
    SystemInfo,
    glob_paths,
    read_link_basename,
    read_string_optional,
    read_u32_optional,
    read_u64_optional,
)

_INT = re.compile(r"[+-]?[0-9]+")
_ZERO_MAC = "00:00:00:00:00:00"

_ARPHRD_ETHER = 1
_ARPHRD_LOOPBACK = 772
_ARPHRD_NONE = 65534


@dataclass(frozen=True)
class NetworkInterfaceType:
    """Kind of network interface; unknown kinds keep the ARPHRD type code."""

    name: str
    code: int | None = None

    ETHERNET: ClassVar[NetworkInterfaceType]
    WIFI: ClassVar[NetworkInterfaceType]
    LOOPBACK: ClassVar[NetworkInterfaceType]
    BRIDGE: ClassVar[NetworkInterfaceType]
    BOND: ClassVar[NetworkInterfaceType]
    VLAN: ClassVar[NetworkInterfaceType]
    VIRTUAL: ClassVar[NetworkInterfaceType]
    TUN: ClassVar[NetworkInterfaceType]

    @classmethod
    def unknown(cls, code: int) -> NetworkInterfaceType:
        return cls("Unknown", code)

    def __str__(self) -> str:
        return self.name if self.code is None else f"{self.name}({self.code})"


NetworkInterfaceType.ETHERNET = NetworkInterfaceType("Ethernet")
NetworkInterfaceType.WIFI = NetworkInterfaceType("WiFi")
NetworkInterfaceType.LOOPBACK = NetworkInterfaceType("Loopback")
NetworkInterfaceType.BRIDGE = NetworkInterfaceType("Bridge")
NetworkInterfaceType.BOND = NetworkInterfaceType("Bond")
NetworkInterfaceType.VLAN = NetworkInterfaceType("VLAN")
NetworkInterfaceType.VIRTUAL = NetworkInterfaceType("Virtual")
NetworkInterfaceType.TUN = NetworkInterfaceType("TUN")


@dataclass
class IpAddress:
    address: str
    prefix_len: int
    family: str
    scope: str | None = None


@dataclass
class NetworkAdapter:
    name: str
    driver: str | None
    mac_address: str | None
    permanent_mac: str | None
    speed_mbps: int | None
    operstate: str
    duplex: str | None
    mtu: int
    interface_type: NetworkInterfaceType
    is_physical: bool
    pci_bus_address: str | None
    pci_vendor_id: int | None
    pci_device_id: int | None
    ip_addresses: list[IpAddress] = field(default_factory=list)
    numa_node: int | None = None


def _parse_i32(text: str | None) -> int | None:
    if text is None or not _INT.fullmatch(text):
        return None
    value = int(text)
    return value if -(1 << 31) <= value < (1 << 31) else None


def classify_interface(name: str, type_code: int, is_physical: bool) -> NetworkInterfaceType:
    """Classify an interface by its ARPHRD type code and naming convention."""
    if type_code == _ARPHRD_LOOPBACK or name == "lo":
        return NetworkInterfaceType.LOOPBACK
    if type_code == _ARPHRD_ETHER:
        if name.startswith("wl"):
            return NetworkInterfaceType.WIFI
        if name.startswith(("br", "virbr")):
            return NetworkInterfaceType.BRIDGE
        if name.startswith("bond"):
            return NetworkInterfaceType.BOND
        if "." in name:
            return NetworkInterfaceType.VLAN
        if name.startswith(("veth", "docker", "cni")):
            return NetworkInterfaceType.VIRTUAL
        return NetworkInterfaceType.ETHERNET if is_physical else NetworkInterfaceType.VIRTUAL
    if type_code == _ARPHRD_NONE:
        return NetworkInterfaceType.TUN
    return NetworkInterfaceType.unknown(type_code)


def _prefix_len(netmask: str | None, version: int) -> int:
    if not netmask:
        return 0
    try:
        mask = ipaddress.ip_address(netmask.split("%")[0])
    except ValueError:
        return 0
    if mask.version != version:
        return 0
    return int(mask).bit_count()


def collect_ip_addresses(name: str) -> list[IpAddress]:
    """IPv4 and IPv6 addresses assigned to an interface on this machine."""
    addresses = []
    for entry in psutil.net_if_addrs().get(name, []):
        if entry.family == socket.AF_INET:
            addresses.append(
                IpAddress(
                    address=entry.address,
                    prefix_len=_prefix_len(entry.netmask, 4),
                    family="inet",
                )
            )
        elif entry.family == socket.AF_INET6:
            address, sep, _zone = entry.address.partition("%")
            addresses.append(
                IpAddress(
                    address=address,
                    prefix_len=_prefix_len(entry.netmask, 6),
                    family="inet6",
                    scope="link" if sep else "global",
                )
            )
    return addresses


def _collect_adapter(name: str, path: Path, is_physical: bool, live: bool) -> NetworkAdapter:
    device = path / "device"

    mac = read_string_optional(path / "address")
    permanent = read_string_optional(device / "net_address")
    speed = _parse_i32(read_string_optional(path / "speed"))
    type_code = (read_u64_optional(path / "type") or 0) & 0xFFFFFFFF
    vendor = read_u64_optional(device / "vendor")
    device_id = read_u64_optional(device / "device")
    mtu = read_u32_optional(path / "mtu")

    try:
        pci_bus_address = device.resolve(strict=True).name or None
    except (OSError, RuntimeError):
        pci_bus_address = None

    return NetworkAdapter(
        name=name,
        driver=read_link_basename(device / "driver"),
        mac_address=mac if mac != _ZERO_MAC else None,
        permanent_mac=permanent if permanent != _ZERO_MAC else None,
        speed_mbps=speed if speed is not None and speed > 0 else None,
        operstate=read_string_optional(path / "operstate") or "unknown",
        duplex=read_string_optional(path / "duplex"),
        mtu=mtu if mtu is not None else 1500,
        interface_type=classify_interface(name, type_code, is_physical),
        is_physical=is_physical,
        pci_bus_address=pci_bus_address,
        pci_vendor_id=vendor & 0xFFFF if vendor is not None else None,
        pci_device_id=device_id & 0xFFFF if device_id is not None else None,
        ip_addresses=collect_ip_addresses(name) if live else [],
        numa_node=_parse_i32(read_string_optional(device / "numa_node")),
    )


def collect(physical_only: bool = True, root: str | os.PathLike[str] = "/") -> list[NetworkAdapter]:
    """List network adapters ordered by name.

    Addresses are only read when inspecting the live root filesystem.
    """
    root = Path(root)
    live = root.resolve() == Path("/")
    pattern = os.path.join(glob.escape(os.fspath(root)), "sys/class/net/*")
    adapters = []
    for entry in glob_paths(pattern):
        is_physical = (entry / "device").exists()
        if physical_only and not is_physical:
            continue
        adapters.append(_collect_adapter(entry.name, entry, is_physical, live))
    adapters.sort(key=lambda a: a.name)
    return adapters


@dataclass
class NetworkCollector(Collector):
    name: ClassVar[str] = "network"
    physical_only: bool = True
    root: Path = Path("/")

    def collect_into(self, info: SystemInfo) -> None:
        info.network = collect(self.physical_only, self.root)