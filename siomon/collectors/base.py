"""Collector interface, the system snapshot and sysfs reading helpers."""

from __future__ import annotations

import glob
import os
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

_DECIMAL = re.compile(r"[0-9]+")
_HEX = re.compile(r"0[xX]([0-9a-fA-F]+)")

_U64_MAX = (1 << 64) - 1
_U32_MAX = (1 << 32) - 1


@dataclass
class SystemInfo:
    """Everything collected about the machine."""

    cpus: list[Any] = field(default_factory=list)
    gpus: list[Any] = field(default_factory=list)
    memory: Any = None
    storage: list[Any] = field(default_factory=list)
    network: list[Any] = field(default_factory=list)
    pci_devices: list[Any] = field(default_factory=list)
    usb_devices: list[Any] = field(default_factory=list)
    audio: list[Any] = field(default_factory=list)
    batteries: list[Any] = field(default_factory=list)
    motherboard: Any = None


class Collector(ABC):
    """One-shot collector for one hardware subsystem."""

    name: str = ""

    @abstractmethod
    def collect_into(self, info: SystemInfo) -> None:
        """Collect information and store it in the matching field of info."""


def read_string_optional(path: str | os.PathLike[str]) -> str | None:
    """Read a sysfs attribute, stripped; None if unreadable or empty."""
    try:
        text = Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None
    text = text.strip()
    return text or None


def _parse_uint(text: str) -> int | None:
    if match := _HEX.fullmatch(text):
        return int(match.group(1), 16)
    if _DECIMAL.fullmatch(text):
        return int(text)
    return None


def _read_uint(path: str | os.PathLike[str], limit: int) -> int | None:
    text = read_string_optional(path)
    if text is None:
        return None
    value = _parse_uint(text)
    if value is None or value > limit:
        return None
    return value


def read_u64_optional(path: str | os.PathLike[str]) -> int | None:
    """Read an unsigned 64-bit decimal or 0x-prefixed hex attribute."""
    return _read_uint(path, _U64_MAX)


def read_u32_optional(path: str | os.PathLike[str]) -> int | None:
    """Read an unsigned 32-bit decimal or 0x-prefixed hex attribute."""
    return _read_uint(path, _U32_MAX)


def read_link_basename(path: str | os.PathLike[str]) -> str | None:
    """Return the last component of a symlink's target, or None."""
    try:
        target = os.readlink(path)
    except OSError:
        return None
    name = Path(target).name
    return name or None


def glob_paths(pattern: str | os.PathLike[str]) -> list[Path]:
    """Return the paths matching a glob pattern, sorted."""
    return sorted(Path(p) for p in glob.glob(os.fspath(pattern)))