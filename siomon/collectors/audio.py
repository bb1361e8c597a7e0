"""Audio devices from ALSA's /proc/asound."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import ClassVar

from siomon.collectors.base import Collector, SystemInfo


class AudioBusType(Enum):
    HD_AUDIO = "HD Audio"
    USB = "USB"
    AC97 = "AC97"
    VIRTUAL = "Virtual"
    UNKNOWN = "Unknown"


@dataclass
class AudioDevice:
    card_index: int
    card_id: str
    card_long_name: str
    driver: str
    bus_type: AudioBusType
    codec: str | None = None
    pci_bus_address: str | None = None


_DRIVER_BUS = {
    "HDA-Intel": AudioBusType.HD_AUDIO,
    "USB-Audio": AudioBusType.USB,
    "AC97": AudioBusType.AC97,
    "Dummy": AudioBusType.VIRTUAL,
    "Loopback": AudioBusType.VIRTUAL,
}


def classify_bus_type(driver: str) -> AudioBusType:
    """Map an ALSA driver name to its bus type."""
    return _DRIVER_BUS.get(driver, AudioBusType.UNKNOWN)


def collect(root: str | os.PathLike[str] = "/") -> list[AudioDevice]:
    """List sound cards from /proc/asound/cards, ordered by card index."""
    root = Path(root)
    try:
        content = (root / "proc/asound/cards").read_text(encoding="utf-8", errors="replace")
    except OSError:
        return []
    # Two lines per card: a header line and a detail line.
    headers = content.splitlines()[::2]
    devices = [d for d in (parse_card(h, root) for h in headers) if d is not None]
    devices.sort(key=lambda d: d.card_index)
    return devices


def parse_card(header: str, root: str | os.PathLike[str] = "/") -> AudioDevice | None:
    """Parse a header like " 0 [NVidia  ]: HDA-Intel - HDA NVidia"."""
    root = Path(root)
    index_text, sep, rest = header.strip().partition("[")
    if not sep:
        return None
    index_text = index_text.strip()
    if not (index_text.isascii() and index_text.isdigit()):
        return None
    card_index = int(index_text)

    card_id_raw, sep, rest = rest.partition("]")
    if not sep or not rest.startswith(": "):
        return None
    rest = rest[2:].strip()

    driver, sep, long_name = rest.partition(" - ")
    if sep:
        driver, long_name = driver.strip(), long_name.strip()
    else:
        driver, long_name = rest, ""

    return AudioDevice(
        card_index=card_index,
        card_id=card_id_raw.strip(),
        card_long_name=long_name,
        driver=driver,
        bus_type=classify_bus_type(driver),
        codec=_read_codec(root, card_index),
        pci_bus_address=_read_pci_address(root, card_index),
    )


def _read_codec(root: Path, card_index: int) -> str | None:
    try:
        content = (root / f"proc/asound/card{card_index}/codec#0").read_text(
            encoding="utf-8", errors="replace"
        )
    except OSError:
        return None
    for line in content.splitlines():
        if line.startswith("Codec:"):
            codec = line[len("Codec:"):].strip()
            if codec:
                return codec
    return None


def _read_pci_address(root: Path, card_index: int) -> str | None:
    try:
        resolved = (root / f"sys/class/sound/card{card_index}/device").resolve(strict=True)
    except OSError:
        return None
    return resolved.name or None


@dataclass
class AudioCollector(Collector):
    name: ClassVar[str] = "audio"
    root: Path = Path("/")

    def collect_into(self, info: SystemInfo) -> None:
        info.audio = collect(self.root)