"""Intel Management Engine firmware version from the MEI sysfs class."""

from __future__ import annotations

import glob
import os
from dataclasses import dataclass
from pathlib import Path

from siomon.collectors.base import glob_paths, read_string_optional


@dataclass
class ManagementEngine:
    firmware_version: str | None
    device_path: str


def collect(root: str | os.PathLike[str] = "/") -> ManagementEngine | None:
    """Return the first MEI device that reports a firmware version."""
    base = glob.escape(os.fspath(root))
    for path in glob_paths(os.path.join(base, "sys/class/mei/mei*")):
        version = read_string_optional(path / "fw_ver")
        if version is not None:
            return ManagementEngine(firmware_version=version, device_path=str(path))

    fallback = Path(root) / "sys/class/mei/mei0"
    version = read_string_optional(fallback / "fw_ver")
    if version is not None:
        return ManagementEngine(firmware_version=version, device_path=str(fallback))
    return None