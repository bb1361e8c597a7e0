"""CPU identification helpers: /proc/cpuinfo parsing and ARM core detection."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from siomon.collectors.base import read_u64_optional
from siomon.db.cpu_codenames import CpuVendor, lookup_arm

_DECIMAL = re.compile(r"\+?[0-9]+")
_HEX = re.compile(r"\+?[0-9a-fA-F]+")
_U32_LIMIT = 1 << 32
_U8_LIMIT = 1 << 8

_MIDR_PATH = "sys/devices/system/cpu/cpu0/regs/identification/midr_el1"


@dataclass
class CpuFeatures:
    """Instruction set extensions supported by the CPU."""

    sse: bool = False
    sse2: bool = False
    sse3: bool = False
    ssse3: bool = False
    sse4_1: bool = False
    sse4_2: bool = False
    sse4a: bool = False
    avx: bool = False
    avx2: bool = False
    avx512f: bool = False
    avx512dq: bool = False
    avx512bw: bool = False
    avx512vl: bool = False
    avx512cd: bool = False
    avx512ifma: bool = False
    avx512vbmi: bool = False
    avx512vnni: bool = False
    avx512bf16: bool = False
    avx_vnni: bool = False
    fma: bool = False
    bmi1: bool = False
    bmi2: bool = False
    adx: bool = False
    aes_ni: bool = False
    pclmulqdq: bool = False
    popcnt: bool = False
    lzcnt: bool = False
    f16c: bool = False
    sha: bool = False
    rdrand: bool = False
    rdseed: bool = False
    vaes: bool = False
    vmx: bool = False
    svm: bool = False
    hypervisor: bool = False
    amx_bf16: bool = False
    amx_tile: bool = False
    amx_int8: bool = False
    cet_ss: bool = False
    # The full flag string as reported (ARM "Features" line).
    raw_features: str | None = None


@dataclass
class ArmInfo:
    """ARM CPU details gathered from /proc/cpuinfo and sysfs."""

    vendor: CpuVendor
    brand: str | None
    codename: str | None
    features: CpuFeatures


def parse_cpuinfo(text: str) -> list[dict[str, str]]:
    """Split /proc/cpuinfo into one key/value mapping per processor block."""
    entries: list[dict[str, str]] = []
    current: dict[str, str] = {}
    for line in text.splitlines():
        if not line.strip():
            if current:
                entries.append(current)
                current = {}
            continue
        key, sep, value = line.partition(":")
        if sep:
            current[key.strip()] = value.strip()
    if current:
        entries.append(current)
    return entries


def _parse_bounded(text: str, pattern: re.Pattern[str], base: int, limit: int) -> int | None:
    if not pattern.fullmatch(text):
        return None
    value = int(text, base)
    return value if value < limit else None


def parse_hex_or_dec(s: str) -> int | None:
    """Parse a 32-bit unsigned value written in hex (0x prefix) or decimal."""
    s = s.strip()
    if s[:2] in ("0x", "0X"):
        return _parse_bounded(s[2:], _HEX, 16, _U32_LIMIT)
    return _parse_bounded(s, _DECIMAL, 10, _U32_LIMIT)


_ARM_IMPLEMENTERS = {
    0x41: "ARM",
    0x42: "Broadcom",
    0x43: "Cavium",
    0x44: "DEC",
    0x46: "Fujitsu",
    0x48: "HiSilicon",
    0x4E: "NVIDIA",
    0x50: "APM",
    0x51: "Qualcomm",
    0x53: "Samsung",
    0x56: "Marvell",
    0x61: "Apple",
    0x69: "Intel",
    0xC0: "Ampere",
}


def arm_implementer_name(implementer: int) -> str:
    """Human-readable name of an ARM implementer code."""
    return _ARM_IMPLEMENTERS.get(implementer, "Unknown")


def parse_arm_cpuinfo_ids(entry: Mapping[str, str]) -> tuple[int, int, int, int] | None:
    """Return (implementer, part, variant, revision) from a cpuinfo entry."""
    implementer_text = entry.get("CPU implementer")
    part_text = entry.get("CPU part")
    if implementer_text is None or part_text is None:
        return None
    implementer = parse_hex_or_dec(implementer_text)
    part = parse_hex_or_dec(part_text)
    if implementer is None or part is None:
        return None

    def optional(key: str) -> int:
        text = entry.get(key)
        value = parse_hex_or_dec(text) if text is not None else None
        return value if value is not None else 0

    return implementer, part, optional("CPU variant"), optional("CPU revision")


def parse_arm_features(features_str: str | None) -> CpuFeatures:
    """Map ARM feature flags onto their closest x86 counterparts."""
    features = CpuFeatures()
    if features_str is None:
        return features
    features.raw_features = features_str
    for flag in features_str.split():
        match flag:
            case "aes":
                features.aes_ni = True
            case "sha1" | "sha2" | "sha3" | "sha512":
                features.sha = True
            case "crc32":
                # x86 CRC32 is part of SSE4.2.
                features.sse4_2 = True
            case "pmull":
                features.pclmulqdq = True
    return features


def read_midr_el1(root: str | os.PathLike[str] = "/") -> tuple[int, int, int, int] | None:
    """Decode MIDR_EL1 from sysfs into (implementer, part, variant, revision)."""
    value = read_u64_optional(Path(root) / _MIDR_PATH)
    if value is None:
        return None
    implementer = (value >> 24) & 0xFF
    variant = (value >> 20) & 0xF
    part = (value >> 4) & 0xFFF
    revision = value & 0xF
    return implementer, part, variant, revision


def gather_arm_info(
    first_proc: Mapping[str, str] | None, root: str | os.PathLike[str] = "/"
) -> ArmInfo | None:
    """ARM CPU details, or None when the CPU is not identified as ARM."""
    if first_proc is None:
        return None
    ids = read_midr_el1(root) or parse_arm_cpuinfo_ids(first_proc)
    if ids is None:
        return None
    implementer, part, variant, revision = ids

    codename = lookup_arm(implementer, part)
    implementer_name = arm_implementer_name(implementer)
    if codename is not None:
        brand = f"{implementer_name} {codename}"
    else:
        brand = (
            f"{implementer_name} (impl 0x{implementer:02x} part 0x{part:03x} "
            f"r{variant}p{revision})"
        )

    return ArmInfo(
        vendor=CpuVendor.ARM,
        brand=brand,
        codename=codename,
        features=parse_arm_features(first_proc.get("Features")),
    )


def vendor_from_procfs(entry: Mapping[str, str] | None) -> CpuVendor:
    """Determine the CPU vendor from a /proc/cpuinfo entry."""
    if entry is None:
        return CpuVendor.unknown("Unknown")
    vendor_id = entry.get("vendor_id")
    if vendor_id is not None:
        if vendor_id == "GenuineIntel":
            return CpuVendor.INTEL
        if vendor_id == "AuthenticAMD":
            return CpuVendor.AMD
        return CpuVendor.unknown(vendor_id)
    if "CPU implementer" in entry:
        return CpuVendor.ARM
    return CpuVendor.unknown("Unknown")


def parse_address_sizes(entry: Mapping[str, str] | None) -> tuple[int | None, int | None]:
    """Parse "48 bits physical, 48 bits virtual" into (physical, virtual)."""
    sizes = entry.get("address sizes") if entry is not None else None
    if sizes is None:
        return None, None
    physical = virtual = None
    for part in sizes.split(","):
        part = part.strip()
        tokens = part.split()
        bits = _parse_bounded(tokens[0], _DECIMAL, 10, _U8_LIMIT) if tokens else None
        if part.endswith("physical"):
            physical = bits
        elif part.endswith("virtual"):
            virtual = bits
    return physical, virtual