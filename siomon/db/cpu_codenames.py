"""CPU microarchitecture codename lookup tables."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class CpuVendor:
    """A CPU vendor; unknown vendors keep the identifier they reported."""

    name: str
    known: bool = False

    INTEL: ClassVar[CpuVendor]
    AMD: ClassVar[CpuVendor]
    ARM: ClassVar[CpuVendor]

    @classmethod
    def unknown(cls, name: str) -> CpuVendor:
        return cls(name, False)

    @classmethod
    def from_vendor_id(cls, vendor_id: str) -> CpuVendor:
        """Map a CPUID vendor string such as "GenuineIntel" to a vendor."""
        if vendor_id == "GenuineIntel":
            return cls.INTEL
        if vendor_id == "AuthenticAMD":
            return cls.AMD
        return cls.unknown(vendor_id)

    def __str__(self) -> str:
        return self.name


CpuVendor.INTEL = CpuVendor("Intel", True)
CpuVendor.AMD = CpuVendor("AMD", True)
CpuVendor.ARM = CpuVendor("ARM", True)


_AMD_CODENAMES: dict[tuple[int, int], str] = {
    # Zen / Zen+ / Zen 2
    (0x17, 0x01): "Zen (Summit Ridge)",
    (0x17, 0x08): "Zen+ (Pinnacle Ridge)",
    (0x17, 0x11): "Zen (Raven Ridge)",
    (0x17, 0x18): "Zen+ (Picasso)",
    (0x17, 0x20): "Zen (Dali)",
    (0x17, 0x31): "Zen 2 (Rome)",
    (0x17, 0x60): "Zen 2 (Renoir)",
    (0x17, 0x68): "Zen 2 (Lucienne)",
    (0x17, 0x71): "Zen 2 (Matisse)",
    (0x17, 0x90): "Zen 2 (Van Gogh)",
    (0x17, 0x98): "Zen 2 (Mero)",
    # Zen 3
    (0x19, 0x01): "Zen 3 (Milan)",
    (0x19, 0x08): "Zen 3 (Chagall)",
    (0x19, 0x21): "Zen 3 (Vermeer)",
    (0x19, 0x40): "Zen 3+ (Rembrandt)",
    (0x19, 0x44): "Zen 3+ (Rembrandt-R)",
    (0x19, 0x50): "Zen 3 (Cezanne)",
    # Zen 4
    (0x19, 0x10): "Zen 4 (Genoa)",
    (0x19, 0x11): "Zen 4c (Bergamo)",
    (0x19, 0x61): "Zen 4 (Raphael)",
    (0x19, 0x74): "Zen 4 (Phoenix)",
    (0x19, 0x78): "Zen 4 (Phoenix 2)",
    # Zen 5
    (0x1A, 0x02): "Zen 5 (Strix Halo)",
    (0x1A, 0x10): "Zen 5 (Turin)",
    (0x1A, 0x11): "Zen 5c (Turin Dense)",
    (0x1A, 0x20): "Zen 5 (Granite Ridge)",
    (0x1A, 0x24): "Zen 5 (Granite Ridge)",
}

_INTEL_CODENAMES: dict[int, str] = {
    0x2A: "Sandy Bridge",
    0x2D: "Sandy Bridge-E",
    0x3A: "Ivy Bridge",
    0x3E: "Ivy Bridge-E",
    0x3C: "Haswell",
    0x45: "Haswell",
    0x46: "Haswell",
    0x3F: "Haswell-E",
    0x3D: "Broadwell",
    0x47: "Broadwell",
    0x4F: "Broadwell-E",
    0x56: "Broadwell-DE",
    0x4E: "Skylake",
    0x5E: "Skylake",
    0x55: "Skylake-X",
    0x8E: "Kaby Lake",
    0x9E: "Kaby Lake",
    0x66: "Cannon Lake",
    0x7E: "Ice Lake",
    0x7D: "Ice Lake",
    0x6A: "Ice Lake-SP",
    0x6C: "Ice Lake-SP",
    0xA5: "Comet Lake",
    0xA6: "Comet Lake",
    0x8C: "Tiger Lake",
    0x8D: "Tiger Lake",
    0xA7: "Rocket Lake",
    0x97: "Alder Lake",
    0x9A: "Alder Lake-P",
    0xB7: "Raptor Lake",
    0xBA: "Raptor Lake-P",
    0xBF: "Raptor Lake-S",
    0xAA: "Meteor Lake",
    0xAC: "Meteor Lake",
    0xBD: "Lunar Lake",
    0xC5: "Arrow Lake",
    0xC6: "Arrow Lake-H",
    0x8F: "Sapphire Rapids",
    0xCF: "Emerald Rapids",
    0xAD: "Granite Rapids",
    0xAE: "Granite Rapids",
}

_ARM_CODENAMES: dict[tuple[int, int], str] = {
    # ARM Ltd
    (0x41, 0xD03): "Cortex-A53",
    (0x41, 0xD04): "Cortex-A35",
    (0x41, 0xD05): "Cortex-A55",
    (0x41, 0xD07): "Cortex-A57",
    (0x41, 0xD08): "Cortex-A72",
    (0x41, 0xD09): "Cortex-A73",
    (0x41, 0xD0A): "Cortex-A75",
    (0x41, 0xD0B): "Cortex-A76",
    (0x41, 0xD0C): "Neoverse N1",
    (0x41, 0xD0D): "Cortex-A77",
    (0x41, 0xD0E): "Cortex-A76AE",
    (0x41, 0xD40): "Neoverse V1",
    (0x41, 0xD41): "Cortex-A78",
    (0x41, 0xD42): "Cortex-A78AE",
    (0x41, 0xD43): "Cortex-A65AE",
    (0x41, 0xD44): "Cortex-X1",
    (0x41, 0xD46): "Cortex-A510",
    (0x41, 0xD47): "Cortex-A710",
    (0x41, 0xD48): "Cortex-X2",
    (0x41, 0xD49): "Neoverse N2",
    (0x41, 0xD4A): "Neoverse E1",
    (0x41, 0xD4B): "Cortex-A78C",
    (0x41, 0xD4C): "Cortex-X1C",
    (0x41, 0xD4D): "Cortex-A715",
    (0x41, 0xD4E): "Cortex-X3",
    (0x41, 0xD4F): "Neoverse V2",
    (0x41, 0xD80): "Cortex-A520",
    (0x41, 0xD81): "Cortex-A720",
    (0x41, 0xD82): "Cortex-X4",
    (0x41, 0xD84): "Neoverse V3",
    (0x41, 0xD85): "Cortex-X925",
    (0x41, 0xD87): "Cortex-A725",
    # Apple
    (0x61, 0x022): "Apple M1 Icestorm",
    (0x61, 0x023): "Apple M1 Firestorm",
    (0x61, 0x028): "Apple M1 Pro/Max Avalanche",
    (0x61, 0x029): "Apple M1 Pro/Max Blizzard",
    (0x61, 0x032): "Apple M2 Avalanche",
    (0x61, 0x033): "Apple M2 Blizzard",
    # Ampere
    (0xC0, 0xAC3): "Ampere Altra",
    (0xC0, 0xAC4): "Ampere Altra Max",
    # Qualcomm
    (0x51, 0x001): "Qualcomm Oryon",
}


def lookup_with_brand(vendor: CpuVendor, family: int, model: int, brand: str) -> str | None:
    """Look up a codename, using the brand string to disambiguate shared IDs."""
    if vendor == CpuVendor.AMD:
        return _lookup_amd(family, model, brand)
    if vendor == CpuVendor.INTEL:
        return _lookup_intel(family, model)
    return None


def _lookup_amd(family: int, model: int, brand: str) -> str | None:
    if family == 0x1A and model == 0x08:
        # Shared between Strix Point (mobile) and Turin (workstation/server).
        lower = brand.lower()
        if "threadripper" in lower or "epyc" in lower:
            return "Zen 5 (Turin)"
        return "Zen 5 (Strix Point)"
    if family == 0x19 and 0xA0 <= model <= 0xAF:
        return "Zen 4c (Dense)"
    return _AMD_CODENAMES.get((family, model))


def _lookup_intel(family: int, model: int) -> str | None:
    if family != 6:
        return None
    return _INTEL_CODENAMES.get(model)


def lookup_arm(implementer: int, part: int) -> str | None:
    """Look up an ARM core name by implementer and part codes."""
    return _ARM_CODENAMES.get((implementer, part))